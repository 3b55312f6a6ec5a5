from sqlalchemy.orm import Session
from kubra_market.core.exceptions import AuthorizationError, NotFoundError


def get_owned_or_raise(db: Session, model, row_id: int, merchant_id: int, label: str, for_update: bool = False):
    """
    Load a merchant-scoped row and check it belongs to the session merchant.

    With for_update the row is locked first, so the ownership check and the
    write that follows happen in the same transaction.
    """
    query = db.query(model).filter(model.id == row_id)
    if for_update:
        query = query.with_for_update()
    row = query.first()

    if row is None:
        raise NotFoundError(f"{label} not found")
    if row.merchant_id != merchant_id:
        raise AuthorizationError()
    return row
