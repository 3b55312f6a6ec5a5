# kubra_market/api/deps.py
from typing import Annotated
from fastapi import Depends, Path, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from kubra_market.core.config import settings
from kubra_market.core.exceptions import AuthenticationError
from kubra_market.core.sessions import SessionStore
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Merchant
from kubra_market.schemas import MAX_INT

session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

# Row id in a URL; larger values cannot name a row
RowIdPath = Annotated[int, Path(le=MAX_INT)]

# 1. Session store lives on the app
def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store

# 2. Cookie -> merchant id (401 when missing, expired or logged out)
def get_current_merchant_id(
    token: str = Depends(session_cookie),
    store: SessionStore = Depends(get_session_store),
) -> int:
    merchant_id = store.resolve(token)
    if merchant_id is None:
        raise AuthenticationError()
    return merchant_id

# 3. Full merchant row, for endpoints that return the profile
def get_current_merchant(
    merchant_id: int = Depends(get_current_merchant_id),
    db: Session = Depends(get_db),
) -> Merchant:
    merchant = db.get(Merchant, merchant_id)
    if merchant is None:
        raise AuthenticationError()
    return merchant
