from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core.reports import get_dashboard
from kubra_market.db.session import get_db
from kubra_market.schemas import DashboardResponse

router = APIRouter()

@router.get("", response_model=DashboardResponse)
def read_dashboard(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return get_dashboard(db, merchant_id)
