from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core import reports
from kubra_market.core.exceptions import ValidationError
from kubra_market.db.session import get_db
from kubra_market.schemas import SalesSummary, OrderResponse

router = APIRouter()

# Totals over every order, cancelled ones included
@router.get("/summary", response_model=SalesSummary)
def read_sales_summary(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return reports.get_sales_summary(db, merchant_id)

@router.get("/orders", response_model=List[OrderResponse])
def read_sales_orders(
    limit: int = Query(10, le=100),
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    if limit < 1:
        raise ValidationError("Invalid limit parameter")
    return reports.get_sales_orders(db, merchant_id, limit)
