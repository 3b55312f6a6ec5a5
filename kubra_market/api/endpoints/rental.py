from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core import rentals as rental_service
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Shop
from kubra_market.models.rental import Rental
from kubra_market.schemas import RentalCreate, RentalResponse, CurrentRentalResponse, RentalPayRequest

router = APIRouter()

# Current (upcoming) rental: earliest unpaid one that is not yet due
@router.get("", response_model=CurrentRentalResponse)
def read_current_rental(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    rental = rental_service.get_current_rental(db, merchant_id)
    if not rental:
        raise HTTPException(status_code=404, detail="No current rental found")

    result = CurrentRentalResponse.model_validate(rental)
    result.shop_name = rental.shop.name if rental.shop else ""
    return result

@router.get("/history", response_model=List[RentalResponse])
def read_rental_history(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return rental_service.list_rentals(db, merchant_id)

@router.post("", response_model=RentalResponse, status_code=status.HTTP_201_CREATED)
def create_rental(
    rental_in: RentalCreate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    shop = db.query(Shop).filter(Shop.merchant_id == merchant_id).first()
    if not shop:
        raise HTTPException(status_code=400, detail="Merchant has no shop")

    new_rental = Rental(
        merchant_id=merchant_id,
        shop_id=shop.id,
        amount=rental_in.amount,
        start_date=rental_in.start_date,
        due_date=rental_in.due_date,
        is_paid=False
    )
    db.add(new_rental)
    db.commit()
    db.refresh(new_rental)
    return new_rental

@router.post("/pay", response_model=RentalResponse)
def pay_rental(
    pay_in: RentalPayRequest,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return rental_service.pay_rental(db, merchant_id, pay_in.rental_id)
