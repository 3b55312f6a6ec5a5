from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core import accounts
from kubra_market.core.config import utcnow
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Shop
from kubra_market.schemas import ShopCreate, ShopUpdate, ShopResponse

router = APIRouter()

# Columns that may be cleared with an explicit null
NULLABLE_FIELDS = {"banner_url", "logo_url"}

@router.get("", response_model=ShopResponse)
def read_shop(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    shop = db.query(Shop).filter(Shop.merchant_id == merchant_id).first()
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop

@router.post("", response_model=ShopResponse, status_code=status.HTTP_201_CREATED)
def create_shop(
    shop_in: ShopCreate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return accounts.create_shop(db, merchant_id, shop_in)

@router.patch("", response_model=ShopResponse)
def update_shop(
    shop_in: ShopUpdate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    shop = db.query(Shop).filter(Shop.merchant_id == merchant_id).with_for_update().first()
    if not shop:
        raise HTTPException(status_code=404, detail="Shop not found")

    update_data = shop_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(shop, field, value)
    shop.updated_at = utcnow()

    db.add(shop)
    db.commit()
    db.refresh(shop)
    return shop
