from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core.config import utcnow
from kubra_market.core.reports import get_low_stock_products
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Shop
from kubra_market.models.order import OrderItem
from kubra_market.models.product import Product
from kubra_market.schemas import MAX_INT, ProductCreate, ProductUpdate, ProductResponse, MessageResponse

router = APIRouter()

NULLABLE_FIELDS = {"image_url", "category"}

@router.get("", response_model=List[ProductResponse])
def read_products(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return db.query(Product).filter(
        Product.merchant_id == merchant_id
    ).order_by(Product.updated_at.desc(), Product.id.desc()).all()

@router.get("/low-stock", response_model=List[ProductResponse])
def read_low_stock_products(
    threshold: Optional[int] = Query(None, ge=1, le=MAX_INT),
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return get_low_stock_products(db, merchant_id, threshold)

@router.get("/{product_id}", response_model=ProductResponse)
def read_product(
    product_id: deps.RowIdPath,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return get_owned_or_raise(db, Product, product_id, merchant_id, "Product")

@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_in: ProductCreate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    # A product always hangs off the merchant's shop
    shop = db.query(Shop).filter(Shop.merchant_id == merchant_id).first()
    if not shop:
        raise HTTPException(status_code=400, detail="Merchant has no shop, please create a shop first")

    new_product = Product(
        merchant_id=merchant_id,
        shop_id=shop.id,
        **product_in.model_dump()
    )
    db.add(new_product)
    db.commit()
    db.refresh(new_product)
    return new_product

@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: deps.RowIdPath,
    product_in: ProductUpdate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    # Lock first: the ownership check and the write share one transaction
    product = get_owned_or_raise(db, Product, product_id, merchant_id, "Product", for_update=True)

    update_data = product_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(product, field, value)
    product.updated_at = utcnow()

    db.add(product)
    db.commit()
    db.refresh(product)
    return product

@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: deps.RowIdPath,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    product = get_owned_or_raise(db, Product, product_id, merchant_id, "Product", for_update=True)

    try:
        # order lines referencing the product go with it (FK cascade)
        db.execute(
            delete(OrderItem).where(OrderItem.product_id == product.id),
            execution_options={"synchronize_session": False},
        )
        db.delete(product)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"message": "Product deleted successfully"}
