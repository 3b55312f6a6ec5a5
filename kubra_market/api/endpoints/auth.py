import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core import accounts
from kubra_market.core.config import settings
from kubra_market.core.sessions import SessionStore
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Merchant
from kubra_market.schemas import LoginRequest, MerchantCreate, MerchantResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=MerchantResponse, status_code=status.HTTP_201_CREATED)
def register_merchant(
    merchant_in: MerchantCreate,
    db: Session = Depends(get_db),
):
    return accounts.create_merchant(db, merchant_in)

@router.post("/login", response_model=MerchantResponse)
def login(
    login_in: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(deps.get_session_store),
):
    merchant = accounts.authenticate(db, login_in.username, login_in.password)
    if not merchant:
        logger.info("Failed login for %s", login_in.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # Session id goes into the store, the signed token into the cookie
    token = store.create(merchant.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=int(store.ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info("Merchant %s logged in", merchant.id)
    return merchant

@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(deps.session_cookie),
    store: SessionStore = Depends(deps.get_session_store),
):
    store.invalidate(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Logged out successfully"}

@router.get("/current-merchant", response_model=MerchantResponse)
def read_current_merchant(
    current_merchant: Merchant = Depends(deps.get_current_merchant),
):
    return current_merchant

@router.delete("/current-merchant", response_model=MessageResponse)
def delete_current_merchant(
    response: Response,
    merchant_id: int = Depends(deps.get_current_merchant_id),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(deps.get_session_store),
):
    # Closing the account removes the shop, catalog, orders and the rest
    accounts.delete_merchant(db, merchant_id)
    store.invalidate_merchant(merchant_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"message": "Account deleted"}
