from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from kubra_market.api import deps
from kubra_market.core.config import utcnow
from kubra_market.core.notifications import add_notification
from kubra_market.core.tenancy import get_owned_or_raise
from kubra_market.db.session import get_db
from kubra_market.models.merchant import Shop
from kubra_market.models.notification import NotificationType
from kubra_market.models.rental import MaintenanceRequest
from kubra_market.schemas import MaintenanceRequestCreate, MaintenanceRequestResponse, MaintenanceStatusUpdate

router = APIRouter()

@router.post("", response_model=MaintenanceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_maintenance_request(
    request_in: MaintenanceRequestCreate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    shop = db.query(Shop).filter(Shop.merchant_id == merchant_id).first()
    if not shop:
        raise HTTPException(status_code=400, detail="Merchant has no shop")

    new_request = MaintenanceRequest(
        merchant_id=merchant_id,
        shop_id=shop.id,
        issue_type=request_in.issue_type,
        description=request_in.description,
        priority=request_in.priority.value,
    )
    db.add(new_request)

    # Confirmation lands in the same commit as the ticket
    add_notification(
        db,
        merchant_id=merchant_id,
        type=NotificationType.SYSTEM,
        title="Maintenance Request Submitted",
        message=f"Your maintenance request for {request_in.issue_type} has been submitted successfully.",
    )
    db.commit()
    db.refresh(new_request)
    return new_request

@router.get("", response_model=List[MaintenanceRequestResponse])
def read_maintenance_requests(
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    return db.query(MaintenanceRequest).filter(
        MaintenanceRequest.merchant_id == merchant_id
    ).order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc()).all()

@router.patch("/{request_id}", response_model=MaintenanceRequestResponse)
def update_maintenance_request(
    request_id: deps.RowIdPath,
    status_in: MaintenanceStatusUpdate,
    db: Session = Depends(get_db),
    merchant_id: int = Depends(deps.get_current_merchant_id)
):
    ticket = get_owned_or_raise(db, MaintenanceRequest, request_id, merchant_id, "Maintenance request", for_update=True)
    ticket.status = status_in.status.value
    ticket.updated_at = utcnow()
    db.commit()
    db.refresh(ticket)
    return ticket
