"""
Billing Router - Invoice lookup and payment endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import ResourceNotFoundException
from ..core.dependencies import require_permission
from ..core.permissions import Permission
from ..users.models import User
from .schemas import InvoiceResponse
from .service import get_invoice_for_appointment, record_payment

router = APIRouter()

@router.get("/appointments/{appointment_id}/invoice", response_model=InvoiceResponse)
async def get_appointment_invoice(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.VIEW_INVOICES))
):
    """
    Get the invoice raised for an appointment
    """
    invoice = get_invoice_for_appointment(db, appointment_id)
    if not invoice:
        raise ResourceNotFoundException("No invoice for this appointment")
    return invoice

@router.post("/invoices/{invoice_id}/payment", response_model=InvoiceResponse)
async def pay_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.RECORD_PAYMENT))
):
    """
    Record payment of an invoice
    """
    return record_payment(db, invoice_id)
