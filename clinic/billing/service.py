"""
Billing Service - Invoice creation and payment recording.
"""
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import date, datetime, timezone

from ..exceptions import ResourceNotFoundException, StoreUnavailableException
from ..appointments.models import Appointment
from .models import Invoice, InvoiceStatus

# Set up logging
logger = logging.getLogger(__name__)

def create_invoice_for_appointment(db: Session, appointment: Appointment) -> Invoice:
    """
    Raise a pending invoice for a completed appointment and link it.

    The invoice is added to the session but not committed; the caller
    commits it together with the status change that triggered it.

    Args:
        db: Database session
        appointment: Appointment that has just been completed

    Returns:
        Invoice: The new invoice
    """
    invoice = Invoice(
        appointment_id=appointment.id,
        service_name=appointment.service.name,
        amount=appointment.service.price,
        status=InvoiceStatus.PENDING,
        patient_name=appointment.patient.name,
        invoice_date=date.today()
    )
    db.add(invoice)
    db.flush()
    appointment.invoice_id = invoice.id
    logger.info(f"Invoice {invoice.id} raised for appointment {appointment.id}")
    return invoice

def get_invoice_for_appointment(db: Session, appointment_id: int) -> Optional[Invoice]:
    """
    Get the invoice raised for an appointment, if any.

    Args:
        db: Database session
        appointment_id: ID of the appointment

    Returns:
        Optional[Invoice]: The invoice, or None when the appointment is not billed yet
    """
    return db.query(Invoice).filter(Invoice.appointment_id == appointment_id).first()

def record_payment(db: Session, invoice_id: int) -> Invoice:
    """
    Mark an invoice as paid.

    Args:
        db: Database session
        invoice_id: ID of the invoice

    Returns:
        Invoice: Updated invoice

    Raises:
        ResourceNotFoundException: If invoice not found
        StoreUnavailableException: If the update cannot be committed
    """
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise ResourceNotFoundException("Invoice not found")

    invoice.status = InvoiceStatus.PAID
    invoice.paid_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(invoice)
        logger.info(f"Payment recorded for invoice {invoice_id}")
        return invoice
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error recording payment for invoice {invoice_id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while recording the payment")
