"""
Billing Schemas - Pydantic models for invoices.
"""
from typing import Optional
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from .models import InvoiceStatus

class InvoiceResponse(BaseModel):
    """Invoice Response Schema"""
    id: int
    appointment_id: int
    service_name: str
    amount: Decimal
    status: InvoiceStatus
    patient_name: str
    invoice_date: date
    paid_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
