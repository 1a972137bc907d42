"""
Invoice Model - Bills raised for completed consultations.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Enum, func
import enum
from ..database import Base

class InvoiceStatus(str, enum.Enum):
    """Enum for invoice status"""
    PENDING = "pending"
    PAID = "paid"

class Invoice(Base):
    """
    Invoice Model - One invoice per completed appointment
    
    Fields:
    - id: Primary key for invoice
    - appointment_id: Appointment being billed
    - service_name: Service name at the time of billing
    - amount: Service price at the time of billing
    - status: Payment status
    - patient_name: Patient name at the time of billing
    - invoice_date: Day the invoice was raised
    - paid_at: When payment was recorded
    """
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="CASCADE"), unique=True, nullable=False)
    service_name = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Enum(InvoiceStatus, name="invoice_status"), default=InvoiceStatus.PENDING, nullable=False)
    patient_name = Column(String, nullable=False)
    invoice_date = Column(Date, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the Invoice model"""
        return f"<Invoice(id={self.id}, appointment_id={self.appointment_id}, status='{self.status}')>"
