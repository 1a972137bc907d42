"""
Bootstrap utilities for demo data.
Loads the clinic's branches, staff, service catalogue and a few patients
into an empty database so the front desk has something to work with.
"""
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from ..config import settings
from ..users.models import Branch, User, UserRole
from ..patients.models import Patient
from ..appointments.models import Appointment, AppointmentStatus, Service
from ..followups.models import Followup, FollowupStatus, Priority

logger = logging.getLogger(__name__)

def data_exists(db: Session) -> bool:
    """
    Check if the clinic has already been set up.
    
    Args:
        db: Database session
        
    Returns:
        bool: True if at least one branch exists
    """
    return db.query(Branch).count() > 0

def create_demo_data(db: Session) -> bool:
    """
    Insert the demo clinic.
    
    Args:
        db: Database session
        
    Returns:
        bool: True if the data was created successfully, False otherwise
    """
    today = date.today()
    try:
        west = Branch(name="West Clinic")
        east = Branch(name="East Clinic")
        db.add_all([west, east])
        db.flush()

        doctor = User(name="Dr. Prasanna", email="doctor@clinic.local", role=UserRole.DOCTOR)
        front_desk = User(name="Anjali (Reception)", email="anjali@clinic.local", role=UserRole.RECEPTIONIST, branch_id=west.id)
        db.add_all([
            doctor,
            front_desk,
            User(name="Rohan (Reception)", email="rohan@clinic.local", role=UserRole.RECEPTIONIST, branch_id=east.id),
            User(name="Clinic Admin", email="admin@clinic.local", role=UserRole.ADMIN),
        ])

        consultation = Service(name="Consultation", duration_minutes=30, price=Decimal("500"))
        checkup = Service(name="Routine Check-up", duration_minutes=20, price=Decimal("300"))
        db.add_all([
            consultation,
            checkup,
            Service(name="Extended Consultation", duration_minutes=60, price=Decimal("900")),
        ])

        sowmya = Patient(name="Sowmya", phone="9876543210", dob=date(1993, 5, 12), gender="F")
        rajesh = Patient(name="Rajesh Kumar", phone="8765432109", dob=date(1985, 11, 20), gender="M")
        priya = Patient(name="Priya Sharma", phone="7654321098", dob=date(2001, 2, 10), gender="F")
        amit = Patient(name="Amit Singh", phone="6543210987", dob=date(1978, 8, 30), gender="M")
        db.add_all([sowmya, rajesh, priya, amit])
        db.flush()

        def at(hour, minute=0):
            return datetime.combine(today, time(hour, minute))

        db.add_all([
            Appointment(branch_id=west.id, doctor_id=doctor.id, patient_id=sowmya.id, service_id=consultation.id,
                        start_time=at(10), end_time=at(10, 30), status=AppointmentStatus.CONFIRMED),
            Appointment(branch_id=west.id, doctor_id=doctor.id, patient_id=rajesh.id, service_id=checkup.id,
                        start_time=at(11), end_time=at(11, 20), status=AppointmentStatus.CONFIRMED),
            Appointment(branch_id=east.id, doctor_id=doctor.id, patient_id=priya.id, service_id=consultation.id,
                        start_time=at(14), end_time=at(14, 30), status=AppointmentStatus.CONFIRMED),
        ])

        db.add_all([
            Followup(patient_id=sowmya.id, doctor_id=doctor.id, branch_id=west.id,
                     scheduled_date=today - timedelta(days=2), scheduled_time=time(10, 30),
                     status=FollowupStatus.PENDING, priority=Priority.HIGH,
                     notes="Check sugar levels.", created_by=front_desk.id),
            Followup(patient_id=rajesh.id, doctor_id=doctor.id, branch_id=west.id,
                     scheduled_date=today, scheduled_time=time(11),
                     status=FollowupStatus.PENDING, priority=Priority.URGENT,
                     recurrence={"type": "daily", "interval": 7},
                     notes="Weekly BP check.", created_by=front_desk.id),
            Followup(patient_id=priya.id, doctor_id=doctor.id, branch_id=east.id,
                     scheduled_date=today, status=FollowupStatus.SNOOZED, priority=Priority.NORMAL,
                     notes="Follow up on lab reports.", created_by=front_desk.id),
            Followup(patient_id=amit.id, doctor_id=doctor.id, branch_id=east.id,
                     scheduled_date=today + timedelta(days=3), status=FollowupStatus.PENDING,
                     priority=Priority.LOW, notes="Routine check-up call.", created_by=front_desk.id),
        ])

        db.commit()
        logger.info("✅ Demo clinic created: 2 branches, 4 staff, 3 services, 4 patients")
        return True

    except SQLAlchemyError as e:
        logger.error(f"❌ Failed to create demo data: {str(e)}")
        db.rollback()
        return False

def bootstrap_if_needed(db: Session) -> None:
    """
    Seed the demo clinic on an empty database when enabled.
    This function should be called during application startup.
    
    Args:
        db: Database session
    """
    if not settings.seed_demo_data:
        logger.info("Demo data disabled (SEED_DEMO_DATA=false).")
        return

    if data_exists(db):
        logger.info("✅ Clinic data found. Bootstrap not needed.")
        return

    logger.info("🚀 Empty database. Loading demo clinic...")
    if not create_demo_data(db):
        logger.warning("⚠️  Demo data bootstrap skipped.")
