"""
Clinic store - the persistence collaborator used by the scheduling core.

The availability engine and the follow-up lifecycle only talk to a
ClinicStore, so any backend exposing these coroutines can stand in for
the database. SessionStore is the SQLAlchemy implementation; it delegates
to the per-domain service modules and commits every write on its own.
"""
import abc
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from datetime import date

from .appointments import service as appointment_service
from .appointments.models import Appointment, Service
from .blockers import service as blocker_service
from .blockers.models import CalendarBlocker
from .followups import service as followup_service
from .followups.models import Followup


class ClinicStore(abc.ABC):
    """
    Abstract persistence operations consumed by the scheduling core.

    Every method is a coroutine: store calls are the only points where the
    core yields. Errors propagate unchanged (ResourceNotFoundException,
    StoreUnavailableException, SchedulingValidationException).
    """

    @abc.abstractmethod
    async def fetch_appointments(self, day: date, branch_id: Optional[int] = None) -> List[Appointment]:
        """Appointments starting on `day`, by start time; None means all branches."""

    @abc.abstractmethod
    async def fetch_blockers(self, day: date, doctor_id: int) -> List[CalendarBlocker]:
        """The doctor's blockers starting on `day`, by start time."""

    @abc.abstractmethod
    async def create_appointment(self, fields: Dict[str, Any]) -> Appointment:
        """Create an appointment; the end time follows from the service duration."""

    @abc.abstractmethod
    async def update_appointment(self, appointment_id: int, fields: Dict[str, Any]) -> Appointment:
        """Partially update an appointment."""

    @abc.abstractmethod
    async def fetch_followups(self, day: date, branch_id: Optional[int] = None) -> List[Followup]:
        """Non-canceled follow-ups scheduled on `day`, in creation order."""

    @abc.abstractmethod
    async def create_followup(self, fields: Dict[str, Any]) -> Followup:
        """Create a follow-up."""

    @abc.abstractmethod
    async def update_followup(self, followup_id: int, fields: Dict[str, Any]) -> Followup:
        """Partially update a follow-up."""

    @abc.abstractmethod
    async def get_followup(self, followup_id: int) -> Followup:
        """Look up one follow-up."""

    @abc.abstractmethod
    async def get_service(self, service_id: int) -> Service:
        """Look up a catalogue service (for its duration)."""

    @abc.abstractmethod
    async def create_blocker(self, fields: Dict[str, Any]) -> CalendarBlocker:
        """Block time on a doctor's calendar."""


class SessionStore(ClinicStore):
    """ClinicStore backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    async def fetch_appointments(self, day, branch_id=None):
        return appointment_service.list_appointments_for_date(self.db, day, branch_id)

    async def fetch_blockers(self, day, doctor_id):
        return blocker_service.list_blockers_for_date(self.db, day, doctor_id)

    async def create_appointment(self, fields):
        return appointment_service.create_appointment(self.db, fields)

    async def update_appointment(self, appointment_id, fields):
        return appointment_service.update_appointment(self.db, appointment_id, fields)

    async def fetch_followups(self, day, branch_id=None):
        return followup_service.list_followups_for_date(self.db, day, branch_id)

    async def create_followup(self, fields):
        return followup_service.create_followup(self.db, fields)

    async def update_followup(self, followup_id, fields):
        return followup_service.update_followup(self.db, followup_id, fields)

    async def get_followup(self, followup_id):
        return followup_service.get_followup(self.db, followup_id)

    async def get_service(self, service_id):
        return appointment_service.get_service(self.db, service_id)

    async def create_blocker(self, fields):
        return blocker_service.create_blocker(self.db, fields)
