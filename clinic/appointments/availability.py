"""
Availability Engine - Bookable slots for a day.

Slots are generated every 15 minutes inside two working bands
(09:00-13:00 and 14:00-17:00). A slot is kept when the whole service fits
inside its band and does not overlap any appointment or blocker, all
intervals being half-open [start, end). Slots that start or end exactly
where an existing booking or block ends or starts are flagged as
recommended and listed first, to pack the day and avoid leaving gaps.
"""
from typing import List, Optional, Iterable, Tuple
import logging
from datetime import date, datetime, time, timedelta

from ..exceptions import SchedulingValidationException, SlotUnavailableException
from ..store import ClinicStore
from .models import Appointment, AppointmentStatus
from .schemas import Slot

# Set up logging
logger = logging.getLogger(__name__)

# (start hour, end hour) of each working band
WORKING_BANDS: Tuple[Tuple[int, int], ...] = ((9, 13), (14, 17))
SLOT_INTERVAL_MINUTES = 15
RECOMMENDATION_TOLERANCE = timedelta(seconds=1)


def _occupied_intervals(appointments: Iterable, blockers: Iterable) -> List[Tuple[datetime, datetime]]:
    return [(item.start_time, item.end_time) for item in list(appointments) + list(blockers)]


def _abuts(start: datetime, end: datetime, occupied: List[Tuple[datetime, datetime]]) -> bool:
    return any(
        abs(start - busy_end) < RECOMMENDATION_TOLERANCE or abs(busy_start - end) < RECOMMENDATION_TOLERANCE
        for busy_start, busy_end in occupied
    )


def compute_slots(
    day: date,
    duration_minutes: int,
    appointments: Iterable,
    blockers: Iterable,
    now: datetime
) -> List[Slot]:
    """
    Compute the bookable slots of a day.

    Args:
        day: Day to schedule on
        duration_minutes: Length of the service being booked
        appointments: Existing appointments (anything with start_time/end_time)
        blockers: Doctor blockers (anything with start_time/end_time)
        now: Current time; on the current day, slots starting before it are dropped

    Returns:
        List[Slot]: Recommended slots first, then the rest, each group in
            chronological order. Empty when nothing fits.

    Raises:
        SchedulingValidationException: If the duration is not positive
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise SchedulingValidationException("Service duration must be a positive number of minutes")

    duration = timedelta(minutes=duration_minutes)
    occupied = _occupied_intervals(appointments, blockers)
    is_today = now.date() == day

    slots = []
    for band_start, band_end in WORKING_BANDS:
        band_close = datetime.combine(day, time(band_end))
        for hour in range(band_start, band_end):
            for minute in range(0, 60, SLOT_INTERVAL_MINUTES):
                start = datetime.combine(day, time(hour, minute))
                if is_today and start < now:
                    continue

                end = start + duration
                if end > band_close:
                    continue

                if any(start < busy_end and end > busy_start for busy_start, busy_end in occupied):
                    continue

                slots.append(Slot(
                    time=f"{hour:02d}:{minute:02d}",
                    start_time=start,
                    end_time=end,
                    is_recommended=_abuts(start, end, occupied)
                ))

    # sorted() is stable, so each group stays chronological
    return sorted(slots, key=lambda slot: not slot.is_recommended)


async def find_available_slots(
    store: ClinicStore,
    day: date,
    service_id: int,
    branch_id: Optional[int],
    doctor_id: int,
    now: Optional[datetime] = None
) -> List[Slot]:
    """
    Fetch the day's occupancy and compute its slots in one step.

    Callers must go through this function whenever the day, service or
    branch changes, so slots are never computed from stale bookings.

    Args:
        store: Persistence collaborator
        day: Day to schedule on
        service_id: Service being booked (fixes the duration)
        branch_id: Branch whose appointments occupy the calendar (None for all)
        doctor_id: Doctor whose blockers occupy the calendar
        now: Current time (defaults to datetime.now())

    Returns:
        List[Slot]: Ordered bookable slots
    """
    service = await store.get_service(service_id)
    appointments = await store.fetch_appointments(day, branch_id)
    blockers = await store.fetch_blockers(day, doctor_id)

    active = [a for a in appointments if a.status != AppointmentStatus.CANCELED]
    slots = compute_slots(day, service.duration_minutes, active, blockers, now or datetime.now())
    logger.info(
        f"{len(slots)} slots for service {service_id} on {day} "
        f"(branch {branch_id}, doctor {doctor_id}, {len(active)} appointments, {len(blockers)} blockers)"
    )
    return slots


async def book_slot(
    store: ClinicStore,
    patient_id: int,
    service_id: int,
    day: date,
    slot_time: str,
    branch_id: int,
    doctor_id: int,
    now: Optional[datetime] = None
) -> Appointment:
    """
    Book a confirmed appointment at one of the day's slots.

    Availability is recomputed from fresh data right before booking.

    Args:
        store: Persistence collaborator
        patient_id: Patient being booked
        service_id: Service being booked
        day: Day of the visit
        slot_time: Selected slot start in HH:MM
        branch_id: Branch of the visit
        doctor_id: Doctor seeing the patient
        now: Current time (defaults to datetime.now())

    Returns:
        Appointment: The new appointment

    Raises:
        SlotUnavailableException: If the slot is taken, past, or outside working hours
    """
    now = now or datetime.now()
    if day < now.date():
        logger.warning(f"Rejected booking on past day {day}")
        raise SlotUnavailableException("Appointments cannot be booked on a past day")

    slots = await find_available_slots(store, day, service_id, branch_id, doctor_id, now)
    slot = next((s for s in slots if s.time == slot_time), None)
    if slot is None:
        logger.warning(f"Slot {day} {slot_time} no longer available for service {service_id}")
        raise SlotUnavailableException()

    return await store.create_appointment({
        "patient_id": patient_id,
        "service_id": service_id,
        "start_time": slot.start_time,
        "branch_id": branch_id,
        "doctor_id": doctor_id,
        "status": AppointmentStatus.CONFIRMED,
    })
