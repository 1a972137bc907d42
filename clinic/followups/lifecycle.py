"""
Follow-up Lifecycle - Status transitions and recurrence of follow-up tasks.

States: pending -> done | snoozed | canceled, snoozed -> done | snoozed.
Done and canceled are terminal. Completing a recurring follow-up closes
the record and schedules the next occurrence as a new pending record.
Snoozing moves the record to a later date in place.

Bulk operations fire one store call per record, await them together and
never roll back the ones that succeeded.
"""
import asyncio
from typing import List, Optional, Iterable, Set, Dict, Any
import logging
from datetime import date, timedelta

from ..exceptions import (
    InvalidTransitionException,
    SchedulingValidationException,
    UnsupportedRecurrenceException,
    BulkOperationException,
)
from ..store import ClinicStore
from .models import Followup, FollowupStatus, Priority, RecurrenceType

# Set up logging
logger = logging.getLogger(__name__)

PRIORITY_RANK: Dict[Priority, int] = {
    Priority.URGENT: 4,
    Priority.HIGH: 3,
    Priority.NORMAL: 2,
    Priority.LOW: 1,
}


def next_occurrence(scheduled_date: date, recurrence: Dict[str, Any]) -> date:
    """
    Compute the date of the next occurrence of a recurring follow-up.

    Only daily rules are supported; weekly and monthly rules have no agreed
    advance policy yet and are rejected rather than guessed.

    Args:
        scheduled_date: Date of the occurrence being completed
        recurrence: Rule with "type" and "interval"

    Returns:
        date: Date of the next occurrence

    Raises:
        UnsupportedRecurrenceException: For weekly, monthly or unknown types
    """
    recurrence_type = recurrence.get("type")
    if recurrence_type == RecurrenceType.DAILY:
        return scheduled_date + timedelta(days=int(recurrence["interval"]))
    raise UnsupportedRecurrenceException(str(getattr(recurrence_type, "value", recurrence_type)))


def _ensure_open(followup: Followup, target: FollowupStatus) -> None:
    if followup.is_closed:
        current = FollowupStatus(followup.status).value
        logger.warning(f"Rejected follow-up {followup.id} transition {current} -> {target.value}")
        raise InvalidTransitionException(current, target.value)


async def mark_done(store: ClinicStore, followup: Followup, acting_user_id: int) -> Followup:
    """
    Mark a follow-up as done, scheduling the next occurrence if it recurs.

    The next date is computed before anything is written, so an unsupported
    recurrence leaves the record untouched. If the store rejects the status
    update, nothing changes either. If creating the next occurrence fails,
    the original stays done and the error propagates.

    Args:
        store: Persistence collaborator
        followup: Follow-up being completed
        acting_user_id: User completing it (creator of the next occurrence)

    Returns:
        Followup: The updated original record
    """
    _ensure_open(followup, FollowupStatus.DONE)

    next_date = next_occurrence(followup.scheduled_date, followup.recurrence) if followup.recurrence else None
    # Copy before the update refreshes the record
    carried = {
        "patient_id": followup.patient_id,
        "doctor_id": followup.doctor_id,
        "branch_id": followup.branch_id,
        "scheduled_time": followup.scheduled_time,
        "priority": followup.priority,
        "recurrence": followup.recurrence,
        "notes": followup.notes,
    }

    updated = await store.update_followup(followup.id, {"status": FollowupStatus.DONE})

    if next_date is not None:
        created = await store.create_followup({
            **carried,
            "scheduled_date": next_date,
            "status": FollowupStatus.PENDING,
            "created_by": acting_user_id,
        })
        logger.info(f"Follow-up {updated.id} done; next occurrence {created.id} scheduled for {next_date}")
    else:
        logger.info(f"Follow-up {updated.id} done")

    return updated


async def snooze(store: ClinicStore, followup: Followup, days: int) -> Followup:
    """
    Push a follow-up to a later date and mark it snoozed.

    Args:
        store: Persistence collaborator
        followup: Follow-up being deferred
        days: Number of days to push it by (at least 1)

    Returns:
        Followup: The moved record
    """
    if days is None or days < 1:
        raise SchedulingValidationException("Snooze must push the follow-up by at least one day")
    _ensure_open(followup, FollowupStatus.SNOOZED)

    new_date = followup.scheduled_date + timedelta(days=days)
    updated = await store.update_followup(
        followup.id,
        {"scheduled_date": new_date, "status": FollowupStatus.SNOOZED}
    )
    logger.info(f"Follow-up {updated.id} snoozed to {new_date}")
    return updated


async def _run_bulk(action: str, followups: List[Followup], calls) -> None:
    results = await asyncio.gather(*calls, return_exceptions=True)
    failed_ids = []
    for followup, result in zip(followups, results):
        if isinstance(result, Exception):
            logger.error(f"Bulk {action} failed for follow-up {followup.id}: {result}")
            failed_ids.append(followup.id)
    if failed_ids:
        raise BulkOperationException(action, failed_ids, len(followups))
    logger.info(f"Bulk {action} applied to {len(followups)} follow-ups")


async def bulk_mark_done(store: ClinicStore, followups: Iterable[Followup], acting_user_id: int) -> None:
    """
    Mark every follow-up of a selection as done.

    Raises:
        BulkOperationException: If any record failed; the others stay done
    """
    followups = list(followups)
    await _run_bulk("mark done", followups, [mark_done(store, f, acting_user_id) for f in followups])


async def bulk_snooze(store: ClinicStore, followups: Iterable[Followup], days: int) -> None:
    """
    Snooze every follow-up of a selection by the same number of days.

    Raises:
        BulkOperationException: If any record failed; the others stay snoozed
    """
    followups = list(followups)
    await _run_bulk("snooze", followups, [snooze(store, f, days) for f in followups])


def filter_followups(
    followups: Iterable[Followup],
    status_filter: str = "all",
    search: Optional[str] = None
) -> List[Followup]:
    """
    Order and filter a day's follow-ups for display.

    Args:
        followups: Follow-ups of the day, in creation order
        status_filter: "all", "pending" or "snoozed"
        search: Case-insensitive patient name fragment

    Returns:
        List[Followup]: Highest priority first; equal priorities keep their order
    """
    results = sorted(followups, key=lambda f: PRIORITY_RANK[Priority(f.priority)], reverse=True)

    if status_filter and status_filter != "all":
        results = [f for f in results if f.status == FollowupStatus(status_filter)]

    term = (search or "").strip().lower()
    if term:
        results = [f for f in results if term in f.patient.name.lower()]

    return results


class FollowupWorklist:
    """
    The follow-ups of one date as worked through at the desk.

    Keeps the list fetched for the date and the current selection. Snoozed
    records leave the list since they now belong to another date; the
    selection is cleared after every bulk attempt, successful or not.
    """

    def __init__(
        self,
        store: ClinicStore,
        day: date,
        followups: List[Followup],
        acting_user_id: int,
        branch_id: Optional[int] = None
    ):
        self.store = store
        self.day = day
        self.branch_id = branch_id
        self.followups = list(followups)
        self.acting_user_id = acting_user_id
        self._selected: Set[int] = set()

    @classmethod
    async def load(cls, store: ClinicStore, day: date, branch_id: Optional[int], acting_user_id: int):
        """Fetch the date's follow-ups and open a worklist on them."""
        return cls(store, day, await store.fetch_followups(day, branch_id), acting_user_id, branch_id)

    def toggle(self, followup_id: int) -> None:
        if followup_id in self._selected:
            self._selected.discard(followup_id)
        else:
            self._selected.add(followup_id)

    @property
    def selected(self) -> List[Followup]:
        return [f for f in self.followups if f.id in self._selected]

    def visible(self, status_filter: str = "all", search: Optional[str] = None) -> List[Followup]:
        return filter_followups(self.followups, status_filter, search)

    def _replace(self, updated: Followup) -> None:
        self.followups = [updated if f.id == updated.id else f for f in self.followups]

    async def mark_done(self, followup: Followup) -> Followup:
        updated = await mark_done(self.store, followup, self.acting_user_id)
        self._replace(updated)
        return updated

    async def snooze(self, followup: Followup, days: int) -> Followup:
        updated = await snooze(self.store, followup, days)
        self.followups = [f for f in self.followups if f.id != updated.id]
        self._selected.discard(updated.id)
        return updated

    async def bulk_mark_done(self) -> None:
        try:
            await bulk_mark_done(self.store, self.selected, self.acting_user_id)
        finally:
            self._selected.clear()
            await self.refresh()

    async def bulk_snooze(self, days: int) -> None:
        try:
            await bulk_snooze(self.store, self.selected, days)
        finally:
            self._selected.clear()
            await self.refresh()

    async def refresh(self) -> None:
        """Re-query the date; the only way to learn the true state after a bulk failure."""
        self.followups = await self.store.fetch_followups(self.day, self.branch_id)
