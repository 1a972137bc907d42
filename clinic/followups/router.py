"""
Follow-up Router - Daily follow-up list, intake and transitions.
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import PermissionDeniedException
from ..core.dependencies import get_store, require_permission, scoped_branch
from ..core.permissions import Permission
from ..store import ClinicStore
from ..users.models import User
from .schemas import (
    FollowupCreate,
    FollowupResponse,
    FollowupCounts,
    SnoozeRequest,
    BulkDoneRequest,
    BulkSnoozeRequest,
    BulkResult,
    StatusFilter,
)
from .lifecycle import mark_done, snooze, bulk_mark_done, bulk_snooze, filter_followups
from .models import Followup, FollowupStatus
from .service import count_pending_followups

router = APIRouter()

@router.get("/", response_model=List[FollowupResponse])
async def list_followups(
    day: date = Query(..., alias="date", description="Day to list"),
    branch_id: Optional[int] = Query(None, description="Branch (omit for all branches)"),
    status_filter: StatusFilter = Query("all", alias="status", description="all, pending or snoozed"),
    search: Optional[str] = Query(None, description="Patient name fragment"),
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.VIEW_FOLLOWUPS))
):
    """
    List a day's follow-ups, highest priority first

    Canceled follow-ups are never listed.
    """
    followups = await store.fetch_followups(day, scoped_branch(current_user, branch_id))
    return filter_followups(followups, status_filter, search)

@router.get("/counts", response_model=FollowupCounts)
async def followup_counts(
    start: date = Query(..., description="First day of the range"),
    end: date = Query(..., description="Last day of the range"),
    branch_id: Optional[int] = Query(None, description="Branch (omit for all branches)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.VIEW_FOLLOWUPS))
):
    """
    Count pending follow-ups per day, for the calendar view
    """
    counts = count_pending_followups(db, start, end, scoped_branch(current_user, branch_id))
    return FollowupCounts(counts=counts)

@router.post("/", response_model=FollowupResponse, status_code=status.HTTP_201_CREATED)
async def create_followup(
    followup_data: FollowupCreate,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_FOLLOWUPS))
):
    """
    Schedule a follow-up at intake
    """
    fields = followup_data.model_dump(exclude={"recurrence"})
    if followup_data.recurrence:
        fields["recurrence"] = followup_data.recurrence.model_dump(mode="json", exclude_none=True)
    fields.update(
        branch_id=scoped_branch(current_user, fields["branch_id"]),
        status=FollowupStatus.PENDING,
        created_by=current_user.id
    )
    return await store.create_followup(fields)

async def get_followup_in_branch(store: ClinicStore, current_user: User, followup_id: int) -> Followup:
    """
    Look up a follow-up the acting user may work on.

    Raises:
        PermissionDeniedException: If a receptionist reaches for another branch's follow-up
    """
    followup = await store.get_followup(followup_id)
    branch_id = scoped_branch(current_user, followup.branch_id)
    if branch_id != followup.branch_id:
        raise PermissionDeniedException("This follow-up belongs to another branch")
    return followup

# Bulk routes come first so "bulk" is never read as a follow-up ID
@router.post("/bulk/done", response_model=BulkResult)
async def bulk_complete_followups(
    request: BulkDoneRequest,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_FOLLOWUPS))
):
    """
    Mark a selection of follow-ups as done

    Partial failures return 502 with the failed IDs; the others are not rolled back.
    """
    followups = [await get_followup_in_branch(store, current_user, followup_id) for followup_id in request.ids]
    await bulk_mark_done(store, followups, current_user.id)
    return BulkResult(processed=len(followups))

@router.post("/bulk/snooze", response_model=BulkResult)
async def bulk_snooze_followups(
    request: BulkSnoozeRequest,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_FOLLOWUPS))
):
    """
    Snooze a selection of follow-ups by the same number of days

    Partial failures return 502 with the failed IDs; the others are not rolled back.
    """
    followups = [await get_followup_in_branch(store, current_user, followup_id) for followup_id in request.ids]
    await bulk_snooze(store, followups, request.days)
    return BulkResult(processed=len(followups))

@router.post("/{followup_id}/done", response_model=FollowupResponse)
async def complete_followup(
    followup_id: int,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_FOLLOWUPS))
):
    """
    Mark a follow-up as done

    A recurring follow-up schedules its next occurrence.
    """
    followup = await get_followup_in_branch(store, current_user, followup_id)
    return await mark_done(store, followup, current_user.id)

@router.post("/{followup_id}/snooze", response_model=FollowupResponse)
async def snooze_followup(
    followup_id: int,
    snooze_data: SnoozeRequest,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_FOLLOWUPS))
):
    """
    Push a follow-up to a later day
    """
    followup = await get_followup_in_branch(store, current_user, followup_id)
    return await snooze(store, followup, snooze_data.days)
