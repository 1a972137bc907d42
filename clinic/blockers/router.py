"""
Blocker Router - Endpoints for blocking time on a doctor's calendar.
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..exceptions import PermissionDeniedException, ResourceNotFoundException
from ..core.dependencies import get_store, require_permission
from ..core.permissions import Permission
from ..store import ClinicStore
from ..users.models import User, UserRole
from .models import CalendarBlocker
from .schemas import BlockerCreate, BlockerResponse
from .service import delete_blocker

router = APIRouter()

@router.get("/", response_model=List[BlockerResponse])
async def list_blockers(
    day: date = Query(..., alias="date", description="Day to list"),
    doctor_id: Optional[int] = Query(None, description="Doctor (defaults to the acting doctor)"),
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.VIEW_APPOINTMENTS))
):
    """
    List a doctor's blocked time for a day
    """
    if doctor_id is None:
        doctor_id = current_user.id if current_user.is_doctor else settings.default_doctor_id
    return await store.fetch_blockers(day, doctor_id)

@router.post("/", response_model=BlockerResponse, status_code=status.HTTP_201_CREATED)
async def block_time(
    blocker_data: BlockerCreate,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.MANAGE_BLOCKERS))
):
    """
    Block time on a doctor's calendar

    Doctors block their own calendar; admins may block any doctor's.
    End time must be after start time.
    """
    fields = blocker_data.model_dump()
    if current_user.role != UserRole.ADMIN or fields["doctor_id"] is None:
        fields["doctor_id"] = current_user.id
    return await store.create_blocker(fields)

@router.delete("/{blocker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_blocker(
    blocker_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.MANAGE_BLOCKERS))
):
    """
    Remove blocked time

    Doctors may only remove their own blockers.
    """
    blocker = db.query(CalendarBlocker).filter(CalendarBlocker.id == blocker_id).first()
    if not blocker:
        raise ResourceNotFoundException("Blocker not found")
    if current_user.role != UserRole.ADMIN and blocker.doctor_id != current_user.id:
        raise PermissionDeniedException("You don't have permission to remove this blocker")
    delete_blocker(db, blocker_id)
