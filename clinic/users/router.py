"""
User Router - Endpoints for the acting user and the branch list.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.dependencies import get_current_user
from .models import Branch, User, UserRole
from .schemas import BranchResponse, UserResponse

router = APIRouter()

@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get the acting user
    """
    return current_user

@router.get("/branches", response_model=List[BranchResponse])
async def list_branches(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    List clinic branches

    Receptionists only see their own branch.
    """
    query = db.query(Branch)
    if current_user.role == UserRole.RECEPTIONIST:
        query = query.filter(Branch.id == current_user.branch_id)
    return query.order_by(Branch.id).all()
