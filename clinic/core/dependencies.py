"""
FastAPI dependencies for the acting user, branch scoping and the clinic store.
"""
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from ..database import get_db
from ..store import ClinicStore, SessionStore
from ..users.models import User, UserRole
from .permissions import Permission, has_permission

def get_current_user(
    x_user_id: Optional[int] = Header(None, description="ID of the staff member acting"),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the acting staff member from the X-User-Id header.
    
    Args:
        x_user_id: Value of the X-User-Id header
        db: Database session
        
    Returns:
        User: Acting user
        
    Raises:
        HTTPException: If the header is missing or the user is unknown or inactive
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header"
        )

    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive"
        )
    return user

def require_permission(permission: Permission):
    """
    Build a dependency that only lets through roles holding a permission.
    
    Args:
        permission: Permission required by the endpoint
        
    Returns:
        Callable: FastAPI dependency returning the acting user
    """
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Role '{current_user.role.value}' lacks '{permission.value}'"
            )
        return current_user
    return checker

def get_store(db: Session = Depends(get_db)) -> ClinicStore:
    """
    Store dependency - wraps the request's database session.
    """
    return SessionStore(db)

def scoped_branch(current_user: User, branch_id: Optional[int]) -> Optional[int]:
    """
    Receptionists are pinned to their own branch; others may pick any branch or all (None).
    """
    if current_user.role == UserRole.RECEPTIONIST:
        return current_user.branch_id
    return branch_id
