"""
User Schemas - Pydantic models for staff and branch serialization.
"""
from typing import Optional
from pydantic import BaseModel
from .models import UserRole

class BranchResponse(BaseModel):
    """Branch Response Schema"""
    id: int
    name: str

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class UserResponse(BaseModel):
    """
    User Response Schema - Used when returning the acting user
    
    Fields:
    - id: User ID
    - name: Display name
    - email: Login email
    - role: Staff role
    - branch_id: Home branch (None for doctors/admins working across branches)
    - is_active: Whether the account is active
    """
    id: int
    name: str
    email: str
    role: UserRole
    branch_id: Optional[int] = None
    is_active: bool

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
