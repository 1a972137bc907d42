"""
Branch and User Models - Clinic locations and the staff who work at them.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base

class UserRole(str, enum.Enum):
    """Enum for staff roles"""
    ADMIN = "admin"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"

class Branch(Base):
    """
    Branch Model - A clinic location
    
    Fields:
    - id: Primary key for branch
    - name: Display name of the branch
    """
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)

    # Relationships
    staff = relationship("User", back_populates="branch")

    def __repr__(self):
        """String representation of the Branch model"""
        return f"<Branch(id={self.id}, name='{self.name}')>"

class User(Base):
    """
    User Model - A staff member of the clinic
    
    Fields:
    - id: Primary key for user
    - name: Display name
    - email: Login email
    - role: Staff role (admin, doctor, receptionist)
    - branch_id: Home branch; receptionists are limited to it
    - is_active: Whether the account may act on the system
    - created_at: When the user was created
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    branch = relationship("Branch", back_populates="staff")

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"

    @property
    def is_doctor(self) -> bool:
        """Check if the user is a doctor"""
        return self.role == UserRole.DOCTOR
