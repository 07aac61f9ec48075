"""
User repository for database operations.
"""
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base_repository import BaseRepository
from models.user import User, Role


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    not_found_message = "User not found"

    def __init__(self):
        """Initialize UserRepository."""
        super().__init__(User)

    def get_by_email(self, session: Session, email: str) -> Optional[User]:
        """Get user by email, case-insensitively."""
        if not email:
            return None
        return session.query(User).filter(
            func.lower(User.email) == email.strip().lower()
        ).first()

    def get_by_full_name(self, session: Session, full_name: str) -> Optional[User]:
        return session.query(User).filter(User.full_name == full_name).first()

    def get_by_student_id(self, session: Session, student_id: str) -> Optional[User]:
        return session.query(User).filter(User.student_id == student_id).first()

    def list_by_roles(self, session: Session, *roles: Role) -> List[User]:
        """
        Get users holding any of the given roles.

        Args:
            session: Database session
            *roles: Canonical roles to match

        Returns:
            Users ordered by full name
        """
        return session.query(User).filter(
            User.role.in_([role.value for role in roles])
        ).order_by(User.full_name.asc()).all()
