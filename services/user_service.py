"""
User service for business logic operations.
"""
import logging
from typing import Optional, Dict, Any, List, Union
from injector import inject
from sqlalchemy.orm import Session

from database.connection import get_db_session
from repositories.user_repository import UserRepository
from models.user import User, Role
from models.timestamps import utcnow
from services.exceptions import InvalidInputError, InvalidReferenceError, ConflictError

logger = logging.getLogger(__name__)


class UserService:
    """Service class for user-related business operations."""

    @inject
    def __init__(self, user_repository: UserRepository):
        """Initialize UserService."""
        self.user_repository = user_repository

    def register_user(self, data: Dict[str, Any]) -> User:
        """
        Register a new user in the system.

        Args:
            data: camelCase payload with fullName, email and role

        Returns:
            Created user

        Raises:
            InvalidInputError: If validation fails
            ConflictError: If the email is already registered
        """
        full_name = (data.get('fullName') or '').strip()
        email = (data.get('email') or '').strip().lower()

        if not full_name:
            raise InvalidInputError("Full name is required")

        if not email or '@' not in email:
            raise InvalidInputError("A valid email is required")

        try:
            role = Role.normalize(data.get('role'))
        except ValueError as e:
            raise InvalidInputError(str(e))

        student_id = (data.get('studentId') or '').strip() or None
        if role == Role.STUDENT and not student_id:
            raise InvalidInputError("Student ID is required for students")

        with get_db_session() as session:
            if self.user_repository.get_by_email(session, email):
                raise ConflictError(f"User with email {email} already exists")

            now = utcnow()
            user = self.user_repository.create(
                session,
                full_name=full_name,
                email=email,
                role=role.value,
                student_id=student_id,
                department=(data.get('department') or '').strip() or None,
                contact_number=(data.get('contactNumber') or '').strip() or None,
                email_notifications=bool(data.get('emailNotifications', True)),
                created_at=now,
                updated_at=now
            )

        logger.info(f"User registered successfully: {user.email} ({user.role})")
        return user

    def get_user(self, user_id: int) -> User:
        with get_db_session() as session:
            return self.user_repository.require(session, user_id)

    def update_notification_preferences(self, user_id: int, email_enabled) -> User:
        """
        Turn email notifications on or off for a user.

        Raises:
            InvalidInputError: If the flag is not a boolean
            NotFoundError: If the user does not exist
        """
        if not isinstance(email_enabled, bool):
            raise InvalidInputError("email preference must be a boolean")

        with get_db_session() as session:
            user = self.user_repository.require(session, user_id)
            user = self.user_repository.update(
                session, user, email_notifications=email_enabled, updated_at=utcnow()
            )

        logger.info(f"Email notifications {'enabled' if email_enabled else 'disabled'} for user {user_id}")
        return user

    def update_profile(self, user_id: int, data: Dict[str, Any]) -> User:
        """
        Update the editable profile fields of a user.

        Only keys present in the payload are changed; an empty contactNumber
        clears it.

        Args:
            user_id: User ID
            data: Any of fullName, department, contactNumber, emailNotifications

        Raises:
            InvalidInputError: If nothing updatable is given or a value is invalid
            NotFoundError: If the user does not exist
        """
        updates = {}

        if 'fullName' in data:
            full_name = str(data.get('fullName') or '').strip()
            if not full_name:
                raise InvalidInputError("Full name cannot be empty")
            updates['full_name'] = full_name

        if 'department' in data:
            updates['department'] = str(data.get('department') or '').strip() or None

        if 'contactNumber' in data:
            updates['contact_number'] = str(data.get('contactNumber') or '').strip() or None

        if 'emailNotifications' in data:
            if not isinstance(data['emailNotifications'], bool):
                raise InvalidInputError("emailNotifications must be a boolean")
            updates['email_notifications'] = data['emailNotifications']

        if not updates:
            raise InvalidInputError("No profile fields to update")

        with get_db_session() as session:
            user = self.user_repository.require(session, user_id)
            user = self.user_repository.update(session, user, updated_at=utcnow(), **updates)

        logger.info(f"Profile updated for user {user_id}: {', '.join(sorted(updates))}")
        return user

    def list_supervisors(self) -> List[User]:
        with get_db_session() as session:
            return self.user_repository.list_by_roles(session, Role.FACULTY)

    def list_notification_recipients(self) -> List[User]:
        """Students and faculty, the audience of event announcements."""
        with get_db_session() as session:
            return self.user_repository.list_by_roles(session, Role.STUDENT, Role.FACULTY)

    def resolve_supervisor(self, session: Session, reference: Union[int, str, None]) -> User:
        """
        Resolve a supervisor reference to a faculty user.

        Numeric references are tried as user ids first; anything else, or an
        id that matches nobody, falls back to email and then full name.

        Args:
            session: Database session
            reference: User id, email or full name

        Returns:
            The faculty user

        Raises:
            InvalidReferenceError: If no faculty user matches
        """
        user = self._find_user(session, reference)

        if not user or not user.is_faculty:
            logger.warning(f"Supervisor reference did not resolve to a faculty user: {reference}")
            raise InvalidReferenceError()

        return user

    def find_user_by_student_id(self, session: Session, student_id: str) -> Optional[User]:
        if not student_id:
            return None
        return self.user_repository.get_by_student_id(session, student_id)

    def _find_user(self, session: Session, reference) -> Optional[User]:
        if reference is None or isinstance(reference, bool):
            return None

        if isinstance(reference, int) or str(reference).strip().isdigit():
            user = self.user_repository.get_by_id(session, int(reference))
            if user:
                return user

        text = str(reference).strip()
        if not text:
            return None

        return (
            self.user_repository.get_by_email(session, text)
            or self.user_repository.get_by_full_name(session, text)
        )
