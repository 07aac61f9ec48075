"""
User model and canonical role type.
"""
import enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from database import Base
from models.timestamps import utcnow, isoformat


class Role(str, enum.Enum):
    """Canonical user roles. Stored lowercase."""
    STUDENT = 'student'
    FACULTY = 'faculty'
    ADMIN = 'admin'

    @classmethod
    def normalize(cls, value) -> 'Role':
        """
        Map any casing of a role name onto its canonical member.

        Raises:
            ValueError: If the value is not a known role
        """
        if isinstance(value, cls):
            return value
        if not value or not str(value).strip():
            raise ValueError("Role is required")
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role: {value}")


class User(Base):
    """Model for students, faculty and administrators."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    full_name = Column(String(500), nullable=False)
    student_id = Column(String(100), index=True)
    department = Column(String(255))
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False, index=True)
    contact_number = Column(String(50))
    email_notifications = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<User {self.id}: {self.email} ({self.role})>'

    @property
    def is_faculty(self) -> bool:
        return self.role == Role.FACULTY.value

    def to_dict(self):
        """Convert user to dictionary for API responses."""
        return {
            'id': self.id,
            'fullName': self.full_name,
            'studentId': self.student_id,
            'department': self.department,
            'email': self.email,
            'role': self.role,
            'contactNumber': self.contact_number,
            'notificationPreferences': {'email': bool(self.email_notifications)},
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at)
        }

    def to_summary(self):
        """Short form embedded in thesis responses."""
        return {
            'id': self.id,
            'fullName': self.full_name,
            'email': self.email,
            'department': self.department
        }
