"""
Notification model for in-app messages and queued emails.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, JSON
from database import Base
from models.timestamps import utcnow, isoformat

PRIORITIES = ('low', 'medium', 'high')


class Notification(Base):
    """A message addressed to one user, created once per triggering event."""
    __tablename__ = 'notifications'

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, index=True)
    user_id = Column(String(255), index=True)
    type = Column(String(50), default='general', nullable=False)
    title = Column(String(500))
    message = Column(Text, nullable=False)
    scheduled_at = Column(DateTime, nullable=False, default=utcnow)
    priority = Column(String(10), default='medium', nullable=False)
    read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime)
    delivered = Column(Boolean, default=False, nullable=False)
    related_thesis_id = Column(Integer, ForeignKey('theses.id'))
    action_url = Column(String(1000))
    action_label = Column(String(255))
    extra_metadata = Column('metadata', JSON, default=dict)
    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f'<Notification {self.id}: {self.type} -> {self.email}>'

    def to_dict(self):
        """Convert notification to dictionary for API responses."""
        return {
            'id': self.id,
            'email': self.email,
            'userId': self.user_id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'scheduledAt': isoformat(self.scheduled_at),
            'priority': self.priority,
            'read': self.read,
            'readAt': isoformat(self.read_at),
            'delivered': self.delivered,
            'relatedThesisId': self.related_thesis_id,
            'actionUrl': self.action_url,
            'actionLabel': self.action_label,
            'metadata': dict(self.extra_metadata or {}),
            'createdAt': isoformat(self.created_at)
        }
