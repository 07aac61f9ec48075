"""
Base repository class providing common database operations.
"""
from abc import ABC
from typing import TypeVar, Generic, List, Optional, Type
from sqlalchemy.orm import Session, Query
from database import Base
from services.exceptions import NotFoundError

# Generic type for model classes
ModelType = TypeVar('ModelType', bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """Abstract base class for repository pattern implementation."""

    not_found_message = "Record not found"

    def __init__(self, model_class: Type[ModelType]):
        """
        Initialize repository with model class.

        Args:
            model_class: SQLAlchemy model class
        """
        self.model_class = model_class

    def _filtered(self, session: Session, **filters) -> Query:
        """Query on the model with equality filters on known columns."""
        query = session.query(self.model_class)
        for key, value in filters.items():
            if hasattr(self.model_class, key):
                query = query.filter(getattr(self.model_class, key) == value)
        return query

    def get_by_id(self, session: Session, id: int) -> Optional[ModelType]:
        """
        Get entity by ID.

        Args:
            session: Database session
            id: Entity ID

        Returns:
            Entity instance or None if not found
        """
        return session.get(self.model_class, id)

    def require(self, session: Session, id: int, message: Optional[str] = None) -> ModelType:
        """
        Get entity by ID or raise NotFoundError.

        Args:
            session: Database session
            id: Entity ID
            message: Override for the error message

        Returns:
            Entity instance
        """
        try:
            entity = self.get_by_id(session, int(id))
        except (TypeError, ValueError):
            entity = None
        if entity is None:
            raise NotFoundError(message or self.not_found_message)
        return entity

    def create(self, session: Session, **kwargs) -> ModelType:
        """
        Create new entity and flush to obtain its ID.

        Args:
            session: Database session
            **kwargs: Entity attributes

        Returns:
            Created entity instance
        """
        entity = self.model_class(**kwargs)
        session.add(entity)
        session.flush()
        return entity

    def update(self, session: Session, entity: ModelType, **kwargs) -> ModelType:
        """Set the given attributes on an entity and flush."""
        for key, value in kwargs.items():
            if hasattr(entity, key):
                setattr(entity, key, value)

        session.flush()
        return entity

    def delete(self, session: Session, entity: ModelType) -> None:
        session.delete(entity)
        session.flush()

    def count(self, session: Session, **filters) -> int:
        return self._filtered(session, **filters).count()

    def exists(self, session: Session, **filters) -> bool:
        return self._filtered(session, **filters).first() is not None

    def find_by(self, session: Session, **filters) -> List[ModelType]:
        return self._filtered(session, **filters).all()

    def find_one_by(self, session: Session, **filters) -> Optional[ModelType]:
        return self._filtered(session, **filters).first()
