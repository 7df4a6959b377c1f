"""Base repository implementation.

Shared persistence helpers for the repositories that back the API.
"""

import logging
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import NotFound

logger = logging.getLogger(__name__)

ModelType = TypeVar('ModelType')


class BaseRepository(Generic[ModelType]):
    """Lookup and save operations bound to one session and one model."""

    def __init__(self, db_session: Session, model_class: Type[ModelType]):
        self.db = db_session
        self.model_class = model_class

    @property
    def model_name(self) -> str:
        return self.model_class.__name__

    def create(self, **fields) -> ModelType:
        """Insert a new row and return it with its generated id.

        Raises:
            IntegrityError: a unique or foreign key constraint failed
        """
        instance = self.model_class(**fields)
        self.db.add(instance)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.exception(f"Could not insert {self.model_name}")
            raise
        self.db.refresh(instance)
        logger.info(f"Created {self.model_name} {instance.id}")
        return instance

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model_class, id)

    def get_by_id_or_404(self, id: int) -> ModelType:
        """Like ``get_by_id`` but raises ``NotFound`` for a missing row."""
        found = self.get_by_id(id)
        if found is None:
            raise NotFound(f"{self.model_name} with id {id} not found")
        return found

    def save(self, instance: ModelType) -> ModelType:
        """Commit pending changes on ``instance`` and reload it."""
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance
