"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from property_manager.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Uses async SQLAlchemy for all database operations with proper error handling.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance

        Raises:
            Exception: If database operation fails
        """
        try:
            db_obj = self.model(**obj_in)
            self.db.add(db_obj)
            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise

    async def save(self, db_obj: ModelType) -> ModelType:
        """Commit pending changes on an already loaded instance."""
        try:
            self.db.add(db_obj)
            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Saved {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save {self.model.__name__} {db_obj.id}: {e}")
            raise

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Args:
            id: UUID of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        obj = result.scalar_one_or_none()

        if obj:
            logger.debug(f"Retrieved {self.model.__name__} with id: {id}")
        else:
            logger.debug(f"{self.model.__name__} with id {id} not found")

        return obj

    async def get_multi(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[ModelType]:
        """
        Get multiple records with optional equality filters, newest first.

        Args:
            skip: Number of records to skip (for pagination)
            limit: Maximum number of records to return
            filters: Dictionary of field filters

        Returns:
            List of model instances
        """
        query = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        query = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)

        result = await self.db.execute(query)
        objects = result.scalars().all()

        logger.debug(f"Retrieved {len(objects)} {self.model.__name__} records")
        return list(objects)

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count records with optional equality filters.

        Args:
            filters: Dictionary of field filters

        Returns:
            Number of matching records
        """
        query = select(func.count(self.model.id))

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        result = await self.db.execute(query)
        return result.scalar_one()
