"""Base repository implementation for the short-link service.

This module provides a generic BaseRepository class that follows the Repository pattern
for database operations, serving as a foundation for more specific repositories.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel

# Type variable for model types
T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository implementing common operations for SQLModel entities.

    Repositories never commit: transaction boundaries belong to the caller.

    Type parameters:
        T: The SQLModel type this repository manages
        CreateSchemaType: The Pydantic model type for creation operations
    """

    def __init__(self, model_type: Type[T]):
        """
        Initialize the repository with a specific model type.

        Args:
            model_type: The SQLModel class this repository will work with
        """
        self.model_type = model_type

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[T]:
        """
        Get an entity by its ID.

        Args:
            db: Database session
            id: Entity ID

        Returns:
            The entity if found, None otherwise
        """
        try:
            return await db.get(self.model_type, id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving {self.model_type.__name__} with id {id}: {e}")
            raise RepositoryError(f"Database error retrieving entity: {e}") from e

    async def find_by(self, db: AsyncSession, **kwargs) -> List[T]:
        """
        Get all entities matching the given field values.

        Args:
            db: Database session
            **kwargs: Field=value pairs to filter by

        Returns:
            List of matching entities, ordered by ID
        """
        if not kwargs:
            raise ValueError("No conditions provided for lookup")

        conditions = [getattr(self.model_type, field) == value for field, value in kwargs.items()]
        try:
            query = select(self.model_type).where(*conditions).order_by(self.model_type.id)
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error looking up {self.model_type.__name__} by {sorted(kwargs)}: {e}")
            raise RepositoryError(f"Database error retrieving entities: {e}") from e

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Create a new entity.

        The entity is flushed so that its primary key is assigned, but it is
        not committed.

        Args:
            db: Database session
            data: Entity data (either as a Pydantic model or dictionary)

        Returns:
            The created entity

        Raises:
            DuplicateEntityError: If a unique constraint is violated
            RepositoryError: On other database errors
        """
        if isinstance(data, BaseModel):
            data_dict = data.model_dump(exclude_none=True)
        else:
            data_dict = {key: value for key, value in data.items() if value is not None}

        entity = self.model_type(**data_dict)
        try:
            db.add(entity)
            await db.flush()
            await db.refresh(entity)
            return entity
        except IntegrityError as e:
            field_name, value = self._unique_violation(e, data_dict)
            logger.warning(f"Unique constraint violated creating {self.model_type.__name__}: {e}")
            raise DuplicateEntityError(self.model_type, field_name, value) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model_type.__name__}: {e}")
            raise RepositoryError(f"Database error creating entity: {e}") from e

    async def update(self, db: AsyncSession, entity: T, data: Dict[str, Any]) -> T:
        """
        Assign new field values to a loaded entity and flush them.

        Args:
            db: Database session
            entity: The entity to modify
            data: Field=value pairs to assign

        Returns:
            The updated entity

        Raises:
            DuplicateEntityError: If a unique constraint is violated
            RepositoryError: On other database errors
        """
        for key, value in data.items():
            setattr(entity, key, value)
        try:
            db.add(entity)
            await db.flush()
            return entity
        except IntegrityError as e:
            field_name, value = self._unique_violation(e, data)
            logger.warning(f"Unique constraint violated updating {self.model_type.__name__}: {e}")
            raise DuplicateEntityError(self.model_type, field_name, value) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating {self.model_type.__name__}: {e}")
            raise RepositoryError(f"Database error updating entity: {e}") from e

    async def count(self, db: AsyncSession) -> int:
        """
        Count the total number of entities.

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = select(func.count()).select_from(self.model_type)
            result = await db.execute(query)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_type.__name__} records: {e}")
            raise RepositoryError(f"Database error counting entities: {e}") from e

    def _unique_violation(self, error: IntegrityError, data: Dict[str, Any]):
        """Best-effort guess at which field caused a unique violation."""
        message = str(error.orig).lower()
        for field_name, value in data.items():
            if field_name.lower() in message:
                return field_name, value
        return "unknown", None
