"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with proper lifecycle management, error handling, and transaction support.
It includes the session dependency used by the FastAPI routes.
"""

from typing import AsyncGenerator, Awaitable, Callable, Optional, TypeVar
import logging
import inspect
from contextlib import asynccontextmanager
from functools import wraps

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shortlinks.db.base import get_session

logger = logging.getLogger(__name__)

# Generic return type for function decorators
T = TypeVar("T")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            logger.exception("Unexpected error during database session")
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Scope a unit of work on an existing session.

    Commits when the block exits normally and rolls back on any exception,
    which is then re-raised. Work done inside the block is not visible to
    other sessions until the commit.

    Example:
        ```python
        async with transaction(db):
            await repository.create_shortlink(db, path="/bar", hash="a1e7812e2")
        ```
    """
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Decorator to wrap functions in a database transaction.

    Automatically finds the database session parameter, commits on success or
    rolls back on error.

    Args:
        db_param_name: Optional name of the database session parameter.
            If not provided, the first parameter annotated as AsyncSession is used.

    Returns:
        Callable: Decorator function
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        parameters = inspect.signature(func).parameters
        db_param_pos = None
        db_param_key = None

        for i, (param_name, param) in enumerate(parameters.items()):
            is_async_session = param.annotation is AsyncSession
            if (db_param_name and param_name == db_param_name) or (
                db_param_name is None and is_async_session
            ):
                db_param_pos = i
                db_param_key = param_name
                break

        if db_param_key is None:
            logger.warning(
                f"Unable to find database session parameter in function '{func.__name__}'"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            db = None
            if db_param_pos is not None and len(args) > db_param_pos:
                db = args[db_param_pos]
            elif db_param_key is not None and db_param_key in kwargs:
                db = kwargs[db_param_key]
            else:
                db = next(
                    (v for v in (*args, *kwargs.values()) if isinstance(v, AsyncSession)),
                    None,
                )

            if db is None:
                raise ValueError(
                    f"Database session not found in function arguments for '{func.__name__}'. "
                    f"Ensure a parameter of type AsyncSession is passed to the function."
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.exception(f"Transaction failed in '{func.__name__}': {e}")
                raise

        return wrapper
    return decorator


# Provide the session dependency as a shorthand for FastAPI routes
db_dependency = Depends(get_db)
