"""
Hotel Parcel Tracking — Generic SQLAlchemy Repository
=======================================================

What:  Record store per entity type: get / list_all / save / delete.
How:   Stateless; every method receives the request's AsyncSession, so one
       repository instance is shared by all requests. Writes are flushed,
       never committed (the session dependency owns the transaction).

Error translation:
    IntegrityError propagates unchanged: a unique-constraint violation is a
    business conflict and the calling service knows which rule it broke.
    Any other SQLAlchemyError is logged and wrapped in DatabaseError (500).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parcel_tracking.database import Base
from parcel_tracking.exceptions import DatabaseError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class SQLAlchemyRepository(Generic[ModelT]):
    """Base class for entity repositories. Subclasses set `model`."""

    model: Type[ModelT]

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error(
                "Database error in %s.%s: %s",
                self.model.__name__,
                operation,
                str(e),
                exc_info=True,
            )
            raise DatabaseError(
                context={
                    "entity": self.model.__name__,
                    "operation": operation,
                    "error_type": type(e).__name__,
                },
            ) from e

    async def _all(self, db: AsyncSession, query: Select, operation: str) -> List[ModelT]:
        async with self._guard(operation):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def _first(self, db: AsyncSession, query: Select, operation: str) -> Optional[ModelT]:
        async with self._guard(operation):
            result = await db.execute(query.limit(1))
            return result.scalars().first()

    async def get(self, db: AsyncSession, entity_id: Any) -> Optional[ModelT]:
        """Primary-key lookup. Returns None when no row matches."""
        async with self._guard("get"):
            return await db.get(self.model, entity_id)

    async def list_all(self, db: AsyncSession) -> List[ModelT]:
        return await self._all(db, select(self.model).order_by(self.model.id), "list_all")

    async def save(self, db: AsyncSession, entity: ModelT) -> ModelT:
        """
        Inserts a new entity or flushes changes to a loaded one.

        The flush assigns the primary key of new rows and surfaces constraint
        violations here rather than at commit time.
        """
        async with self._guard("save"):
            db.add(entity)
            await db.flush()
        return entity

    async def delete(self, db: AsyncSession, entity: ModelT) -> None:
        async with self._guard("delete"):
            await db.delete(entity)
            await db.flush()
