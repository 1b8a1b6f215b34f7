"""Base repository: generic CRUD and lifecycle hooks (audit emission)."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from donorcrm.domain.exceptions import ResourceNotFoundException
from donorcrm.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update and hooks.

    Subclasses override _on_after_create and _on_after_update to emit audit
    records. LSP: subclasses are substitutable for BaseRepository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and run _on_after_create hook."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes to a record (merge if detached) and run _on_after_update hook.

        Raises ResourceNotFoundException when a detached object has no row.
        """
        if object_session(obj) is not self.db.sync_session:
            entity_id = str(getattr(obj, "id", ""))
            if await self.get_by_id(entity_id) is None:
                raise ResourceNotFoundException(self.model.__name__, entity_id)
            obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def _on_after_create(self, obj: ModelType) -> None:
        """Override in subclasses to emit audit records."""

    async def _on_after_update(self, obj: ModelType) -> None:
        """Override in subclasses to emit audit records."""
