from __future__ import annotations

from collections.abc import Iterable
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from convoeval.db import models

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    model: type[ModelT]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, **kwargs) -> ModelT:
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        return entity


class EvaluationRepository(BaseRepository[models.Evaluation]):
    model = models.Evaluation

    async def list_ordered(
        self,
        limit: int,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[models.Evaluation]:
        """Return up to *limit* evaluations sorted on the *order_by* column.

        Raises ``ValueError`` when *order_by* is not a mapped column.
        """
        column = self.model.__table__.columns.get(order_by)
        if column is None:
            raise ValueError(f"Cannot order evaluations by unknown column {order_by!r}")

        primary = column.desc() if descending else column.asc()
        tiebreak = self.model.id.desc() if descending else self.model.id.asc()
        stmt = select(self.model).order_by(primary, tiebreak).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class MessageRepository(BaseRepository[models.Message]):
    model = models.Message

    async def list_for_conversations(
        self,
        conversation_ids: Iterable[str],
        role: str,
    ) -> list[models.Message]:
        """Return messages of *role* in the given conversations, oldest first."""
        ids = sorted(set(conversation_ids))
        if not ids:
            return []

        stmt = (
            select(self.model)
            .where(self.model.conversation_id.in_(ids), self.model.role == role)
            .order_by(self.model.created_at.asc(), self.model.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
