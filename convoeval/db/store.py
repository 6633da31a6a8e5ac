"""SQLAlchemy implementation of the ``RecordStore`` boundary.

Driver and query failures are re-raised as ``StorageError`` so the
enrichment pipeline never sees SQLAlchemy exception types.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from convoeval.db import models
from convoeval.db.repositories import EvaluationRepository, MessageRepository
from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.records import EvaluationRecord, MessageQuery, MessageRecord

logger = logging.getLogger(__name__)


def _row_fields(row: object) -> dict[str, Any]:
    mapper = sa_inspect(row).mapper
    return {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}


def _to_evaluation(row: models.Evaluation) -> EvaluationRecord:
    return EvaluationRecord(
        evaluation_id=row.evaluation_code,
        conversation_id=row.conversation_id,
        fields=_row_fields(row),
    )


def _to_message(row: models.Message) -> MessageRecord:
    return MessageRecord(
        conversation_id=row.conversation_id,
        role=row.role,
        display_name=row.display_name,
        created_at=row.created_at,
        fields=_row_fields(row),
    )


class SqlAlchemyRecordStore:
    """Read evaluations and messages through an ``AsyncSession``.

    Messages come back oldest first, so the first customer message of a
    conversation is also the first one the reducer sees.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.evaluations = EvaluationRepository(db)
        self.messages = MessageRepository(db)

    async def fetch_primary_records(
        self,
        limit: int,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[EvaluationRecord]:
        try:
            rows = await self.evaluations.list_ordered(limit, order_by=order_by, descending=descending)
        except SQLAlchemyError as exc:
            logger.error("Evaluation fetch failed: %s", type(exc).__name__)
            raise StorageError("fetch_primary_records") from exc
        return [_to_evaluation(row) for row in rows]

    async def fetch_secondary_records(self, query: MessageQuery) -> list[MessageRecord]:
        if query.is_empty:
            return []
        try:
            rows = await self.messages.list_for_conversations(query.keys, query.role)
        except SQLAlchemyError as exc:
            logger.error("Message fetch failed: %s", type(exc).__name__)
            raise StorageError("fetch_secondary_records") from exc
        return [_to_message(row) for row in rows]
