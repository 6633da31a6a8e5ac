"""FastAPI dependency injection — database sessions, record store and pipeline."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from convoeval.core.settings import get_settings
from convoeval.db.session import get_session_factory
from convoeval.db.store import SqlAlchemyRecordStore
from convoeval.enrichment.pipeline import EnrichmentPipeline
from convoeval.enrichment.store import RecordStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a read-only ``AsyncSession``; closed when the request ends."""
    factory = get_session_factory()
    async with factory() as db:
        yield db


def get_record_store(db: AsyncSession = Depends(get_db)) -> RecordStore:
    """Return the SQL-backed record store bound to the current session."""
    return SqlAlchemyRecordStore(db)


def get_enrichment_pipeline(store: RecordStore = Depends(get_record_store)) -> EnrichmentPipeline:
    """Return an ``EnrichmentPipeline`` configured from settings."""
    settings = get_settings()
    return EnrichmentPipeline(
        store,
        role=settings.customer_role,
        error_mode=settings.enrichment_error_mode,
        max_limit=settings.evaluations_max_limit,
    )
