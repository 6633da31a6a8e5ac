"""Enrichment pipeline: evaluations in, evaluations with customer names out.

Stage order
-----------
1. fetch evaluations      — ``RecordStore.fetch_primary_records``
2. extract keys           — ``extract_correlation_keys``
3. look up messages       — ``MessageLookup.fetch`` (one batched call)
4. reduce candidates      — ``reduce_first_seen``
5. merge names            — ``apply_customer_names``

Error policy
------------
A failed evaluation fetch is always fatal. A failed message lookup
depends on ``ErrorMode``:

DEGRADED : log a warning and return every evaluation with ``customer_name=None``
STRICT   : re-raise the ``StorageError``

The mode is fixed when the pipeline is built.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from convoeval.core.constants import DEFAULT_EVALUATION_ORDER, ROLE_CUSTOMER
from convoeval.enrichment.enricher import apply_customer_names
from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.keys import extract_correlation_keys
from convoeval.enrichment.lookup import MessageLookup
from convoeval.enrichment.records import EnrichedEvaluation, EvaluationRecord
from convoeval.enrichment.reducer import reduce_first_seen
from convoeval.enrichment.store import RecordStore

logger = logging.getLogger(__name__)


class ErrorMode(str, Enum):
    DEGRADED = "degraded"
    STRICT = "strict"


class EnrichmentPipeline:
    """Resolve customer names for evaluations from their conversation messages."""

    def __init__(
        self,
        store: RecordStore,
        role: str = ROLE_CUSTOMER,
        error_mode: ErrorMode | str = ErrorMode.DEGRADED,
        max_limit: int | None = None,
    ) -> None:
        if not role or not role.strip():
            raise ValueError("role must be a non-empty string")
        if max_limit is not None and max_limit < 1:
            raise ValueError("max_limit must be positive")
        self.store = store
        self.role = role
        self.error_mode = ErrorMode(error_mode)
        self.max_limit = max_limit
        self.lookup = MessageLookup(store)

    async def enrich(self, limit: int) -> list[EnrichedEvaluation]:
        """Fetch the newest *limit* evaluations and attach customer names.

        ``limit`` above ``max_limit`` is clamped; ``limit < 1`` raises
        ``ValueError``. A ``StorageError`` from the evaluation fetch always
        propagates.
        """
        if limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit}")
        if self.max_limit is not None and limit > self.max_limit:
            logger.info("Clamping evaluation limit %d to %d", limit, self.max_limit)
            limit = self.max_limit

        records = await self.store.fetch_primary_records(
            limit=limit,
            order_by=DEFAULT_EVALUATION_ORDER,
            descending=True,
        )
        return await self.enrich_records(records)

    async def enrich_records(self, records: Sequence[EvaluationRecord]) -> list[EnrichedEvaluation]:
        """Attach customer names to already-fetched *records*, preserving order."""
        records = list(records)
        keys = extract_correlation_keys(records)

        try:
            messages = await self.lookup.fetch(keys, self.role)
        except StorageError as exc:
            if self.error_mode is ErrorMode.STRICT:
                raise
            logger.warning(
                "Message lookup failed for %d conversations (%s); returning evaluations without customer names",
                len(keys),
                exc.operation,
            )
            messages = []

        names = reduce_first_seen(messages)
        enriched = apply_customer_names(records, names)

        logger.info(
            "Enriched evaluations: records=%d keys=%d matched=%d",
            len(enriched),
            len(keys),
            len(names),
        )
        return enriched
