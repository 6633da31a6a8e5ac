from __future__ import annotations

from typing import Protocol

from convoeval.enrichment.records import EvaluationRecord, MessageQuery, MessageRecord


class RecordStore(Protocol):
    """Storage capability injected into ``EnrichmentPipeline``.

    Both methods raise ``StorageError`` on transport or auth failure.
    ``fetch_secondary_records`` must return ``[]`` without any I/O when
    ``query.keys`` is empty.
    """

    async def fetch_primary_records(
        self,
        limit: int,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[EvaluationRecord]:
        ...

    async def fetch_secondary_records(self, query: MessageQuery) -> list[MessageRecord]:
        ...
