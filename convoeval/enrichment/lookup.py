"""Batched message lookup over the storage boundary."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from convoeval.enrichment.records import MessageQuery, MessageRecord
from convoeval.enrichment.store import RecordStore

logger = logging.getLogger(__name__)


class MessageLookup:
    """Fetch every message of one role for a bounded set of conversations.

    Issues a single storage call per ``fetch``. Result order is whatever
    the store returns; nothing is sorted here.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def fetch(self, keys: Iterable[str], role: str) -> list[MessageRecord]:
        """Return messages with ``conversation_id`` in *keys* and ``role == role``.

        An empty key set returns ``[]`` without touching the store.
        ``StorageError`` from the store propagates unchanged.
        """
        if not role or not role.strip():
            raise ValueError("role must be a non-empty string")

        query = MessageQuery.build(keys, role)
        if query.is_empty:
            logger.debug("Message lookup skipped: no conversation keys")
            return []

        messages = await self.store.fetch_secondary_records(query)
        logger.debug("Message lookup: keys=%d role=%s returned=%d", len(query.keys), role, len(messages))
        return list(messages)
