from __future__ import annotations

from collections.abc import Iterable

from convoeval.enrichment.records import EvaluationRecord


def extract_correlation_keys(records: Iterable[EvaluationRecord]) -> set[str]:
    """Return the distinct, non-blank conversation ids of *records*.

    Records without a usable key contribute nothing; they are not an error.
    """
    keys: set[str] = set()
    for record in records:
        key = getattr(record, "conversation_id", None)
        if not isinstance(key, str):
            continue
        key = key.strip()
        if key:
            keys.add(key)
    return keys
