from __future__ import annotations

from collections.abc import Mapping, Sequence

from convoeval.enrichment.records import EnrichedEvaluation, EvaluationRecord

_ABSENT = object()


def apply_customer_names(
    records: Sequence[EvaluationRecord],
    names: Mapping[str, str | None],
) -> list[EnrichedEvaluation]:
    """Attach ``customer_name`` to every record, in input order.

    Keys missing from *names*, and empty chosen names, resolve to ``None``.
    Never drops, reorders or mutates *records*.
    """
    enriched: list[EnrichedEvaluation] = []
    for record in records:
        key = record.conversation_id.strip() if isinstance(record.conversation_id, str) else None
        name = names.get(key, _ABSENT) if key else _ABSENT
        enriched.append(
            EnrichedEvaluation(
                evaluation=record,
                customer_name=None if name is _ABSENT else (name or None),
            )
        )
    return enriched
