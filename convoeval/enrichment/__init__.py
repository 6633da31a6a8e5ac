"""Customer-name enrichment package.

Resolves a display name for each evaluation from the messages of its
conversation without a database JOIN: keys are collected from the
evaluations, one batched message lookup is issued, the candidates are
reduced to one name per conversation, and the names are merged back.
"""
from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.pipeline import EnrichmentPipeline, ErrorMode
from convoeval.enrichment.records import (
    EnrichedEvaluation,
    EvaluationRecord,
    MessageQuery,
    MessageRecord,
)
from convoeval.enrichment.store import RecordStore

__all__ = [
    "EnrichedEvaluation",
    "EnrichmentPipeline",
    "ErrorMode",
    "EvaluationRecord",
    "MessageQuery",
    "MessageRecord",
    "RecordStore",
    "StorageError",
]
