"""Record types exchanged between the storage boundary and the enrichment core."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class EvaluationRecord:
    """An evaluation as read from storage.

    ``evaluation_id`` is the human-readable identifier (``EV-1042``);
    ``conversation_id`` is the correlation key shared with messages and may
    be missing on malformed rows.
    """

    evaluation_id: str
    conversation_id: str | None
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MessageRecord:
    """A conversation message; messages of the lookup role supply the name."""

    conversation_id: str
    role: str
    display_name: str | None = None
    created_at: datetime | None = None
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MessageQuery:
    """Batched message filter: ``conversation_id IN keys AND role = role``."""

    keys: frozenset[str]
    role: str

    @classmethod
    def build(cls, keys: Iterable[str], role: str) -> MessageQuery:
        return cls(keys=frozenset(keys), role=role)

    @property
    def is_empty(self) -> bool:
        return not self.keys


@dataclass(frozen=True)
class EnrichedEvaluation:
    """An evaluation plus the customer name resolved for this request.

    ``customer_name`` is ``None`` when the conversation has no customer
    message. It is never written back to storage.
    """

    evaluation: EvaluationRecord
    customer_name: str | None

    @property
    def evaluation_id(self) -> str:
        return self.evaluation.evaluation_id

    @property
    def conversation_id(self) -> str | None:
        return self.evaluation.conversation_id

    def to_dict(self) -> dict[str, Any]:
        payload = dict(self.evaluation.fields)
        payload["evaluation_id"] = self.evaluation.evaluation_id
        payload["conversation_id"] = self.evaluation.conversation_id
        payload["customer_name"] = self.customer_name
        return payload
