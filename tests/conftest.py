import os

import pytest
from fastapi.testclient import TestClient

from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.records import EvaluationRecord, MessageQuery, MessageRecord


class InMemoryRecordStore:
    """``RecordStore`` fake that serves fixed rows and records every call."""

    def __init__(
        self,
        evaluations: list[EvaluationRecord] | None = None,
        messages: list[MessageRecord] | None = None,
        fail_primary: bool = False,
        fail_secondary: bool = False,
    ) -> None:
        self.evaluations = list(evaluations or [])
        self.messages = list(messages or [])
        self.fail_primary = fail_primary
        self.fail_secondary = fail_secondary
        self.primary_calls: list[tuple[int, str, bool]] = []
        self.secondary_calls: list[MessageQuery] = []

    async def fetch_primary_records(
        self,
        limit: int,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[EvaluationRecord]:
        self.primary_calls.append((limit, order_by, descending))
        if self.fail_primary:
            raise StorageError("fetch_primary_records", "connection refused")
        return self.evaluations[:limit]

    async def fetch_secondary_records(self, query: MessageQuery) -> list[MessageRecord]:
        self.secondary_calls.append(query)
        if self.fail_secondary:
            raise StorageError("fetch_secondary_records", "connection reset")
        return [m for m in self.messages if m.conversation_id in query.keys and m.role == query.role]


@pytest.fixture
def make_store():
    return InMemoryRecordStore


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

    from convoeval.core.settings import get_settings

    get_settings.cache_clear()

    from convoeval.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_settings.cache_clear()
    os.environ.pop("DATABASE_URL", None)
