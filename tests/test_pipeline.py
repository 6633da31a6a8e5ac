"""Tests for convoeval/enrichment/pipeline.py.

Covers:
- idempotence over unchanged storage
- every output record carries customer_name
- unmatched conversations resolve to None
- one lookup call with each key once
- first-seen tie-break
- empty-key short-circuit
- order preservation
- degraded and strict error modes
- limit validation and clamping
"""
from __future__ import annotations

import asyncio
import logging

import pytest

from convoeval.enrichment.errors import StorageError
from convoeval.enrichment.pipeline import EnrichmentPipeline, ErrorMode
from convoeval.enrichment.records import EvaluationRecord, MessageRecord


def _evaluation(evaluation_id: str, conversation_id: str | None) -> EvaluationRecord:
    return EvaluationRecord(
        evaluation_id=evaluation_id,
        conversation_id=conversation_id,
        fields={"score": 4.0},
    )


def _message(conversation_id: str, display_name: str | None, role: str = "customer") -> MessageRecord:
    return MessageRecord(conversation_id=conversation_id, role=role, display_name=display_name)


@pytest.fixture()
def populated_store(make_store):
    return make_store(
        evaluations=[
            _evaluation("EV-1", "c-1"),
            _evaluation("EV-2", "c-2"),
            _evaluation("EV-3", "c-1"),
            _evaluation("EV-4", "c-3"),
        ],
        messages=[
            _message("c-1", "Sam", role="agent"),
            _message("c-1", "Alice"),
            _message("c-1", "Alicia"),
            _message("c-2", "Bob"),
            _message("c-3", "Kim", role="agent"),
        ],
    )


# ===========================================================================
# Properties
# ===========================================================================

@pytest.mark.asyncio
async def test_enrich_resolves_names(populated_store):
    pipeline = EnrichmentPipeline(populated_store)

    enriched = await pipeline.enrich(10)

    assert [(e.evaluation_id, e.customer_name) for e in enriched] == [
        ("EV-1", "Alice"),
        ("EV-2", "Bob"),
        ("EV-3", "Alice"),
        ("EV-4", None),
    ]


@pytest.mark.asyncio
async def test_enrich_is_idempotent(populated_store):
    pipeline = EnrichmentPipeline(populated_store)

    first = await pipeline.enrich(10)
    second = await pipeline.enrich(10)

    assert first == second
    assert [e.to_dict() for e in first] == [e.to_dict() for e in second]


@pytest.mark.asyncio
async def test_every_record_has_customer_name_key(populated_store):
    enriched = await EnrichmentPipeline(populated_store).enrich(10)

    for item in enriched:
        payload = item.to_dict()
        assert "customer_name" in payload
        assert payload["customer_name"] is None or (isinstance(payload["customer_name"], str) and payload["customer_name"])


@pytest.mark.asyncio
async def test_agent_only_conversation_yields_none(populated_store):
    enriched = await EnrichmentPipeline(populated_store).enrich(10)

    by_id = {e.evaluation_id: e for e in enriched}
    assert by_id["EV-4"].customer_name is None


@pytest.mark.asyncio
async def test_shared_key_looked_up_once(make_store):
    store = make_store(messages=[_message("k", "Alice")])
    records = [_evaluation(f"EV-{i}", "k") for i in range(5)]

    enriched = await EnrichmentPipeline(store).enrich_records(records)

    assert len(store.secondary_calls) == 1
    assert store.secondary_calls[0].keys == frozenset({"k"})
    assert store.secondary_calls[0].role == "customer"
    assert [e.customer_name for e in enriched] == ["Alice"] * 5


@pytest.mark.asyncio
async def test_tie_break_first_seen(make_store):
    store = make_store(messages=[_message("K", "Alice"), _message("K", "Bob")])

    enriched = await EnrichmentPipeline(store).enrich_records([_evaluation("EV-1", "K")])

    assert enriched[0].customer_name == "Alice"


@pytest.mark.asyncio
async def test_empty_first_name_does_not_fall_through(make_store):
    store = make_store(messages=[_message("K", ""), _message("K", "Priya")])

    enriched = await EnrichmentPipeline(store).enrich_records([_evaluation("EV-1", "K")])

    assert enriched[0].customer_name is None


@pytest.mark.asyncio
async def test_empty_keys_skip_lookup(make_store):
    store = make_store(messages=[_message("k", "Alice")])
    records = [_evaluation("EV-1", None), _evaluation("EV-2", ""), _evaluation("EV-3", None)]

    enriched = await EnrichmentPipeline(store).enrich_records(records)

    assert store.secondary_calls == []
    assert [e.customer_name for e in enriched] == [None, None, None]


@pytest.mark.asyncio
async def test_output_order_matches_input(make_store):
    store = make_store(messages=[_message("c", "Carol"), _message("a", "Ann")])
    records = [_evaluation("A", "a"), _evaluation("B", "b"), _evaluation("C", "c")]

    enriched = await EnrichmentPipeline(store).enrich_records(records)

    assert [e.evaluation for e in enriched] == records
    assert [e.customer_name for e in enriched] == ["Ann", None, "Carol"]


@pytest.mark.asyncio
async def test_custom_role(make_store):
    store = make_store(messages=[_message("k", "Alice"), _message("k", "Sam", role="agent")])

    enriched = await EnrichmentPipeline(store, role="agent").enrich_records([_evaluation("EV-1", "k")])

    assert enriched[0].customer_name == "Sam"


@pytest.mark.asyncio
async def test_concurrent_invocations_are_independent(make_store):
    store_a = make_store(evaluations=[_evaluation("EV-A", "a")], messages=[_message("a", "Ann")])
    store_b = make_store(evaluations=[_evaluation("EV-B", "b")], messages=[_message("b", "Ben")])

    result_a, result_b = await asyncio.gather(
        EnrichmentPipeline(store_a).enrich(5),
        EnrichmentPipeline(store_b).enrich(5),
    )

    assert [e.customer_name for e in result_a] == ["Ann"]
    assert [e.customer_name for e in result_b] == ["Ben"]


# ===========================================================================
# Error modes
# ===========================================================================

@pytest.mark.asyncio
async def test_degraded_mode_returns_all_none(make_store, caplog):
    store = make_store(
        evaluations=[_evaluation("EV-1", "a"), _evaluation("EV-2", "b"), _evaluation("EV-3", "c")],
        fail_secondary=True,
    )
    pipeline = EnrichmentPipeline(store, error_mode=ErrorMode.DEGRADED)

    with caplog.at_level(logging.WARNING, logger="convoeval.enrichment.pipeline"):
        enriched = await pipeline.enrich(10)

    assert len(enriched) == 3
    assert [e.customer_name for e in enriched] == [None, None, None]
    assert "Message lookup failed" in caplog.text


@pytest.mark.asyncio
async def test_strict_mode_reraises(make_store):
    store = make_store(evaluations=[_evaluation("EV-1", "a")], fail_secondary=True)
    pipeline = EnrichmentPipeline(store, error_mode="strict")

    with pytest.raises(StorageError):
        await pipeline.enrich(10)


@pytest.mark.asyncio
@pytest.mark.parametrize("mode", [ErrorMode.DEGRADED, ErrorMode.STRICT])
async def test_primary_fetch_failure_is_fatal(make_store, mode):
    store = make_store(fail_primary=True)
    pipeline = EnrichmentPipeline(store, error_mode=mode)

    with pytest.raises(StorageError) as exc_info:
        await pipeline.enrich(10)

    assert exc_info.value.operation == "fetch_primary_records"
    assert store.secondary_calls == []


def test_unknown_error_mode_rejected(make_store):
    with pytest.raises(ValueError):
        EnrichmentPipeline(make_store(), error_mode="lenient")


# ===========================================================================
# Limits
# ===========================================================================

@pytest.mark.asyncio
async def test_fetch_uses_newest_first(populated_store):
    await EnrichmentPipeline(populated_store).enrich(2)

    assert populated_store.primary_calls == [(2, "created_at", True)]


@pytest.mark.asyncio
async def test_limit_clamped_to_max(populated_store):
    await EnrichmentPipeline(populated_store, max_limit=3).enrich(100)

    assert populated_store.primary_calls[0][0] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -5])
async def test_non_positive_limit_rejected(populated_store, limit):
    with pytest.raises(ValueError, match="limit"):
        await EnrichmentPipeline(populated_store).enrich(limit)

    assert populated_store.primary_calls == []


def test_non_positive_max_limit_rejected(make_store):
    with pytest.raises(ValueError):
        EnrichmentPipeline(make_store(), max_limit=0)


@pytest.mark.parametrize("role", ["", "   "])
def test_blank_role_rejected_at_construction(make_store, role):
    store = make_store()

    with pytest.raises(ValueError, match="role"):
        EnrichmentPipeline(store, role=role)

    assert store.primary_calls == []
