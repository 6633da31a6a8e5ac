"""Candidate reduction — one display name per conversation.

Tie-break rule: first-seen wins. The first message for a conversation in
input order supplies the name; later messages for the same conversation
are ignored. An empty or missing ``display_name`` is still a valid first
choice, so a conversation whose first customer message has no name
has no customer name rather than falling through to a later message.
"""
from __future__ import annotations

from collections.abc import Iterable

from convoeval.enrichment.records import MessageRecord


def reduce_first_seen(messages: Iterable[MessageRecord]) -> dict[str, str | None]:
    """Map each conversation id to the display name of its first message."""
    names: dict[str, str | None] = {}
    for message in messages:
        key = message.conversation_id
        # Keyless rows cannot be joined back to an evaluation
        if not key or key in names:
            continue
        names[key] = message.display_name
    return names
