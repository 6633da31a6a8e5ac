#!/usr/bin/env python3
"""Seed demo data: 6 evaluations and the messages of their conversations.

Usage:
    python scripts/seed_demo.py          # uses DATABASE_URL from env / .env
    DATABASE_URL=... python scripts/seed_demo.py
"""
from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

# Ensure project root is on sys.path
sys.path.insert(0, ".")

from convoeval.core.constants import ROLE_AGENT, ROLE_CUSTOMER, ROLE_SYSTEM
from convoeval.core.settings import get_settings
from convoeval.db.base import Base
from convoeval.db.models import Evaluation, Message


async def seed(session: AsyncSession) -> None:
    """Insert demo evaluations and a handful of messages per conversation."""

    now = datetime.now(timezone.utc)

    demo_conversations = [
        # (customer display names in message order, agent name, score)
        (["Alice Johnson"], "Sam", 4.5),
        (["Bob Smith", "Robert Smith"], "Sam", 3.0),
        (["", "Priya Patel"], "Lee", 4.0),
        (["Carlos Rivera"], "Lee", 2.5),
        ([], "Kim", 5.0),  # agent-only conversation: no customer name
        (["Fatima Khan"], "Kim", 3.5),
    ]

    for index, (customer_names, agent_name, score) in enumerate(demo_conversations, start=1):
        conversation_id = str(uuid4())
        started = now - timedelta(hours=len(demo_conversations) - index)

        session.add(
            Message(
                conversation_id=conversation_id,
                role=ROLE_SYSTEM,
                display_name="System",
                body="Conversation started",
                created_at=started,
            )
        )
        for offset, name in enumerate(customer_names, start=1):
            session.add(
                Message(
                    conversation_id=conversation_id,
                    role=ROLE_CUSTOMER,
                    display_name=name,
                    body="I need help with my order",
                    created_at=started + timedelta(minutes=offset * 2),
                )
            )
        session.add(
            Message(
                conversation_id=conversation_id,
                role=ROLE_AGENT,
                display_name=agent_name,
                body="Happy to help",
                created_at=started + timedelta(minutes=1),
            )
        )
        session.add(
            Evaluation(
                evaluation_code=f"EV-{1000 + index}",
                conversation_id=conversation_id,
                score=score,
                summary=f"Demo evaluation {index}",
                created_at=started + timedelta(minutes=30),
            )
        )

    # An evaluation whose conversation id was never recorded
    session.add(
        Evaluation(
            evaluation_code=f"EV-{1000 + len(demo_conversations) + 1}",
            conversation_id=None,
            score=None,
            summary="Imported without conversation",
            created_at=now,
        )
    )

    await session.commit()
    print(f"Seeded {len(demo_conversations) + 1} evaluations")


async def main() -> None:
    settings = get_settings()
    engine = create_async_engine(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        await seed(session)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
