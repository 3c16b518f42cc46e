from __future__ import annotations

import asyncio

from app.services.reset_token_store import InMemoryResetTokenStore, ResetTokenStore


def test_in_memory_store_satisfies_protocol() -> None:
    assert isinstance(InMemoryResetTokenStore(), ResetTokenStore)


def test_issue_then_consume_returns_user_once() -> None:
    store = InMemoryResetTokenStore()
    token = asyncio.run(store.issue(7))
    assert len(token) >= 32
    assert asyncio.run(store.consume(token)) == 7
    assert asyncio.run(store.consume(token)) is None


def test_tokens_are_unique_per_issue() -> None:
    store = InMemoryResetTokenStore()
    assert asyncio.run(store.issue(1)) != asyncio.run(store.issue(1))


def test_unknown_token_is_rejected() -> None:
    assert asyncio.run(InMemoryResetTokenStore().consume("nope")) is None


def test_expired_token_is_rejected() -> None:
    store = InMemoryResetTokenStore(ttl_seconds=-1)
    token = asyncio.run(store.issue(3))
    assert asyncio.run(store.consume(token)) is None
