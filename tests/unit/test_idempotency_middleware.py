"""Tests for submit idempotency."""

import uuid
from typing import Any

import pytest

from backend.tripdesk.db.inmemory import InMemoryIdempotencyStore
from backend.tripdesk.middleware.idempotency import IdempotencyMiddleware


class CountingHandler:
    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail

    async def __call__(self) -> tuple[int, dict[str, Any]]:
        self.calls += 1
        if self.fail:
            raise RuntimeError("boom")
        return (201, {"id": f"submission-{self.calls}"})


@pytest.mark.asyncio
async def test_without_key_runs_every_time() -> None:
    middleware = IdempotencyMiddleware(InMemoryIdempotencyStore())
    handler = CountingHandler()
    user_id = uuid.uuid4()

    await middleware.run(handler, user_id, None)
    await middleware.run(handler, user_id, None)

    assert handler.calls == 2


@pytest.mark.asyncio
async def test_replay_returns_first_response() -> None:
    middleware = IdempotencyMiddleware(InMemoryIdempotencyStore())
    handler = CountingHandler()
    user_id = uuid.uuid4()

    first = await middleware.run(handler, user_id, "key-1")
    replay = await middleware.run(handler, user_id, "key-1")

    assert handler.calls == 1
    assert first[:2] == (201, {"id": "submission-1"})
    assert replay[:2] == first[:2]
    assert replay[2]["X-Idempotent-Replay"] == "true"


@pytest.mark.asyncio
async def test_keys_are_scoped_per_user() -> None:
    middleware = IdempotencyMiddleware(InMemoryIdempotencyStore())
    handler = CountingHandler()

    await middleware.run(handler, uuid.uuid4(), "shared-key")
    await middleware.run(handler, uuid.uuid4(), "shared-key")

    assert handler.calls == 2


@pytest.mark.asyncio
async def test_pending_key_conflicts() -> None:
    store = InMemoryIdempotencyStore()
    middleware = IdempotencyMiddleware(store)
    user_id = uuid.uuid4()
    outcomes: list[tuple[int, dict[str, Any], dict[str, str]]] = []

    async def nested() -> tuple[int, dict[str, Any]]:
        outcomes.append(await middleware.run(CountingHandler(), user_id, "key-1"))
        return (201, {"id": "outer"})

    await middleware.run(nested, user_id, "key-1")

    assert outcomes[0][0] == 409


@pytest.mark.asyncio
async def test_failed_request_can_be_retried() -> None:
    middleware = IdempotencyMiddleware(InMemoryIdempotencyStore())
    user_id = uuid.uuid4()

    with pytest.raises(RuntimeError):
        await middleware.run(CountingHandler(fail=True), user_id, "key-1")

    handler = CountingHandler()
    status_code, body, _ = await middleware.run(handler, user_id, "key-1")

    assert status_code == 201
    assert handler.calls == 1
