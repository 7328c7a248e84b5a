"""HTTP idempotency for submit."""

import json
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from backend.tripdesk.db.repositories import IdempotencyStatus, IdempotencyStore, StoredResponse

Handler = Callable[[], Awaitable[tuple[int, dict[str, Any]]]]


class IdempotencyMiddleware:
    """Replays the response of a completed request carrying the same key.

    - Reads the Idempotency-Key header value passed by the route
    - Stores the full response envelope (status, headers, body) on success
    - Replays completed responses with an ``X-Idempotent-Replay`` header
    - Returns 409 while a request with the key is still in progress
    - A request that failed leaves an error record and may be retried
    """

    def __init__(self, store: IdempotencyStore, ttl_seconds: int = 24 * 3600) -> None:
        """Initialize idempotency middleware.

        Args:
            store: Idempotency store implementation
            ttl_seconds: TTL for idempotency records (default 24h)
        """
        self._store = store
        self._ttl_seconds = ttl_seconds

    async def run(
        self, handler: Handler, user_id: UUID, idempotency_key: str | None
    ) -> tuple[int, dict[str, Any], dict[str, str]]:
        """Execute ``handler`` at most once per (key, user).

        Args:
            handler: Coroutine factory returning (status_code, body)
            user_id: User ID from auth
            idempotency_key: Header value, or None to run unconditionally

        Returns:
            (status_code, body, headers)
        """
        if idempotency_key is None:
            status_code, body = await handler()
            return (status_code, body, {})

        record = self._store.get(idempotency_key, user_id)

        if record is not None and record.status == IdempotencyStatus.completed:
            if record.response is None:
                return (500, {"error": "Stored response missing for completed request"}, {})

            stored = record.response
            body = json.loads(stored.body.decode("utf-8"))
            replay_headers = dict(stored.headers)
            replay_headers["X-Idempotent-Replay"] = "true"
            return (stored.status_code, body, replay_headers)

        if record is not None and record.status == IdempotencyStatus.pending:
            return (409, {"error": "Request with this idempotency key is still in progress"}, {})

        # No record, or the previous attempt failed and created nothing
        ttl_until = datetime.now() + timedelta(seconds=self._ttl_seconds)
        self._store.set_pending(idempotency_key, user_id, ttl_until)

        try:
            status_code, body = await handler()
        except Exception:
            self._store.set_error(idempotency_key, user_id, ttl_until)
            raise

        headers = {"Content-Type": "application/json"}
        stored_response = StoredResponse(
            status_code=status_code,
            headers=headers,
            body=json.dumps(body).encode("utf-8"),
        )
        self._store.set_completed(idempotency_key, user_id, ttl_until, stored_response)
        return (status_code, body, headers)
