"""Unit tests for bot.middleware.db_session."""

from __future__ import annotations

import pytest

from bot.middleware.db_session import DbSessionMiddleware


class _SessionCtx:
    def __init__(self):
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):  # noqa: ANN001
        self.closed = True
        return False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_middleware_passes_session_to_handler() -> None:
    session = _SessionCtx()
    middleware = DbSessionMiddleware(session_pool=lambda: session)
    seen = {}

    async def handler(event, data):  # noqa: ANN001
        seen.update(data)
        return "handled"

    result = await middleware(handler, object(), {})

    assert result == "handled"
    assert seen["session"] is session
    assert session.closed is True
