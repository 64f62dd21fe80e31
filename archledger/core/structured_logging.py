"""Correlation-aware JSON logging.

Every log line written through ``log_json`` is a single JSON object. While an
API request or a Celery sync task runs, its correlation id is bound in a
context variable and stamped on each line as ``correlation_id``; the HTTP
layer echoes the same value in ``X-Request-ID``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def current_correlation_id() -> str | None:
    return _correlation_id.get()


def new_correlation_id() -> str:
    return str(uuid4())


def bind_correlation_id(correlation_id: str | None) -> Token[str | None]:
    """Bind a correlation id; pass the returned token to ``unbind_correlation_id``.

    Celery binds in ``task_prerun`` and unbinds in ``task_postrun``, so the
    pair is split across two signal handlers.
    """
    return _correlation_id.set(correlation_id)


def unbind_correlation_id(token: Token[str | None]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None) -> Iterator[None]:
    """Bind ``correlation_id`` for the duration of the block."""
    token = bind_correlation_id(correlation_id)
    try:
        yield
    finally:
        unbind_correlation_id(token)


def log_json(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """Emit one JSON log line, tagged with the bound correlation id if any."""

    payload: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "event": event,
    }
    correlation_id = current_correlation_id()
    if correlation_id:
        payload["correlation_id"] = correlation_id

    payload.update(fields)
    logger.log(level, json.dumps(payload, default=str))
