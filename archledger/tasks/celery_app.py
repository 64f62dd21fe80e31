"""Celery application configuration."""

from __future__ import annotations

import logging
from contextvars import Token

from celery import Celery
from celery.signals import task_postrun, task_prerun

from archledger.core.config import get_settings
from archledger.core.structured_logging import bind_correlation_id, unbind_correlation_id

logger = logging.getLogger(__name__)
_task_tokens: dict[str, Token[str | None]] = {}

settings = get_settings()

celery_app = Celery(
    "archledger",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend or settings.celery_broker_url,
    include=["archledger.tasks.github_sync_task"],
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "github-sync": {
            "task": "archledger.tasks.github_sync_task.sync_repositories",
            "schedule": float(settings.github_sync_interval_seconds),
        }
    },
)


@task_prerun.connect
def _attach_correlation_id(
    task_id: str | None = None,
    **_: object,
) -> None:
    """Attach a correlation ID to the task execution context for logging."""

    if not task_id:
        return
    _task_tokens[task_id] = bind_correlation_id(task_id)


@task_postrun.connect
def _detach_correlation_id(
    task_id: str | None = None,
    **_: object,
) -> None:
    """Detach the task correlation ID from the execution context."""

    if not task_id:
        return
    token = _task_tokens.pop(task_id, None)
    if not token:
        return
    try:
        unbind_correlation_id(token)
    except Exception:
        logger.exception("Failed to reset task correlation ID")
