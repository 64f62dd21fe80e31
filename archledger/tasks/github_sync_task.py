"""Celery task for periodic GitHub commit sync."""

import asyncio
import logging
import time

from archledger.core.database import isolated_session_factory
from archledger.core.structured_logging import log_json
from archledger.services.github_sync_service import GitHubSyncService
from archledger.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


async def _sync_all() -> dict[str, int]:
    async with isolated_session_factory() as session_factory:
        return await GitHubSyncService(session_factory).sync_all_repositories()


@celery_app.task(name="archledger.tasks.github_sync_task.sync_repositories")
def sync_repositories() -> dict[str, int]:
    """Sync every repository that is due.

    Runs every ``GITHUB_SYNC_INTERVAL_SECONDS`` via Celery Beat (see
    `archledger.tasks.celery_app`). Per-repository failures are counted, not raised.
    """

    started = time.perf_counter()
    log_json(logger, logging.INFO, "github_sync_task_start")

    try:
        summary = asyncio.run(_sync_all())
    except Exception as exc:
        duration_ms = (time.perf_counter() - started) * 1000
        log_json(
            logger,
            logging.ERROR,
            "github_sync_task_error",
            duration_ms=round(duration_ms, 2),
            error=str(exc),
            exception=exc.__class__.__name__,
        )
        raise

    duration_ms = (time.perf_counter() - started) * 1000
    log_json(
        logger,
        logging.INFO,
        "github_sync_task_done",
        duration_ms=round(duration_ms, 2),
        **summary,
    )
    return summary
