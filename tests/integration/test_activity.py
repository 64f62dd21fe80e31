"""Integration tests for the best-effort activity feed."""
import logging
from uuid import uuid4

import pytest

from archledger.models.enums import ActivityType
from archledger.services.activity_service import ActivityService


class BrokenSessionFactory:
    def __call__(self):
        raise RuntimeError("database unavailable")


@pytest.mark.asyncio
async def test_log_and_list(session_factory, test_project):
    service = ActivityService(session_factory)

    first = await service.log(test_project.id, ActivityType.DECISION_CREATED, {"title": "Use PostgreSQL"})
    second = await service.log(test_project.id, ActivityType.DECISION_DELETED)

    assert first is not None
    assert second.data == {}

    entries, total = await service.list_for_project(test_project.id)
    assert {e.id for e in entries} == {first.id, second.id}
    assert total == 2
    assert await service.list_for_project(uuid4()) == ([], 0)

    page, total = await service.list_for_project(test_project.id, limit=1, offset=1)
    assert len(page) == 1
    assert total == 2
    assert page[0].id != entries[0].id


@pytest.mark.asyncio
async def test_failed_write_is_logged_and_dropped(caplog):
    service = ActivityService(BrokenSessionFactory())

    with caplog.at_level(logging.ERROR, logger="archledger.services.activity_service"):
        result = await service.log(uuid4(), ActivityType.COMPONENT_CREATED, {"name": "Gateway"})

    assert result is None
    assert "activity_log_failed" in caplog.text
    assert "database unavailable" in caplog.text
