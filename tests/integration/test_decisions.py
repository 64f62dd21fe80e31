"""Integration tests for decision record creation, update, listing and linking."""
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.exceptions import IllegalTransition, InvalidStatus, NotFound, ValidationError
from archledger.models.component_decision import ComponentDecision
from archledger.models.enums import DecisionStatus
from archledger.schemas.decision import CreateDecisionRequest, UpdateDecisionRequest
from archledger.services.decision_service import DecisionService


@pytest.mark.asyncio
async def test_create_defaults_to_proposed(db: AsyncSession, test_project, decision_payload):
    service = DecisionService(db)
    decision = await service.create(
        test_project.id,
        CreateDecisionRequest(**decision_payload, tags=["storage", "storage", " db "]),
        "alice",
    )

    assert decision.status == DecisionStatus.PROPOSED
    assert decision.created_by == "alice"
    assert decision.tags == ["storage", "db"]
    assert decision.supersedes_id is None
    assert decision.superseded_by_id is None
    assert decision.linked_component_ids == []


@pytest.mark.asyncio
async def test_create_with_all_fields_blank_lists_all_five(db: AsyncSession, test_project):
    """Validation reports every missing field at once."""
    service = DecisionService(db)
    request = CreateDecisionRequest(title=" ", context="", decision="\t", rationale="", consequences="")

    with pytest.raises(ValidationError) as exc_info:
        await service.create(test_project.id, request, "alice")

    assert exc_info.value.fields == ["title", "context", "decision", "rationale", "consequences"]
    assert set(exc_info.value.details) == set(exc_info.value.fields)


@pytest.mark.asyncio
async def test_create_reports_only_missing_fields(db: AsyncSession, test_project, decision_payload):
    payload = {**decision_payload, "rationale": "  "}
    payload.pop("consequences")

    with pytest.raises(ValidationError) as exc_info:
        await DecisionService(db).create(test_project.id, CreateDecisionRequest(**payload), "alice")

    assert exc_info.value.fields == ["rationale", "consequences"]


@pytest.mark.asyncio
async def test_create_rejects_unknown_status(db: AsyncSession, test_project, decision_payload):
    with pytest.raises(InvalidStatus):
        await DecisionService(db).create(
            test_project.id, CreateDecisionRequest(**decision_payload, status="DONE"), "alice"
        )


@pytest.mark.asyncio
async def test_create_rejects_superseded_status(db: AsyncSession, test_project, decision_payload):
    with pytest.raises(IllegalTransition):
        await DecisionService(db).create(
            test_project.id, CreateDecisionRequest(**decision_payload, status="SUPERSEDED"), "alice"
        )


@pytest.mark.asyncio
async def test_create_unknown_project(db: AsyncSession, decision_payload):
    with pytest.raises(NotFound):
        await DecisionService(db).create(uuid4(), CreateDecisionRequest(**decision_payload), "alice")


@pytest.mark.asyncio
async def test_create_links_components(db: AsyncSession, test_project, test_component, other_component, decision_payload):
    decision = await DecisionService(db).create(
        test_project.id,
        CreateDecisionRequest(
            **decision_payload,
            linked_component_ids=[test_component.id, other_component.id, test_component.id],
        ),
        "alice",
    )

    assert sorted(decision.linked_component_ids) == sorted([test_component.id, other_component.id])


@pytest.mark.asyncio
async def test_update_applies_patch(db: AsyncSession, decision_factory):
    record = await decision_factory()
    service = DecisionService(db)

    updated = await service.update(
        record.id,
        UpdateDecisionRequest(status="ACCEPTED", title="Use PostgreSQL 16", tags=["db"]),
    )

    assert updated.status == DecisionStatus.ACCEPTED
    assert updated.title == "Use PostgreSQL 16"
    assert updated.tags == ["db"]
    assert updated.context == "We need a relational store."


@pytest.mark.asyncio
async def test_update_rejects_blank_fields(db: AsyncSession, decision_factory):
    record = await decision_factory()

    with pytest.raises(ValidationError) as exc_info:
        await DecisionService(db).update(record.id, UpdateDecisionRequest(context=" ", rationale=None))

    assert exc_info.value.fields == ["context", "rationale"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "patch",
    [
        {},
        {"title": "Renamed"},
        {"status": "ACCEPTED"},
        {"status": "PROPOSED"},
        {"tags": ["x"]},
    ],
)
async def test_superseded_decision_rejects_every_update(db: AsyncSession, decision_factory, patch):
    record = await decision_factory(status=DecisionStatus.SUPERSEDED)

    with pytest.raises(IllegalTransition):
        await DecisionService(db).update(record.id, UpdateDecisionRequest(**patch))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status",
    [DecisionStatus.PROPOSED, DecisionStatus.ACCEPTED, DecisionStatus.DEPRECATED, DecisionStatus.SUPERSEDED],
)
async def test_update_never_sets_superseded(db: AsyncSession, decision_factory, status):
    record = await decision_factory(status=status)

    with pytest.raises(IllegalTransition):
        await DecisionService(db).update(record.id, UpdateDecisionRequest(status="SUPERSEDED"))


@pytest.mark.asyncio
async def test_update_unknown_decision(db: AsyncSession):
    with pytest.raises(NotFound):
        await DecisionService(db).update(uuid4(), UpdateDecisionRequest(title="x"))


@pytest.mark.asyncio
async def test_list_by_project_filters_by_status(db: AsyncSession, decision_factory):
    await decision_factory(title="Proposed one")
    accepted = await decision_factory(title="Accepted one", status=DecisionStatus.ACCEPTED)
    service = DecisionService(db)

    everything = await service.list_by_project(accepted.project_id)
    only_accepted = await service.list_by_project(accepted.project_id, "ACCEPTED")

    assert {d.title for d in everything} == {"Proposed one", "Accepted one"}
    assert [d.id for d in only_accepted] == [accepted.id]

    with pytest.raises(InvalidStatus):
        await service.list_by_project(accepted.project_id, "accepted")


@pytest.mark.asyncio
async def test_link_twice_leaves_one_row(db: AsyncSession, decision_factory, test_component):
    """Linking is idempotent."""
    record = await decision_factory()
    service = DecisionService(db)

    assert await service.link_to_component(record.id, test_component.id) is True
    assert await service.link_to_component(record.id, test_component.id) is False
    await db.commit()

    count = await db.scalar(
        select(func.count()).select_from(ComponentDecision).where(
            ComponentDecision.decision_id == record.id,
            ComponentDecision.component_id == test_component.id,
        )
    )
    assert count == 1


@pytest.mark.asyncio
async def test_link_unknown_ids(db: AsyncSession, decision_factory, test_component):
    record = await decision_factory()
    service = DecisionService(db)

    with pytest.raises(NotFound) as exc_info:
        await service.link_to_component(uuid4(), test_component.id)
    assert exc_info.value.entity == "Decision"

    with pytest.raises(NotFound) as exc_info:
        await service.link_to_component(record.id, uuid4())
    assert exc_info.value.entity == "Component"


@pytest.mark.asyncio
async def test_unlink_is_idempotent(db: AsyncSession, decision_factory, test_component):
    record = await decision_factory()
    service = DecisionService(db)
    await service.link_to_component(record.id, test_component.id)

    assert await service.unlink_from_component(record.id, test_component.id) is True
    assert await service.unlink_from_component(record.id, test_component.id) is False
    assert await service.list_by_component(test_component.id) == []


@pytest.mark.asyncio
async def test_list_by_component(db: AsyncSession, decision_factory, test_component, other_component):
    first = await decision_factory(title="First")
    second = await decision_factory(title="Second")
    service = DecisionService(db)
    await service.link_to_component(first.id, test_component.id)
    await service.link_to_component(second.id, test_component.id)
    await service.link_to_component(second.id, other_component.id)

    linked = await service.list_by_component(test_component.id)

    assert {d.id for d in linked} == {first.id, second.id}
    counts = await service.count_links_by_component([test_component.id, other_component.id, uuid4()])
    assert counts[test_component.id] == 2
    assert counts[other_component.id] == 1
    assert sorted(counts.values()) == [0, 1, 2]
