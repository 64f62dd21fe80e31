"""Contract tests for decision ledger endpoints."""
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.models.activity import Activity
from archledger.models.component import Component
from archledger.models.enums import ActivityType, DecisionStatus
from archledger.models.project import Project


@pytest.mark.asyncio
async def test_create_decision_returns_201(
    client: AsyncClient,
    test_project: Project,
    decision_payload: dict,
    actor_headers: dict,
):
    """POST /projects/{id}/decisions returns 201 and records the actor."""
    response = await client.post(
        f"/api/projects/{test_project.id}/decisions",
        json={**decision_payload, "tags": ["storage"]},
        headers=actor_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PROPOSED"
    assert data["created_by"] == "alice"
    assert data["tags"] == ["storage"]
    assert data["supersedes_id"] is None
    assert data["linked_component_ids"] == []
    assert "id" in data
    assert "created_at" in data


@pytest.mark.asyncio
async def test_create_decision_without_actor_is_anonymous(
    client: AsyncClient,
    test_project: Project,
    decision_payload: dict,
):
    response = await client.post(f"/api/projects/{test_project.id}/decisions", json=decision_payload)

    assert response.status_code == 201
    assert response.json()["created_by"] == "anonymous"


@pytest.mark.asyncio
async def test_create_decision_returns_422_listing_missing_fields(
    client: AsyncClient,
    test_project: Project,
):
    """Every missing field is reported in one error body."""
    response = await client.post(
        f"/api/projects/{test_project.id}/decisions",
        json={"title": "Only a title", "context": "  "},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_error"
    assert set(body["details"]) == {"context", "decision", "rationale", "consequences"}
    assert "context" in body["message"]


@pytest.mark.asyncio
async def test_create_decision_returns_422_for_unknown_status(
    client: AsyncClient,
    test_project: Project,
    decision_payload: dict,
):
    response = await client.post(
        f"/api/projects/{test_project.id}/decisions",
        json={**decision_payload, "status": "REJECTED"},
    )

    assert response.status_code == 422
    assert response.json()["error"] == "invalid_status"


@pytest.mark.asyncio
async def test_create_decision_returns_404_for_unknown_project(
    client: AsyncClient,
    decision_payload: dict,
):
    response = await client.post(f"/api/projects/{uuid4()}/decisions", json=decision_payload)

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_create_decision_logs_activity(
    client: AsyncClient,
    db: AsyncSession,
    test_project: Project,
    decision_payload: dict,
    actor_headers: dict,
):
    response = await client.post(
        f"/api/projects/{test_project.id}/decisions",
        json=decision_payload,
        headers=actor_headers,
    )

    activities = (await db.execute(select(Activity))).scalars().all()
    assert len(activities) == 1
    assert activities[0].type == ActivityType.DECISION_CREATED
    assert activities[0].data["decision_id"] == response.json()["id"]
    assert activities[0].data["created_by"] == "alice"


@pytest.mark.asyncio
async def test_list_decisions_filters_by_status(
    client: AsyncClient,
    test_project: Project,
    decision_factory,
):
    await decision_factory(title="Draft")
    await decision_factory(title="Adopted", status=DecisionStatus.ACCEPTED)

    response = await client.get(f"/api/projects/{test_project.id}/decisions", params={"status": "ACCEPTED"})

    assert response.status_code == 200
    assert [d["title"] for d in response.json()] == ["Adopted"]

    response = await client.get(f"/api/projects/{test_project.id}/decisions", params={"status": "bogus"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_decision_returns_404(client: AsyncClient):
    response = await client.get(f"/api/decisions/{uuid4()}")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert "message" in body


@pytest.mark.asyncio
async def test_patch_superseded_decision_returns_409(client: AsyncClient, decision_factory):
    record = await decision_factory(status=DecisionStatus.SUPERSEDED)

    response = await client.patch(f"/api/decisions/{record.id}", json={"title": "Renamed"})

    assert response.status_code == 409
    assert response.json()["error"] == "illegal_transition"


@pytest.mark.asyncio
async def test_patch_decision_returns_200(client: AsyncClient, decision_factory):
    record = await decision_factory()

    response = await client.patch(f"/api/decisions/{record.id}", json={"status": "ACCEPTED"})

    assert response.status_code == 200
    assert response.json()["status"] == "ACCEPTED"


@pytest.mark.asyncio
async def test_supersede_and_chain(client: AsyncClient, decision_factory):
    """POST /decisions/{id}/supersede links both records; GET chain returns oldest first."""
    old = await decision_factory(title="Old")
    new = await decision_factory(title="New")

    response = await client.post(
        f"/api/decisions/{old.id}/supersede",
        json={"new_decision_id": str(new.id)},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["old_decision"]["status"] == "SUPERSEDED"
    assert data["old_decision"]["superseded_by_id"] == str(new.id)
    assert data["new_decision"]["supersedes_id"] == str(old.id)

    response = await client.get(f"/api/decisions/{new.id}/chain")
    assert response.status_code == 200
    assert [d["id"] for d in response.json()] == [str(old.id), str(new.id)]


@pytest.mark.asyncio
async def test_supersede_cycle_returns_409(client: AsyncClient, decision_factory):
    a = await decision_factory(title="A")
    b = await decision_factory(title="B")
    await client.post(f"/api/decisions/{a.id}/supersede", json={"new_decision_id": str(b.id)})

    response = await client.post(f"/api/decisions/{b.id}/supersede", json={"new_decision_id": str(a.id)})

    assert response.status_code == 409
    assert response.json()["error"] == "cycle_detected"


@pytest.mark.asyncio
async def test_supersede_self_returns_409(client: AsyncClient, decision_factory):
    a = await decision_factory()

    response = await client.post(f"/api/decisions/{a.id}/supersede", json={"new_decision_id": str(a.id)})

    assert response.status_code == 409
    assert response.json()["error"] == "self_supersession"


@pytest.mark.asyncio
async def test_delete_referenced_decision_returns_409(client: AsyncClient, decision_factory):
    old = await decision_factory(title="Old")
    new = await decision_factory(title="New")
    await client.post(f"/api/decisions/{old.id}/supersede", json={"new_decision_id": str(new.id)})

    response = await client.delete(f"/api/decisions/{old.id}")

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "referenced_by_supersession"
    assert body["details"]["referenced_by"] == [str(new.id)]

    assert (await client.delete(f"/api/decisions/{new.id}")).status_code == 204
    assert (await client.delete(f"/api/decisions/{old.id}")).status_code == 204
    assert (await client.get(f"/api/decisions/{old.id}")).status_code == 404


@pytest.mark.asyncio
async def test_link_and_unlink_return_204(
    client: AsyncClient,
    decision_factory,
    test_component: Component,
):
    record = await decision_factory()
    url = f"/api/decisions/{record.id}/link"
    body = {"component_id": str(test_component.id)}

    assert (await client.post(url, json=body)).status_code == 204
    assert (await client.post(url, json=body)).status_code == 204

    response = await client.get(f"/api/components/{test_component.id}/decisions")
    assert [d["id"] for d in response.json()] == [str(record.id)]
    assert response.json()[0]["linked_component_ids"] == [str(test_component.id)]

    assert (await client.request("DELETE", url, json=body)).status_code == 204
    assert (await client.request("DELETE", url, json=body)).status_code == 204
    assert (await client.get(f"/api/components/{test_component.id}/decisions")).json() == []


@pytest.mark.asyncio
async def test_link_unknown_component_returns_404(client: AsyncClient, decision_factory):
    record = await decision_factory()

    response = await client.post(f"/api/decisions/{record.id}/link", json={"component_id": str(uuid4())})

    assert response.status_code == 404
