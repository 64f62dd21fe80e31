"""Contract tests for risk analysis and commit tagging endpoints."""
from uuid import uuid4

import pytest
from httpx import AsyncClient

from archledger.models.component import Component
from archledger.models.project import Project


@pytest.mark.asyncio
async def test_component_risk_returns_metrics(client: AsyncClient, test_component: Component):
    response = await client.get(f"/api/components/{test_component.id}/risk")

    assert response.status_code == 200
    data = response.json()
    assert data["component_id"] == "COMP-TEST-ORDERS"
    assert data["risk_score"] == 40
    assert data["overall_severity"] == "critical"
    assert data["risk_factors"] == [
        {
            "type": "low_decision_coverage",
            "description": "Low decision documentation: 0 decisions",
            "metric": 0.0,
            "severity": "critical",
        }
    ]


@pytest.mark.asyncio
async def test_component_risk_returns_404(client: AsyncClient):
    response = await client.get(f"/api/components/{uuid4()}/risk")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_project_risks_with_summary(
    client: AsyncClient,
    test_project: Project,
    test_component: Component,
    other_component: Component,
    decision_factory,
):
    for i in range(3):
        record = await decision_factory(title=f"Payments {i}")
        await client.post(f"/api/decisions/{record.id}/link", json={"component_id": str(other_component.id)})

    response = await client.get(f"/api/projects/{test_project.id}/risks")

    assert response.status_code == 200
    data = response.json()
    assert [r["component_id"] for r in data["risks"]] == ["COMP-TEST-ORDERS", "COMP-TEST-PAYMENTS"]
    assert data["summary"] == {
        "total_components": 2,
        "critical_risk": 1,
        "high_risk": 0,
        "medium_risk": 0,
        "low_risk": 1,
        "average_risk_score": 20,
    }

    response = await client.get(f"/api/projects/{test_project.id}/risks", params={"high_risk_only": "true"})
    assert [r["component_id"] for r in response.json()["risks"]] == ["COMP-TEST-ORDERS"]
    assert response.json()["summary"]["total_components"] == 1


@pytest.mark.asyncio
async def test_project_risks_rejects_unknown_severity(client: AsyncClient, test_project: Project):
    response = await client.get(
        f"/api/projects/{test_project.id}/risks",
        params={"high_risk_only": "true", "min_severity": "extreme"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_project_risks_returns_404(client: AsyncClient):
    response = await client.get(f"/api/projects/{uuid4()}/risks")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_tagging_commits_feeds_churn(
    client: AsyncClient,
    test_component: Component,
    commit_factory,
):
    for i in range(6):
        await commit_factory(f"sha{i}", days_ago=3)
        response = await client.post(f"/api/commits/sha{i}/tag", json={"component_id": str(test_component.id)})
        assert response.status_code == 200
        assert response.json()["sha"] == f"sha{i}"

    risk = (await client.get(f"/api/components/{test_component.id}/risk")).json()
    assert risk["churn_rate"] == 6
    assert risk["risk_factors"][0]["type"] == "high_churn"
    assert risk["risk_factors"][0]["severity"] == "medium"

    response = await client.request("DELETE", "/api/commits/sha0/tag", json={"component_id": str(test_component.id)})
    assert response.status_code == 204
    risk = (await client.get(f"/api/components/{test_component.id}/risk")).json()
    assert risk["churn_rate"] == 5


@pytest.mark.asyncio
async def test_tag_unknown_commit_returns_404(client: AsyncClient, test_component: Component):
    response = await client.post("/api/commits/deadbeef/tag", json={"component_id": str(test_component.id)})

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"
