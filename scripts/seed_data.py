"""Seed script for development data.

Creates:
- Project "ArchLedger Demo" with its canvas
- Three components (gateway, service, database)
- Two decision records, the first superseded by the second, linked to components
- Optionally a GitHub repository when SEED_GITHUB_REPO ("owner/name") and
  SEED_GITHUB_TOKEN are set

Can be run multiple times safely (skips if the project exists).
"""
import asyncio
import os
import sys
from pathlib import Path

# Add the project root to path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

from sqlalchemy import select

from archledger.core.database import get_db
from archledger.core.encryption import encrypt
from archledger.models.enums import ComponentType
from archledger.models.git_repository import GitRepository
from archledger.models.project import Project
from archledger.schemas.component import CreateComponentRequest, Position
from archledger.schemas.decision import CreateDecisionRequest
from archledger.schemas.project import CreateProjectRequest
from archledger.services.component_service import ComponentService
from archledger.services.decision_service import DecisionService
from archledger.services.project_service import ProjectService

SEED_ACTOR = "seed"


async def seed_data():
    """Seed development data."""
    print("Starting database seeding...")

    project_name = os.environ.get("SEED_PROJECT_NAME", "ArchLedger Demo")

    async for db in get_db():
        result = await db.execute(select(Project).where(Project.name == project_name))
        existing = result.scalar_one_or_none()
        if existing:
            print(f"✓ Project '{project_name}' already exists (ID: {existing.id})")
            return

        project, canvas = await ProjectService(db).create(
            CreateProjectRequest(name=project_name, description="Demo architecture map"),
            SEED_ACTOR,
        )
        print(f"✓ Created project '{project_name}' (ID: {project.id})")

        components = ComponentService(db)
        gateway = await components.create(
            canvas.id,
            CreateComponentRequest(name="API Gateway", type=ComponentType.SERVICE, position=Position(x=0, y=0)),
        )
        orders = await components.create(
            canvas.id,
            CreateComponentRequest(name="Orders Service", type=ComponentType.SERVICE, position=Position(x=240, y=0)),
        )
        orders_db = await components.create(
            canvas.id,
            CreateComponentRequest(name="Orders DB", type=ComponentType.DATABASE, position=Position(x=240, y=160)),
        )
        for component in (gateway, orders, orders_db):
            print(f"✓ Created component '{component.name}' ({component.component_id})")

        decisions = DecisionService(db)
        rest = await decisions.create(
            project.id,
            CreateDecisionRequest(
                title="Synchronous REST between gateway and services",
                context="The gateway needs order data on every checkout request.",
                decision="Call the Orders Service over REST.",
                rationale="Simple to build and debug for the first release.",
                consequences="Gateway latency depends on the Orders Service.",
                status="ACCEPTED",
                tags=["integration"],
                linked_component_ids=[gateway.id, orders.id],
            ),
            SEED_ACTOR,
        )
        events = await decisions.create(
            project.id,
            CreateDecisionRequest(
                title="Publish order events instead of synchronous calls",
                context="Checkout latency grew with Orders Service load.",
                decision="The Orders Service publishes order events; the gateway reads a projection.",
                rationale="Decouples checkout latency from order processing.",
                consequences="Reads are eventually consistent.",
                status="ACCEPTED",
                tags=["integration", "events"],
                linked_component_ids=[gateway.id, orders.id, orders_db.id],
            ),
            SEED_ACTOR,
        )
        await decisions.supersede(rest.id, events.id)
        print(f"✓ Created decisions; '{rest.title}' superseded by '{events.title}'")

        repo = os.environ.get("SEED_GITHUB_REPO")
        token = os.environ.get("SEED_GITHUB_TOKEN")
        if repo and token and "/" in repo:
            owner, name = repo.split("/", 1)
            db.add(
                GitRepository(
                    project_id=project.id,
                    owner=owner,
                    name=name,
                    full_name=repo,
                    access_token=encrypt(token),
                )
            )
            print(f"✓ Connected repository '{repo}' (synced by the Celery beat schedule)")

        await db.commit()

    print("\n✓ Database seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
