"""Component repository for the architecture map."""
import secrets
import time
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.exceptions import NotFound
from archledger.models.base import utcnow
from archledger.models.component import Component
from archledger.models.component_commit import ComponentCommit
from archledger.models.component_decision import ComponentDecision
from archledger.models.project import Canvas
from archledger.schemas.component import CreateComponentRequest, UpdateComponentRequest

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_component_id() -> str:
    """Generate a Component ID of the form ``COMP-{timestamp}-{random}``.

    The timestamp is milliseconds since the epoch in base 36 and the random
    suffix is six base-36 characters, all upper-cased.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    random_part = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"COMP-{timestamp}-{random_part}".upper()


class ComponentService:
    """Service for managing architecture components.

    The decision ledger and risk engine use it for identity lookups only.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, canvas_id: UUID, request: CreateComponentRequest) -> Component:
        """Create a component with a fresh Component ID.

        Raises:
            NotFound: unknown canvas
        """
        if await self.db.get(Canvas, canvas_id) is None:
            raise NotFound("Canvas", canvas_id)

        component_id = generate_component_id()
        while await self.component_id_exists(component_id):
            component_id = generate_component_id()

        component = Component(
            component_id=component_id,
            canvas_id=canvas_id,
            name=request.name,
            type=request.type,
            description=request.description,
            position_x=request.position.x,
            position_y=request.position.y,
            metadata_json=request.metadata,
        )
        self.db.add(component)
        await self.db.flush()
        return component

    async def find_by_id(self, id: UUID) -> Component | None:
        return await self.db.get(Component, id)

    async def get_by_id(self, id: UUID) -> Component:
        """Get a component by storage id.

        Raises:
            NotFound: unknown component
        """
        component = await self.find_by_id(id)
        if component is None:
            raise NotFound("Component", id)
        return component

    async def get_by_component_id(self, component_id: str) -> Component | None:
        result = await self.db.execute(
            select(Component).where(Component.component_id == component_id)
        )
        return result.scalar_one_or_none()

    async def get_project_id(self, component: Component) -> UUID:
        """Resolve the project that owns a component through its canvas."""
        canvas = await self.db.get(Canvas, component.canvas_id)
        if canvas is None:
            raise NotFound("Canvas", component.canvas_id)
        return canvas.project_id

    async def exists_by_id(self, id: UUID) -> bool:
        result = await self.db.execute(select(Component.id).where(Component.id == id))
        return result.scalar_one_or_none() is not None

    async def component_id_exists(self, component_id: str) -> bool:
        count = await self.db.scalar(
            select(func.count()).select_from(Component).where(Component.component_id == component_id)
        )
        return bool(count)

    async def list_by_canvas(self, canvas_id: UUID) -> list[Component]:
        """List a canvas's components, oldest first."""
        result = await self.db.execute(
            select(Component)
            .where(Component.canvas_id == canvas_id)
            .order_by(Component.created_at.asc(), Component.component_id.asc())
        )
        return list(result.scalars().all())

    async def update(self, id: UUID, request: UpdateComponentRequest) -> Component:
        """Apply the fields present in the request.

        Raises:
            NotFound: unknown component
        """
        component = await self.get_by_id(id)
        changes = request.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            component.name = changes["name"]
        if changes.get("type") is not None:
            component.type = changes["type"]
        if "description" in changes:
            component.description = changes["description"]
        if request.position is not None:
            component.position_x = request.position.x
            component.position_y = request.position.y
        if changes.get("metadata") is not None:
            component.metadata_json = changes["metadata"]
        component.updated_at = utcnow()

        await self.db.flush()
        return component

    async def delete(self, id: UUID) -> Component:
        """Delete a component together with its decision links and commit tags.

        Raises:
            NotFound: unknown component
        """
        component = await self.get_by_id(id)
        await self.db.execute(delete(ComponentDecision).where(ComponentDecision.component_id == id))
        await self.db.execute(delete(ComponentCommit).where(ComponentCommit.component_id == id))
        await self.db.delete(component)
        await self.db.flush()
        return component
