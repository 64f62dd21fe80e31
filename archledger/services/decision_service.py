"""Decision ledger: decision records, supersession chains and component links."""
import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.database import insert_ignore_duplicates
from archledger.core.decision_workflow import (
    REQUIRED_FIELDS,
    ensure_updatable,
    missing_fields,
    parse_status,
    validate_status_transition,
)
from archledger.core.exceptions import (
    AlreadySuperseded,
    IllegalTransition,
    NotFound,
    ReferencedBySupersession,
    SelfSupersession,
    SupersessionConflict,
    ValidationError,
)
from archledger.core.metrics import DECISIONS_SUPERSEDED_TOTAL
from archledger.core.structured_logging import log_json
from archledger.core.supersession_graph import SupersessionEdge, SupersessionGraph
from archledger.models.base import utcnow
from archledger.models.component_decision import ComponentDecision
from archledger.models.decision_record import DecisionRecord
from archledger.models.enums import DecisionStatus
from archledger.models.project import Project
from archledger.schemas.decision import (
    CreateDecisionRequest,
    DecisionResponse,
    SupersessionResponse,
    UpdateDecisionRequest,
)
from archledger.services.component_service import ComponentService

logger = logging.getLogger(__name__)


class DecisionService:
    """Service for managing architecture decision records."""

    def __init__(self, db: AsyncSession):
        """Initialize decision service.

        Args:
            db: Database session
        """
        self.db = db
        self.components = ComponentService(db)

    async def _get_record(self, decision_id: UUID) -> DecisionRecord:
        result = await self.db.execute(select(DecisionRecord).where(DecisionRecord.id == decision_id))
        record = result.scalar_one_or_none()
        if record is None:
            raise NotFound("Decision", decision_id)
        return record

    async def _lock_records(self, decision_ids: list[UUID]) -> dict[UUID, DecisionRecord]:
        # Both rows lock in one statement, in id order
        result = await self.db.execute(
            select(DecisionRecord)
            .where(DecisionRecord.id.in_(decision_ids))
            .order_by(DecisionRecord.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {record.id: record for record in result.scalars().all()}

    async def _load_graph(self, project_id: UUID) -> SupersessionGraph:
        """Load the supersession pointers of every decision in a project."""
        result = await self.db.execute(
            select(
                DecisionRecord.id,
                DecisionRecord.supersedes_id,
                DecisionRecord.superseded_by_id,
            ).where(DecisionRecord.project_id == project_id)
        )
        return SupersessionGraph(
            SupersessionEdge(row.id, row.supersedes_id, row.superseded_by_id) for row in result
        )

    async def _linked_component_ids(self, decision_ids: list[UUID]) -> dict[UUID, list[UUID]]:
        links: dict[UUID, list[UUID]] = {decision_id: [] for decision_id in decision_ids}
        if not decision_ids:
            return links
        result = await self.db.execute(
            select(ComponentDecision.decision_id, ComponentDecision.component_id)
            .where(ComponentDecision.decision_id.in_(decision_ids))
            .order_by(ComponentDecision.linked_at.asc())
        )
        for decision_id, component_id in result:
            links[decision_id].append(component_id)
        return links

    async def _hydrate_many(self, records: Iterable[DecisionRecord]) -> list[DecisionResponse]:
        records = list(records)
        links = await self._linked_component_ids([record.id for record in records])
        return [
            DecisionResponse.model_validate(record).model_copy(
                update={"linked_component_ids": links[record.id]}
            )
            for record in records
        ]

    async def _hydrate(self, record: DecisionRecord) -> DecisionResponse:
        return (await self._hydrate_many([record]))[0]

    async def create(
        self,
        project_id: UUID,
        request: CreateDecisionRequest,
        created_by: str,
    ) -> DecisionResponse:
        """Record a new decision.

        Args:
            project_id: Owning project
            request: Decision fields, optional status and components to link
            created_by: Acting user

        Returns:
            The stored record with its links

        Raises:
            ValidationError: one or more required fields missing or blank
            InvalidStatus: status is not a known status
            IllegalTransition: status is SUPERSEDED
            NotFound: unknown project or linked component
        """
        missing = missing_fields(request.model_dump())
        if missing:
            raise ValidationError(missing)

        status = DecisionStatus.PROPOSED
        if request.status is not None:
            status = parse_status(request.status)
            if status == DecisionStatus.SUPERSEDED:
                raise IllegalTransition(
                    "Cannot create a decision as SUPERSEDED. Use supersede operation instead."
                )

        if await self.db.get(Project, project_id) is None:
            raise NotFound("Project", project_id)

        record = DecisionRecord(
            project_id=project_id,
            title=request.title,
            context=request.context,
            decision=request.decision,
            rationale=request.rationale,
            consequences=request.consequences,
            status=status,
            tags=list(request.tags),
            created_by=created_by,
        )
        self.db.add(record)
        await self.db.flush()

        for component_id in request.linked_component_ids:
            await self.link_to_component(record.id, component_id)

        return await self._hydrate(record)

    async def get_by_id(self, decision_id: UUID) -> DecisionResponse:
        """Get a decision with its linked components.

        Raises:
            NotFound: unknown decision
        """
        return await self._hydrate(await self._get_record(decision_id))

    async def list_by_project(
        self,
        project_id: UUID,
        status: DecisionStatus | str | None = None,
    ) -> list[DecisionResponse]:
        """List a project's decisions, newest first.

        Raises:
            InvalidStatus: status filter is not a known status
        """
        query = select(DecisionRecord).where(DecisionRecord.project_id == project_id)
        if status is not None:
            query = query.where(DecisionRecord.status == parse_status(status))
        query = query.order_by(DecisionRecord.created_at.desc(), DecisionRecord.id.desc())

        result = await self.db.execute(query)
        return await self._hydrate_many(result.scalars().all())

    async def list_by_component(self, component_id: UUID) -> list[DecisionResponse]:
        """List the decisions linked to a component, most recently linked first.

        Raises:
            NotFound: unknown component
        """
        await self.components.get_by_id(component_id)

        result = await self.db.execute(
            select(DecisionRecord)
            .join(ComponentDecision, ComponentDecision.decision_id == DecisionRecord.id)
            .where(ComponentDecision.component_id == component_id)
            .order_by(ComponentDecision.linked_at.desc())
        )
        return await self._hydrate_many(result.scalars().all())

    async def update(self, decision_id: UUID, request: UpdateDecisionRequest) -> DecisionResponse:
        """Apply a partial update.

        Superseded records reject every update, including an empty one.

        Raises:
            NotFound: unknown decision
            InvalidStatus: status is not a known status
            IllegalTransition: record is SUPERSEDED, or the patch sets SUPERSEDED
            ValidationError: a text field in the patch is blank
        """
        record = await self._get_record(decision_id)
        changes = request.model_dump(exclude_unset=True)

        new_status = changes.pop("status", None)
        if new_status is not None:
            new_status = parse_status(new_status)
            validate_status_transition(record.status, new_status)
        ensure_updatable(record.status)

        blank = [
            field
            for field in REQUIRED_FIELDS
            if field in changes and (changes[field] is None or not changes[field].strip())
        ]
        if blank:
            raise ValidationError(blank)

        for field in REQUIRED_FIELDS:
            if field in changes:
                setattr(record, field, changes[field])
        if changes.get("tags") is not None:
            record.tags = changes["tags"]
        if new_status is not None:
            record.status = new_status
        record.updated_at = utcnow()

        await self.db.flush()
        return await self._hydrate(record)

    async def supersede(self, old_decision_id: UUID, new_decision_id: UUID) -> SupersessionResponse:
        """Mark ``old_decision_id`` as superseded by ``new_decision_id``.

        Both rows are locked and both pointer writes land in one flush, so the
        pair is either fully linked or untouched.

        Raises:
            NotFound: either decision is unknown (old checked first)
            SelfSupersession: the ids are equal
            SupersessionConflict: decisions belong to different projects, the old
                one is already superseded, or the new one already supersedes
                another record
            CycleDetected: the old decision is already newer than the new one
            AlreadySuperseded: the new decision is SUPERSEDED
        """
        locked = await self._lock_records([old_decision_id, new_decision_id])
        for decision_id in (old_decision_id, new_decision_id):
            if decision_id not in locked:
                raise NotFound("Decision", decision_id)
        old = locked[old_decision_id]
        new = locked[new_decision_id]

        if old.id == new.id:
            raise SelfSupersession(old.id)
        if old.project_id != new.project_id:
            raise SupersessionConflict(
                "Decisions belong to different projects",
                details={"old_project_id": str(old.project_id), "new_project_id": str(new.project_id)},
            )

        graph = await self._load_graph(old.project_id)
        graph.ensure_no_cycle(old.id, new.id)

        if new.status == DecisionStatus.SUPERSEDED:
            raise AlreadySuperseded(new.id)
        if old.status == DecisionStatus.SUPERSEDED or old.superseded_by_id is not None:
            raise SupersessionConflict(
                f"Decision {old.id} is already superseded",
                details={"superseded_by_id": str(old.superseded_by_id) if old.superseded_by_id else None},
            )
        if new.supersedes_id is not None and new.supersedes_id != old.id:
            raise SupersessionConflict(
                f"Decision {new.id} already supersedes another decision",
                details={"supersedes_id": str(new.supersedes_id)},
            )

        now = utcnow()
        old.status = DecisionStatus.SUPERSEDED
        old.superseded_by_id = new.id
        old.updated_at = now
        new.supersedes_id = old.id
        new.updated_at = now
        await self.db.flush()

        DECISIONS_SUPERSEDED_TOTAL.inc()
        log_json(
            logger,
            logging.INFO,
            "decision_superseded",
            project_id=str(old.project_id),
            old_decision_id=str(old.id),
            new_decision_id=str(new.id),
        )

        old_response, new_response = await self._hydrate_many([old, new])
        return SupersessionResponse(old_decision=old_response, new_decision=new_response)

    async def get_supersession_chain(self, decision_id: UUID) -> list[DecisionResponse]:
        """Return the chain ending at a decision, oldest first.

        Raises:
            NotFound: unknown decision
            IntegrityError: the stored chain revisits a record
        """
        record = await self._get_record(decision_id)
        graph = await self._load_graph(record.project_id)
        chain_ids = graph.chain(record.id)

        result = await self.db.execute(select(DecisionRecord).where(DecisionRecord.id.in_(chain_ids)))
        by_id = {row.id: row for row in result.scalars().all()}
        return await self._hydrate_many(by_id[chain_id] for chain_id in chain_ids if chain_id in by_id)

    async def link_to_component(self, decision_id: UUID, component_id: UUID) -> bool:
        """Link a decision to a component. Linking twice is a no-op.

        Returns:
            True if a new link was stored

        Raises:
            NotFound: unknown decision or component
        """
        await self._get_record(decision_id)
        if not await self.components.exists_by_id(component_id):
            raise NotFound("Component", component_id)

        existing = await self.db.scalar(
            select(ComponentDecision.id).where(
                ComponentDecision.component_id == component_id,
                ComponentDecision.decision_id == decision_id,
            )
        )
        if existing is not None:
            return False

        return await insert_ignore_duplicates(
            self.db,
            ComponentDecision,
            {"component_id": component_id, "decision_id": decision_id},
            ["component_id", "decision_id"],
        )

    async def unlink_from_component(self, decision_id: UUID, component_id: UUID) -> bool:
        """Remove a link. Removing a link that does not exist is a no-op.

        Returns:
            True if a link was removed
        """
        result = await self.db.execute(
            delete(ComponentDecision).where(
                ComponentDecision.component_id == component_id,
                ComponentDecision.decision_id == decision_id,
            )
        )
        return bool(result.rowcount)

    async def count_links_by_component(self, component_ids: list[UUID]) -> dict[UUID, int]:
        """Count linked decisions per component; components without links map to 0."""
        counts = {component_id: 0 for component_id in component_ids}
        if not component_ids:
            return counts
        result = await self.db.execute(
            select(ComponentDecision.component_id, func.count())
            .where(ComponentDecision.component_id.in_(component_ids))
            .group_by(ComponentDecision.component_id)
        )
        for component_id, count in result:
            counts[component_id] = count
        return counts

    async def delete(self, decision_id: UUID) -> DecisionRecord:
        """Delete a decision and its component links.

        A record that a newer record supersedes cannot be deleted, so chains
        are removed newest first. Deleting the newest member clears the
        predecessor's ``superseded_by`` pointer; the predecessor stays SUPERSEDED.

        Raises:
            NotFound: unknown decision
            ReferencedBySupersession: another record supersedes this one
        """
        record = await self._get_record(decision_id)

        result = await self.db.execute(
            select(DecisionRecord.id).where(
                DecisionRecord.supersedes_id == record.id,
                DecisionRecord.id != record.id,
            )
        )
        referenced_by = list(result.scalars().all())
        if referenced_by:
            raise ReferencedBySupersession(record.id, referenced_by)

        await self.db.execute(
            update(DecisionRecord)
            .where(DecisionRecord.superseded_by_id == record.id)
            .values(superseded_by_id=None, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await self.db.execute(delete(ComponentDecision).where(ComponentDecision.decision_id == record.id))
        await self.db.delete(record)
        await self.db.flush()

        log_json(
            logger,
            logging.INFO,
            "decision_deleted",
            project_id=str(record.project_id),
            decision_id=str(record.id),
        )
        return record
