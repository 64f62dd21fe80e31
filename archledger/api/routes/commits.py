"""API routes for tagging commits with components."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from archledger.core.database import get_db
from archledger.schemas.commit import ComponentCommitResponse, TagCommitRequest
from archledger.services.commit_service import CommitService

router = APIRouter()


@router.post(
    "/{sha}/tag",
    response_model=ComponentCommitResponse,
    summary="Tag commit with component",
)
async def tag_commit(
    sha: str,
    request: TagCommitRequest,
    db: AsyncSession = Depends(get_db),
) -> ComponentCommitResponse:
    """Record that a synced commit touched a component. Tagging twice is a no-op."""
    tag = await CommitService(db).tag_commit(sha, request.component_id)
    await db.commit()
    return ComponentCommitResponse(
        component_id=tag.component_id,
        commit_id=tag.commit_id,
        sha=sha,
        tagged_at=tag.tagged_at,
    )


@router.delete(
    "/{sha}/tag",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove commit tag",
)
async def untag_commit(
    sha: str,
    request: TagCommitRequest,
    db: AsyncSession = Depends(get_db),
) -> Response:
    await CommitService(db).untag_commit(sha, request.component_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
