"""
Match API Endpoints
Read a company's computed grant matches and trigger recomputation.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from sqlalchemy import select

from backend.api.deps import AsyncSessionDep, MatcherDep
from backend.api.utils.dispatch import queue_recompute
from backend.api.utils.lookups import get_company_or_404, get_grant_or_404
from backend.core.exceptions import NotFoundError, ValidationError
from backend.models import GrantMatch
from backend.schemas.matches import (
    GrantMatchList,
    GrantMatchResponse,
    RecomputeRequest,
    RecomputeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/matches", tags=["Matches"])
admin_router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "",
    response_model=GrantMatchList,
    summary="List matches",
    description="Get a company's grant matches, best overall score first.",
)
async def list_matches(
    company_id: UUID,
    db: AsyncSessionDep,
    matcher: MatcherDep,
    min_score: Optional[int] = Query(default=None, ge=0, le=100, description="Minimum overall score"),
    include_stale: bool = Query(default=True, description="Include matches awaiting recomputation"),
) -> GrantMatchList:
    """
    List every computed match for a company.

    Stale matches keep their previous scores until recomputed; they are
    included by default so the list never shrinks during a recomputation.
    """
    await get_company_or_404(db, company_id)

    matches = await matcher.get_matches_for_company(
        db,
        company_id,
        min_score=min_score,
        include_stale=include_stale,
    )

    return GrantMatchList(
        matches=[GrantMatchResponse.model_validate(match) for match in matches],
        total=len(matches),
        stale_count=sum(1 for match in matches if match.stale),
    )


@router.get(
    "/{grant_id}",
    response_model=GrantMatchResponse,
    summary="Get match",
    description="Get the match between a company and one grant.",
)
async def get_match(
    company_id: UUID,
    grant_id: UUID,
    db: AsyncSessionDep,
) -> GrantMatchResponse:
    """Get a single match, or 404 if it has never been computed."""
    result = await db.execute(
        select(GrantMatch).where(
            GrantMatch.company_id == company_id,
            GrantMatch.public_grant_id == grant_id,
        )
    )
    match = result.scalar_one_or_none()

    if match is None:
        raise NotFoundError("Match", f"{company_id}/{grant_id}")

    return GrantMatchResponse.model_validate(match)


@admin_router.post(
    "/match",
    response_model=RecomputeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Recompute matches",
    description="Queue recomputation for one grant across all companies, or one company across active grants.",
)
async def trigger_recompute(
    request: RecomputeRequest,
    db: AsyncSessionDep,
    matcher: MatcherDep,
) -> RecomputeResponse:
    """
    Queue a match recomputation.

    A grant recomputation first marks the grant's existing matches stale.
    When both ids are given, the grant takes precedence.
    """
    from backend.tasks.matching import recompute_company_matches, recompute_grant_matches

    if request.grant_id is not None:
        await get_grant_or_404(db, request.grant_id)
        stale_marked = await matcher.mark_matches_stale(request.grant_id, session=db)
        await db.commit()

        task_id = queue_recompute(recompute_grant_matches, str(request.grant_id))
        logger.info(f"Queued grant recompute {task_id} for grant {request.grant_id} ({stale_marked} marked stale)")
        return RecomputeResponse(
            status="queued" if task_id else "not_queued",
            task_id=task_id,
            stale_marked=stale_marked,
            message=f"Recomputing matches for grant {request.grant_id}",
        )

    if request.company_id is not None:
        await get_company_or_404(db, request.company_id)

        task_id = queue_recompute(recompute_company_matches, str(request.company_id))
        logger.info(f"Queued company recompute {task_id} for company {request.company_id}")
        return RecomputeResponse(
            status="queued" if task_id else "not_queued",
            task_id=task_id,
            message=f"Recomputing matches for company {request.company_id}",
        )

    raise ValidationError("Provide grant_id or company_id")
