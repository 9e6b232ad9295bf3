"""
Eligibility Rule Admin Endpoints
Create, list, update and delete a grant's eligibility rules.

Every mutation marks the grant's existing matches stale in the same
transaction, then queues a recomputation once the transaction commits.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agents.matching.matcher import EligibilityMatcher
from backend.api.deps import AsyncSessionDep, MatcherDep
from backend.api.utils.dispatch import queue_recompute
from backend.api.utils.lookups import get_grant_or_404, get_rule_or_404
from backend.models import GrantEligibilityRule
from backend.schemas.eligibility import (
    EligibilityRuleCreate,
    EligibilityRuleList,
    EligibilityRuleResponse,
    EligibilityRuleUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/grants/{grant_id}/eligibility", tags=["Eligibility"])

_REQUIRED_FIELDS = {"field", "operator", "value_type", "is_mandatory", "confidence_level"}


async def _commit_and_recompute(db: AsyncSession, matcher: EligibilityMatcher, grant_id: UUID) -> None:
    """Flag the grant's matches stale, commit the rule edit, then queue recomputation."""
    from backend.tasks.matching import recompute_grant_matches

    stale_marked = await matcher.mark_matches_stale(grant_id, session=db)
    await db.commit()

    task_id = queue_recompute(recompute_grant_matches, str(grant_id))
    logger.info(f"Rules changed for grant {grant_id}: {stale_marked} matches stale, queued task {task_id}")


@router.get(
    "",
    response_model=EligibilityRuleList,
    summary="List eligibility rules",
    description="List a grant's eligibility rules, mandatory rules first.",
)
async def list_rules(
    grant_id: UUID,
    db: AsyncSessionDep,
) -> EligibilityRuleList:
    await get_grant_or_404(db, grant_id)

    result = await db.execute(
        select(GrantEligibilityRule)
        .where(GrantEligibilityRule.public_grant_id == grant_id)
        .order_by(
            GrantEligibilityRule.is_mandatory.desc(),
            GrantEligibilityRule.created_at,
            GrantEligibilityRule.id,
        )
    )
    rules = result.scalars().all()

    return EligibilityRuleList(rules=[EligibilityRuleResponse.model_validate(rule) for rule in rules])


@router.post(
    "",
    response_model=EligibilityRuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create eligibility rule",
    description="Add a rule to a grant. Existing matches become stale and are recomputed.",
)
async def create_rule(
    grant_id: UUID,
    rule_data: EligibilityRuleCreate,
    db: AsyncSessionDep,
    matcher: MatcherDep,
) -> EligibilityRuleResponse:
    """
    Create an eligibility rule.

    Omitted fields take their defaults: operator ``eq``, value type
    ``string``, mandatory, confidence ``certain``.
    """
    await get_grant_or_404(db, grant_id)

    rule = GrantEligibilityRule(public_grant_id=grant_id, **rule_data.model_dump(mode="json"))
    db.add(rule)
    await db.flush()
    await db.refresh(rule)

    await _commit_and_recompute(db, matcher, grant_id)

    return EligibilityRuleResponse.model_validate(rule)


@router.patch(
    "/{rule_id}",
    response_model=EligibilityRuleResponse,
    summary="Update eligibility rule",
    description="Update fields of a rule. Existing matches become stale and are recomputed.",
)
async def update_rule(
    grant_id: UUID,
    rule_id: UUID,
    rule_data: EligibilityRuleUpdate,
    db: AsyncSessionDep,
    matcher: MatcherDep,
) -> EligibilityRuleResponse:
    rule = await get_rule_or_404(db, grant_id, rule_id)

    for field, value in rule_data.model_dump(mode="json", exclude_unset=True).items():
        # NOT NULL columns keep their value when sent as null
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(rule, field, value)

    await db.flush()
    await db.refresh(rule)

    await _commit_and_recompute(db, matcher, grant_id)

    return EligibilityRuleResponse.model_validate(rule)


@router.delete(
    "/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete eligibility rule",
    description="Remove a rule. Existing matches become stale and are recomputed.",
)
async def delete_rule(
    grant_id: UUID,
    rule_id: UUID,
    db: AsyncSessionDep,
    matcher: MatcherDep,
) -> Response:
    rule = await get_rule_or_404(db, grant_id, rule_id)

    await db.delete(rule)
    await db.flush()

    await _commit_and_recompute(db, matcher, grant_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
