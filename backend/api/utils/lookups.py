"""Resource lookup helpers for API endpoints."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.core.exceptions import NotFoundError
from backend.models import Company, GrantEligibilityRule, PublicGrant


async def get_company_or_404(db: AsyncSession, company_id: UUID) -> Company:
    """
    Load a company by id.

    Raises:
        NotFoundError: If the company does not exist.
    """
    company = await db.get(Company, company_id)
    if company is None:
        raise NotFoundError("Company", str(company_id))
    return company


async def get_grant_or_404(db: AsyncSession, grant_id: UUID) -> PublicGrant:
    """
    Load a public grant by id.

    Raises:
        NotFoundError: If the grant does not exist.
    """
    grant = await db.get(PublicGrant, grant_id)
    if grant is None:
        raise NotFoundError("Grant", str(grant_id))
    return grant


async def get_rule_or_404(db: AsyncSession, grant_id: UUID, rule_id: UUID) -> GrantEligibilityRule:
    """
    Load an eligibility rule that belongs to the given grant.

    Raises:
        NotFoundError: If the rule does not exist or belongs to another grant.
    """
    result = await db.execute(
        select(GrantEligibilityRule).where(
            GrantEligibilityRule.id == rule_id,
            GrantEligibilityRule.public_grant_id == grant_id,
        )
    )
    rule = result.scalar_one_or_none()
    if rule is None:
        raise NotFoundError("Eligibility rule", str(rule_id))
    return rule
