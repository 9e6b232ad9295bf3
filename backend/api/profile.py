"""
Company Profile API Endpoints
Read and save the structured company facts used for eligibility matching.
"""

import logging
from uuid import UUID

from fastapi import APIRouter
from sqlalchemy import select

from agents.matching.readiness import compute_profile_readiness
from backend.api.deps import AsyncSessionDep
from backend.api.utils.dispatch import queue_recompute
from backend.api.utils.lookups import get_company_or_404
from backend.core.exceptions import NotFoundError
from backend.models import CompanyProfile
from backend.schemas.profile import CompanyProfileResponse, CompanyProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/profile", tags=["Profile"])


@router.get(
    "",
    response_model=CompanyProfileResponse,
    summary="Get company profile",
    description="Get a company's eligibility profile.",
)
async def get_profile(
    company_id: UUID,
    db: AsyncSessionDep,
) -> CompanyProfileResponse:
    """
    Get the profile for a company.

    Returns 404 if the company has not filled in a profile yet.
    """
    result = await db.execute(select(CompanyProfile).where(CompanyProfile.company_id == company_id))
    profile = result.scalar_one_or_none()

    if not profile:
        raise NotFoundError("Profile", str(company_id))

    return CompanyProfileResponse.model_validate(profile)


@router.put(
    "",
    response_model=CompanyProfileResponse,
    summary="Save company profile",
    description="Create or update a company's profile. Triggers match recomputation.",
)
async def save_profile(
    company_id: UUID,
    profile_data: CompanyProfileUpdate,
    db: AsyncSessionDep,
) -> CompanyProfileResponse:
    """
    Create or update the profile for a company.

    The completeness readiness score is recomputed from the saved profile.
    Once the save commits, the company's matches are recomputed in the
    background; the response does not wait for them.
    """
    await get_company_or_404(db, company_id)

    result = await db.execute(select(CompanyProfile).where(CompanyProfile.company_id == company_id))
    profile = result.scalar_one_or_none()

    if not profile:
        profile = CompanyProfile(company_id=company_id)
        db.add(profile)

    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)

    profile.readiness_score = compute_profile_readiness(profile)

    await db.flush()
    await db.refresh(profile)
    await db.commit()

    from backend.tasks.matching import recompute_company_matches

    task_id = queue_recompute(recompute_company_matches, str(company_id))
    logger.info(f"Profile saved for company {company_id} (readiness {profile.readiness_score}), queued task {task_id}")

    return CompanyProfileResponse.model_validate(profile)
