"""
GrantFit Pydantic Schemas
Request/Response models for API endpoints.
"""
from backend.schemas.eligibility import (
    EligibilityRuleCreate,
    EligibilityRuleList,
    EligibilityRuleResponse,
    EligibilityRuleUpdate,
)
from backend.schemas.matches import (
    GrantMatchList,
    GrantMatchResponse,
    RecomputeRequest,
    RecomputeResponse,
)
from backend.schemas.profile import (
    CompanyProfileResponse,
    CompanyProfileUpdate,
    DocumentList,
    DocumentResponse,
    DocumentUpdate,
)

__all__ = [
    # Eligibility
    "EligibilityRuleCreate",
    "EligibilityRuleList",
    "EligibilityRuleResponse",
    "EligibilityRuleUpdate",
    # Matches
    "GrantMatchList",
    "GrantMatchResponse",
    "RecomputeRequest",
    "RecomputeResponse",
    # Profile
    "CompanyProfileResponse",
    "CompanyProfileUpdate",
    "DocumentList",
    "DocumentResponse",
    "DocumentUpdate",
]
