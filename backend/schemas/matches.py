"""
Match schemas for company-to-grant match results.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agents.matching.models import RuleSummary


class GrantMatchResponse(BaseModel):
    """Schema for a computed company-to-grant match."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Match ID")
    company_id: UUID = Field(..., description="Company ID")
    public_grant_id: UUID = Field(..., description="Public grant ID")
    overall_score: int = Field(..., ge=0, le=100, description="Overall score (0 when a mandatory rule fails)")
    eligibility_score: int = Field(..., ge=0, le=100, description="Share of mandatory rules met")
    readiness_score: int = Field(..., ge=0, le=100, description="Share of supporting documents on hand")
    fit_score: int = Field(..., ge=0, le=100, description="Share of scoring rules met")
    matched_criteria: list[RuleSummary] = Field(default_factory=list)
    unmatched_criteria: list[RuleSummary] = Field(default_factory=list)
    unknown_criteria: list[RuleSummary] = Field(default_factory=list)
    risk_flags: list[str] = Field(default_factory=list, description="One entry per unmet mandatory rule")
    document_gaps: list[str] = Field(default_factory=list, description="Missing document types")
    explanation: str = Field(..., description="Narrative summary of the match")
    computed_at: datetime = Field(..., description="When the scores were computed")
    stale: bool = Field(..., description="Scores reflect out-of-date inputs; recomputation pending")


class GrantMatchList(BaseModel):
    """Schema for a company's matches, best first."""

    matches: list[GrantMatchResponse] = Field(..., description="Matches sorted by overall score")
    total: int = Field(..., description="Number of matches returned")
    stale_count: int = Field(..., description="How many of them are stale")


class RecomputeRequest(BaseModel):
    """Admin request to recompute matches for a grant or a company."""

    grant_id: Optional[UUID] = Field(None, description="Recompute this grant across all companies")
    company_id: Optional[UUID] = Field(None, description="Recompute this company across all active grants")


class RecomputeResponse(BaseModel):
    """Acknowledgement that a recomputation job was enqueued."""

    status: str = Field(default="queued", description="queued, or not_queued if the broker refused the task")
    task_id: Optional[str] = Field(None, description="Celery task ID")
    stale_marked: int = Field(default=0, description="Existing matches flagged stale")
    message: str
