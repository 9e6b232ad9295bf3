"""Eligibility rule schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from agents.matching.models import RuleOperator


class EligibilityRuleCreate(BaseModel):
    """Request to add an eligibility rule to a grant."""

    field: str = Field(..., min_length=1, description="Rule subject, e.g. 'annualRevenue'")
    operator: RuleOperator = RuleOperator.EQ
    value: Optional[str] = Field(None, description="Comparand; comma-separated for in/not_in")
    value_type: str = "string"
    is_mandatory: bool = True
    confidence_level: str = "certain"
    evidence_text: Optional[str] = None
    notes: Optional[str] = None


class EligibilityRuleUpdate(BaseModel):
    """Partial update of an eligibility rule."""

    field: Optional[str] = Field(None, min_length=1)
    operator: Optional[RuleOperator] = None
    value: Optional[str] = None
    value_type: Optional[str] = None
    is_mandatory: Optional[bool] = None
    confidence_level: Optional[str] = None
    evidence_text: Optional[str] = None
    notes: Optional[str] = None


class EligibilityRuleResponse(BaseModel):
    """Stored eligibility rule."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    public_grant_id: UUID
    field: str
    operator: str
    value: Optional[str] = None
    value_type: str
    is_mandatory: bool
    confidence_level: str
    evidence_text: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EligibilityRuleList(BaseModel):
    """Rules for a grant, mandatory first."""

    rules: list[EligibilityRuleResponse]
