"""
Company profile and document inventory schemas.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CompanyProfileUpdate(BaseModel):
    """Fields a company may set on its profile. Unset fields are left alone."""

    legal_entity_type: Optional[str] = None
    jurisdiction: Optional[str] = None
    tax_status: Optional[str] = None
    registration_status: Optional[str] = None
    years_founded: Optional[int] = Field(None, ge=1800, le=2100, description="Founding year")
    employee_count: Optional[int] = Field(None, ge=0)
    annual_revenue: Optional[float] = Field(None, ge=0)
    annual_budget: Optional[float] = Field(None, ge=0)
    prior_grant_wins: Optional[int] = Field(None, ge=0)
    has_audited_accounts: Optional[bool] = None
    has_financial_statements: Optional[bool] = None
    has_insurance: Optional[bool] = None
    has_safeguarding_policy: Optional[bool] = None
    has_logic_model: Optional[bool] = None
    proposal_writer_available: Optional[bool] = None
    mission_statement: Optional[str] = None
    mission_areas: Optional[list[str]] = None
    beneficiary_population: Optional[list[str]] = None
    geographies_served: Optional[list[str]] = None
    geographies_registered: Optional[list[str]] = None


class CompanyProfileResponse(CompanyProfileUpdate):
    """Stored company profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    readiness_score: Optional[int] = Field(None, ge=0, le=100, description="Profile completeness (0-100)")
    updated_at: datetime


class DocumentUpdate(BaseModel):
    """Upsert one document inventory entry."""

    doc_type: str = Field(..., min_length=1, description="Document type, e.g. 'audit'")
    available: bool = False
    notes: Optional[str] = None
    expires_at: Optional[datetime] = None


class DocumentResponse(BaseModel):
    """Stored document inventory entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    company_id: UUID
    doc_type: str
    available: bool
    notes: Optional[str] = None
    expires_at: Optional[datetime] = None
    updated_at: datetime


class DocumentList(BaseModel):
    """A company's document inventory, ordered by type."""

    documents: list[DocumentResponse]
