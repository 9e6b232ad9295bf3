"""
Matching Agent Pydantic Models
Data models for the eligibility matching and readiness scoring engine.
"""
import enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .vocabulary import RuleField


class RuleOutcome(str, enum.Enum):
    """Tri-state result of evaluating one rule against one profile."""

    MATCHED = "matched"
    UNMATCHED = "unmatched"
    UNKNOWN = "unknown"


class RuleOperator(str, enum.Enum):
    """Comparison operators an eligibility rule may use."""

    EQ = "eq"
    IN = "in"
    NOT_IN = "not_in"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "contains"
    EXISTS = "exists"


class RuleSummary(BaseModel):
    """Compact rule record stored in a match's criterion lists."""

    id: UUID
    field: str
    operator: str
    value: Optional[str] = None
    is_mandatory: bool
    confidence: Optional[str] = None
    evidence: Optional[str] = None


class EligibilityRuleData(BaseModel):
    """
    Eligibility rule as read by the engine.

    ``field`` and ``operator`` are kept as the raw stored strings; the engine
    resolves them against the vocabulary and the operator table.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    field: str
    operator: str = RuleOperator.EQ.value
    value: Optional[str] = None
    value_type: str = "string"
    is_mandatory: bool = True
    confidence_level: str = "certain"
    evidence_text: Optional[str] = None
    notes: Optional[str] = None

    @property
    def rule_field(self) -> RuleField:
        return RuleField.parse(self.field)

    def to_summary(self) -> RuleSummary:
        return RuleSummary(
            id=self.id,
            field=self.field,
            operator=self.operator,
            value=self.value,
            is_mandatory=self.is_mandatory,
            confidence=self.confidence_level,
            evidence=self.evidence_text,
        )


class CompanyProfileData(BaseModel):
    """
    Structured company facts compared against eligibility rules.

    Every attribute is optional; ``None`` means the company has not
    answered and any rule reading it evaluates as unknown.
    """

    model_config = ConfigDict(from_attributes=True)

    # Legal and registration
    legal_entity_type: Optional[str] = None
    jurisdiction: Optional[str] = None
    tax_status: Optional[str] = None
    registration_status: Optional[str] = None

    # Scale
    years_founded: Optional[int] = None
    employee_count: Optional[int] = None
    annual_revenue: Optional[float] = None
    annual_budget: Optional[float] = None
    prior_grant_wins: Optional[int] = None

    # Capabilities
    has_audited_accounts: Optional[bool] = None
    has_financial_statements: Optional[bool] = None
    has_insurance: Optional[bool] = None
    has_safeguarding_policy: Optional[bool] = None
    has_logic_model: Optional[bool] = None
    proposal_writer_available: Optional[bool] = None

    # Mission and geography
    mission_statement: Optional[str] = None
    mission_areas: Optional[list[str]] = None
    beneficiary_population: Optional[list[str]] = None
    geographies_served: Optional[list[str]] = None
    geographies_registered: Optional[list[str]] = None

    readiness_score: Optional[int] = Field(
        default=None,
        ge=0,
        le=100,
        description="Profile completeness score, used as a readiness fallback",
    )


class MatchScores(BaseModel):
    """The four 0-100 scores of a company/grant match."""

    overall: int = Field(..., ge=0, le=100)
    eligibility: int = Field(..., ge=0, le=100)
    readiness: int = Field(..., ge=0, le=100)
    fit: int = Field(..., ge=0, le=100)


class MatchComputation(BaseModel):
    """
    Full engine output for one (company, grant) pair.

    Independent of persistence; ``EligibilityMatcher`` turns it into the
    ``GrantMatch`` row via ``to_row``.
    """

    company_id: UUID
    grant_id: UUID
    scores: MatchScores
    matched_criteria: list[RuleSummary] = Field(default_factory=list)
    unmatched_criteria: list[RuleSummary] = Field(default_factory=list)
    unknown_criteria: list[RuleSummary] = Field(default_factory=list)
    risk_flags: list[str] = Field(default_factory=list)
    document_gaps: list[str] = Field(default_factory=list)
    explanation: str = ""

    def to_row(self) -> dict[str, Any]:
        """Column values for the GrantMatch upsert (timestamps excluded)."""
        return {
            "company_id": self.company_id,
            "public_grant_id": self.grant_id,
            "overall_score": self.scores.overall,
            "eligibility_score": self.scores.eligibility,
            "readiness_score": self.scores.readiness,
            "fit_score": self.scores.fit,
            "matched_criteria": [c.model_dump(mode="json") for c in self.matched_criteria],
            "unmatched_criteria": [c.model_dump(mode="json") for c in self.unmatched_criteria],
            "unknown_criteria": [c.model_dump(mode="json") for c in self.unknown_criteria],
            "risk_flags": list(self.risk_flags),
            "document_gaps": list(self.document_gaps),
            "explanation": self.explanation,
        }
