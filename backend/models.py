"""
GrantFit Database Models
SQLAlchemy ORM models for companies, the public grant catalog, eligibility
rules and computed grant matches.
"""
import enum
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    Boolean,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GrantStatus(str, enum.Enum):
    """Lifecycle status of a public grant."""

    DRAFT = "draft"
    OPEN = "open"
    ENRICHED = "enriched"
    CLOSING_SOON = "closing_soon"
    RECURRING = "recurring"
    CLOSED = "closed"
    ARCHIVED = "archived"


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Company(Base):
    """An organisation that tracks and applies for grants."""

    __tablename__ = "companies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        doc="Unique identifier for the company",
    )
    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="Organisation name",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Relationships
    profile: Mapped[Optional["CompanyProfile"]] = relationship(
        "CompanyProfile",
        back_populates="company",
        uselist=False,
        cascade="all, delete-orphan",
    )
    documents: Mapped[list["DocumentInventory"]] = relationship(
        "DocumentInventory",
        back_populates="company",
        cascade="all, delete-orphan",
    )
    matches: Mapped[list["GrantMatch"]] = relationship(
        "GrantMatch",
        back_populates="company",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}')>"


class CompanyProfile(Base):
    """
    Structured company facts used for eligibility matching.

    One-to-one with Company. Every fact is nullable; a missing value makes
    rules that read it evaluate as unknown.
    """

    __tablename__ = "company_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Legal and registration
    legal_entity_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    jurisdiction: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tax_status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    registration_status: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Scale
    years_founded: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Calendar year the organisation was founded",
    )
    employee_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    annual_budget: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    prior_grant_wins: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Capabilities
    has_audited_accounts: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    has_financial_statements: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    has_insurance: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    has_safeguarding_policy: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    has_logic_model: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    proposal_writer_available: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Mission and geography
    mission_statement: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mission_areas: Mapped[Optional[list[str]]] = mapped_column(JSONType, nullable=True)
    beneficiary_population: Mapped[Optional[list[str]]] = mapped_column(JSONType, nullable=True)
    geographies_served: Mapped[Optional[list[str]]] = mapped_column(JSONType, nullable=True)
    geographies_registered: Mapped[Optional[list[str]]] = mapped_column(JSONType, nullable=True)

    readiness_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Profile completeness score (0-100), recomputed on every save",
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    company: Mapped["Company"] = relationship("Company", back_populates="profile")

    def __repr__(self) -> str:
        return f"<CompanyProfile(company_id={self.company_id})>"


class DocumentInventory(Base):
    """Whether a company has a given supporting document on hand."""

    __tablename__ = "document_inventory"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    doc_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Document type key, e.g. 'audit', 'insurance'",
    )
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    expires_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    company: Mapped["Company"] = relationship("Company", back_populates="documents")

    __table_args__ = (UniqueConstraint("company_id", "doc_type", name="uq_document_inventory_company_doc"),)


class PublicGrant(Base):
    """A funding opportunity in the shared public catalog."""

    __tablename__ = "public_grants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    funder: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=GrantStatus.OPEN.value,
        doc="Catalog status; only active statuses are matched per company",
    )
    deadline: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    eligibility_rules: Mapped[list["GrantEligibilityRule"]] = relationship(
        "GrantEligibilityRule",
        back_populates="grant",
        cascade="all, delete-orphan",
    )
    matches: Mapped[list["GrantMatch"]] = relationship(
        "GrantMatch",
        back_populates="grant",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_public_grants_status", "status"),)

    def __repr__(self) -> str:
        return f"<PublicGrant(id={self.id}, title='{self.title[:30]}...')>"


class GrantEligibilityRule(Base):
    """
    Admin-authored eligibility predicate over a company attribute.

    Mandatory rules gate eligibility; the rest only feed the fit score.
    """

    __tablename__ = "grant_eligibility_rules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    public_grant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("public_grants.id", ondelete="CASCADE"),
        nullable=False,
    )
    field: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Rule subject from the controlled vocabulary, e.g. 'annualRevenue'",
    )
    operator: Mapped[str] = mapped_column(String(20), nullable=False, default="eq")
    value: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="String-encoded comparand; comma-separated for in/not_in",
    )
    value_type: Mapped[str] = mapped_column(String(20), nullable=False, default="string")
    is_mandatory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    confidence_level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="certain",
        doc="Author's confidence in the rule; display only",
    )
    evidence_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    grant: Mapped["PublicGrant"] = relationship("PublicGrant", back_populates="eligibility_rules")

    __table_args__ = (Index("ix_grant_eligibility_rules_grant", "public_grant_id"),)


class GrantMatch(Base):
    """
    Computed company-to-grant match.

    At most one row per (company, grant); recomputation upserts in place.
    ``stale`` is set before a grant's rules change and cleared only by a
    successful recomputation.
    """

    __tablename__ = "grant_matches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    public_grant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("public_grants.id", ondelete="CASCADE"),
        nullable=False,
    )
    overall_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    eligibility_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    readiness_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    fit_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    matched_criteria: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    unmatched_criteria: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    unknown_criteria: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    risk_flags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    document_gaps: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    computed_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    stale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    company: Mapped["Company"] = relationship("Company", back_populates="matches")
    grant: Mapped["PublicGrant"] = relationship("PublicGrant", back_populates="matches")

    __table_args__ = (
        UniqueConstraint("company_id", "public_grant_id", name="uq_grant_matches_company_grant"),
        Index("ix_grant_matches_grant", "public_grant_id"),
        Index("ix_grant_matches_company_score", "company_id", "overall_score"),
    )

    def __repr__(self) -> str:
        return (
            f"<GrantMatch(company_id={self.company_id}, grant_id={self.public_grant_id}, "
            f"overall={self.overall_score}, stale={self.stale})>"
        )
