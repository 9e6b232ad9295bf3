"""Initial schema for eligibility matching

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all tables for the GrantFit matching engine:
- companies: Organisations that apply for grants
- company_profiles: Structured facts compared against eligibility rules
- document_inventory: Supporting documents each company has on hand
- public_grants: Shared grant catalog
- grant_eligibility_rules: Admin-authored eligibility predicates
- grant_matches: Computed company-to-grant scores
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create initial database schema."""

    # ==========================================================================
    # Create companies table
    # ==========================================================================
    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # ==========================================================================
    # Create company_profiles table
    # ==========================================================================
    op.create_table(
        "company_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("legal_entity_type", sa.Text(), nullable=True),
        sa.Column("jurisdiction", sa.Text(), nullable=True),
        sa.Column("tax_status", sa.Text(), nullable=True),
        sa.Column("registration_status", sa.Text(), nullable=True),
        sa.Column("years_founded", sa.Integer(), nullable=True),
        sa.Column("employee_count", sa.Integer(), nullable=True),
        sa.Column("annual_revenue", sa.Float(), nullable=True),
        sa.Column("annual_budget", sa.Float(), nullable=True),
        sa.Column("prior_grant_wins", sa.Integer(), nullable=True),
        sa.Column("has_audited_accounts", sa.Boolean(), nullable=True),
        sa.Column("has_financial_statements", sa.Boolean(), nullable=True),
        sa.Column("has_insurance", sa.Boolean(), nullable=True),
        sa.Column("has_safeguarding_policy", sa.Boolean(), nullable=True),
        sa.Column("has_logic_model", sa.Boolean(), nullable=True),
        sa.Column("proposal_writer_available", sa.Boolean(), nullable=True),
        sa.Column("mission_statement", sa.Text(), nullable=True),
        sa.Column("mission_areas", postgresql.JSONB(), nullable=True),
        sa.Column("beneficiary_population", postgresql.JSONB(), nullable=True),
        sa.Column("geographies_served", postgresql.JSONB(), nullable=True),
        sa.Column("geographies_registered", postgresql.JSONB(), nullable=True),
        sa.Column("readiness_score", sa.Integer(), nullable=True),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # ==========================================================================
    # Create document_inventory table
    # ==========================================================================
    op.create_table(
        "document_inventory",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("doc_type", sa.String(100), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("company_id", "doc_type", name="uq_document_inventory_company_doc"),
    )

    # ==========================================================================
    # Create public_grants table
    # ==========================================================================
    op.create_table(
        "public_grants",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("funder", sa.Text(), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="open"),
        sa.Column("deadline", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_public_grants_status", "public_grants", ["status"])

    # ==========================================================================
    # Create grant_eligibility_rules table
    # ==========================================================================
    op.create_table(
        "grant_eligibility_rules",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "public_grant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("public_grants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("field", sa.String(100), nullable=False),
        sa.Column("operator", sa.String(20), nullable=False, server_default="eq"),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("value_type", sa.String(20), nullable=False, server_default="string"),
        sa.Column("is_mandatory", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("confidence_level", sa.String(20), nullable=False, server_default="certain"),
        sa.Column("evidence_text", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_grant_eligibility_rules_grant", "grant_eligibility_rules", ["public_grant_id"])

    # ==========================================================================
    # Create grant_matches table
    # ==========================================================================
    op.create_table(
        "grant_matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "public_grant_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("public_grants.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("overall_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("eligibility_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("readiness_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fit_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("matched_criteria", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("unmatched_criteria", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("unknown_criteria", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("risk_flags", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("document_gaps", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("explanation", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "computed_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("stale", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("company_id", "public_grant_id", name="uq_grant_matches_company_grant"),
    )

    # Grant fan-out and per-company score listing
    op.create_index("ix_grant_matches_grant", "grant_matches", ["public_grant_id"])
    op.create_index("ix_grant_matches_company_score", "grant_matches", ["company_id", "overall_score"])


def downgrade() -> None:
    """Drop all tables."""

    # Drop tables in reverse order of creation (due to foreign keys)
    op.drop_table("grant_matches")
    op.drop_table("grant_eligibility_rules")
    op.drop_table("public_grants")
    op.drop_table("document_inventory")
    op.drop_table("company_profiles")
    op.drop_table("companies")
