"""
Matching engine test fixtures.
Provides rule builders and a calendar-pinned evaluator.
"""

from datetime import date
from typing import Optional
from uuid import uuid4

import pytest

from agents.matching.evaluator import RuleEvaluator
from agents.matching.models import CompanyProfileData, EligibilityRuleData
from agents.matching.scoring import ScoreAggregator


def make_rule(
    field: str,
    operator: str = "eq",
    value: Optional[str] = None,
    is_mandatory: bool = True,
    **kwargs,
) -> EligibilityRuleData:
    """Build an engine rule without touching the database."""
    return EligibilityRuleData(
        id=uuid4(),
        field=field,
        operator=operator,
        value=value,
        is_mandatory=is_mandatory,
        **kwargs,
    )


@pytest.fixture
def rule_factory():
    return make_rule


@pytest.fixture
def evaluator() -> RuleEvaluator:
    """Evaluator whose 'today' is fixed in 2024."""
    return RuleEvaluator(today=lambda: date(2024, 6, 1))


@pytest.fixture
def aggregator() -> ScoreAggregator:
    return ScoreAggregator()


@pytest.fixture
def profile() -> CompanyProfileData:
    """A profile with every commonly-matched fact filled in."""
    return CompanyProfileData(
        legal_entity_type="Charity",
        jurisdiction="England",
        tax_status="charitable",
        registration_status="registered",
        years_founded=2015,
        employee_count=12,
        annual_revenue=600000,
        annual_budget=550000,
        prior_grant_wins=2,
        has_audited_accounts=True,
        has_insurance=True,
        has_safeguarding_policy=False,
        proposal_writer_available=True,
        mission_areas=["Education", "Arts"],
        beneficiary_population=["Young People"],
        geographies_served=["Manchester", "Salford"],
        geographies_registered=["England"],
    )
