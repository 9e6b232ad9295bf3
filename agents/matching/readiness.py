"""
Profile Readiness
Completeness score stored on CompanyProfile.readiness_score when a profile
is saved.
"""
from typing import Any, Callable, Mapping

# (profile attribute, predicate, points)
READINESS_CHECKS: tuple[tuple[str, Callable[[Any], bool], int], ...] = (
    ("legal_entity_type", bool, 8),
    ("jurisdiction", bool, 5),
    ("tax_status", bool, 5),
    ("years_founded", bool, 4),
    ("employee_count", bool, 4),
    ("annual_revenue", bool, 5),
    ("has_audited_accounts", bool, 8),
    ("has_financial_statements", bool, 8),
    ("has_insurance", bool, 5),
    ("mission_statement", bool, 8),
    ("mission_areas", bool, 6),
    ("geographies_served", bool, 5),
    ("proposal_writer_available", bool, 6),
    ("has_safeguarding_policy", bool, 5),
    ("has_logic_model", bool, 5),
    ("prior_grant_wins", lambda wins: bool(wins) and wins > 0, 7),
    ("beneficiary_population", bool, 5),
)

MAX_READINESS_SCORE = 100


def compute_profile_readiness(profile: Any) -> int:
    """
    Score a company profile from 0 to 100 by how much of it is filled in.

    Args:
        profile: Profile model instance or mapping of profile attributes.

    Returns:
        Sum of the points for each satisfied check, capped at 100.
    """
    score = 0
    for attribute, is_satisfied, points in READINESS_CHECKS:
        if isinstance(profile, Mapping):
            value = profile.get(attribute)
        else:
            value = getattr(profile, attribute, None)
        if value is not None and is_satisfied(value):
            score += points
    return min(MAX_READINESS_SCORE, score)
