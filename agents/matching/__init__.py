"""
Matching Agent Module
Rule-based company-to-grant eligibility matching and readiness scoring.
"""
from .evaluator import OPERATOR_STRATEGIES, RuleEvaluator
from .explanation import build_explanation
from .matcher import EligibilityMatcher
from .models import (
    CompanyProfileData,
    EligibilityRuleData,
    MatchComputation,
    MatchScores,
    RuleOperator,
    RuleOutcome,
    RuleSummary,
)
from .readiness import compute_profile_readiness
from .scoring import CriteriaPartition, ScoreAggregator, find_document_gaps, partition_rules
from .vocabulary import DEFAULT_VOCABULARY, MatchVocabulary, RuleField

__all__ = [
    # Matcher
    "EligibilityMatcher",
    # Engine parts
    "RuleEvaluator",
    "OPERATOR_STRATEGIES",
    "ScoreAggregator",
    "CriteriaPartition",
    "partition_rules",
    "find_document_gaps",
    "build_explanation",
    "compute_profile_readiness",
    # Vocabulary
    "DEFAULT_VOCABULARY",
    "MatchVocabulary",
    "RuleField",
    # Models
    "CompanyProfileData",
    "EligibilityRuleData",
    "MatchComputation",
    "MatchScores",
    "RuleOperator",
    "RuleOutcome",
    "RuleSummary",
]
