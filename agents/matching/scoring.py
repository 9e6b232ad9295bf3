"""
Match Scoring
Partitions rule outcomes, checks document evidence and aggregates the
eligibility, readiness, fit and overall scores.
"""
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from .evaluator import RuleEvaluator
from .models import CompanyProfileData, EligibilityRuleData, MatchScores, RuleOutcome
from .vocabulary import DEFAULT_VOCABULARY, MatchVocabulary


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative scores used here."""
    return int(math.floor(value + 0.5))


@dataclass
class CriteriaPartition:
    """Rules split by their evaluation outcome."""

    matched: list[EligibilityRuleData] = field(default_factory=list)
    unmatched: list[EligibilityRuleData] = field(default_factory=list)
    unknown: list[EligibilityRuleData] = field(default_factory=list)

    def add(self, rule: EligibilityRuleData, outcome: RuleOutcome) -> None:
        if outcome is RuleOutcome.MATCHED:
            self.matched.append(rule)
        elif outcome is RuleOutcome.UNMATCHED:
            self.unmatched.append(rule)
        else:
            self.unknown.append(rule)

    @property
    def mandatory_unmet(self) -> int:
        return sum(1 for rule in self.unmatched if rule.is_mandatory)

    @property
    def optional_matched(self) -> int:
        return sum(1 for rule in self.matched if not rule.is_mandatory)

    @property
    def risk_flags(self) -> list[str]:
        return [f"Mandatory criterion not met: {rule.field}" for rule in self.unmatched if rule.is_mandatory]


def partition_rules(
    rules: Sequence[EligibilityRuleData],
    profile: Optional[CompanyProfileData],
    evaluator: RuleEvaluator,
) -> CriteriaPartition:
    """
    Evaluate every rule and partition by outcome.

    Without a profile every rule is unknown, never unmatched, so a missing
    profile alone cannot trigger the mandatory veto.
    """
    partition = CriteriaPartition()
    for rule in rules:
        if profile is None:
            partition.add(rule, RuleOutcome.UNKNOWN)
        else:
            partition.add(rule, evaluator.evaluate(rule, profile))
    return partition


def find_document_gaps(
    rules: Sequence[EligibilityRuleData],
    documents: Mapping[str, bool],
    vocabulary: MatchVocabulary = DEFAULT_VOCABULARY,
) -> list[str]:
    """
    Document types implied by the rules but not marked available.

    Independent of rule outcomes. Deduplicated, in first-seen order.
    """
    gaps: dict[str, None] = {}
    for rule in rules:
        doc_type = vocabulary.required_document(rule.rule_field)
        if doc_type and not documents.get(doc_type):
            gaps[doc_type] = None
    return list(gaps)


class ScoreAggregator:
    """
    Weighted scoring with a hard veto on unmet mandatory criteria.

    overall = 0 if any mandatory rule is unmatched, otherwise
    0.5 * eligibility + 0.3 * readiness + 0.2 * fit.
    """

    ELIGIBILITY_WEIGHT = 0.5
    READINESS_WEIGHT = 0.3
    FIT_WEIGHT = 0.2
    UNDETERMINED_SCORE = 50

    def __init__(self, vocabulary: MatchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def eligibility_score(self, rules: Sequence[EligibilityRuleData], partition: CriteriaPartition) -> int:
        mandatory_total = sum(1 for rule in rules if rule.is_mandatory)
        if mandatory_total > 0:
            mandatory_met = mandatory_total - partition.mandatory_unmet
            return round_half_up(mandatory_met / mandatory_total * 100)
        if not rules:
            return self.UNDETERMINED_SCORE
        return 100

    def readiness_score(self, documents: Mapping[str, bool], profile: Optional[CompanyProfileData]) -> int:
        required = self.vocabulary.required_documents
        if required:
            available = sum(1 for doc_type in required if documents.get(doc_type))
            return round_half_up(available / len(required) * 100)
        if profile is not None and profile.readiness_score is not None:
            return profile.readiness_score
        return self.UNDETERMINED_SCORE

    def fit_score(self, rules: Sequence[EligibilityRuleData], partition: CriteriaPartition) -> int:
        optional_total = sum(1 for rule in rules if not rule.is_mandatory)
        if optional_total == 0:
            return self.UNDETERMINED_SCORE
        return round_half_up(partition.optional_matched / optional_total * 100)

    def aggregate(
        self,
        rules: Sequence[EligibilityRuleData],
        partition: CriteriaPartition,
        documents: Mapping[str, bool],
        profile: Optional[CompanyProfileData],
    ) -> MatchScores:
        eligibility = self.eligibility_score(rules, partition)
        readiness = self.readiness_score(documents, profile)
        fit = self.fit_score(rules, partition)

        if partition.mandatory_unmet > 0:
            overall = 0
        else:
            overall = round_half_up(
                eligibility * self.ELIGIBILITY_WEIGHT + readiness * self.READINESS_WEIGHT + fit * self.FIT_WEIGHT
            )

        return MatchScores(overall=overall, eligibility=eligibility, readiness=readiness, fit=fit)
