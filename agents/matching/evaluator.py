"""
Rule Evaluator
Decides matched / unmatched / unknown for one eligibility rule against one
company profile. Pure: no I/O, no shared state.
"""
import math
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from .models import EligibilityRuleData, RuleOperator, RuleOutcome
from .vocabulary import DEFAULT_VOCABULARY, MatchVocabulary, RuleField

# (profile value, rule value) -> outcome
Comparison = Callable[[Any, Optional[str]], RuleOutcome]

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def _outcome(condition: bool) -> RuleOutcome:
    return RuleOutcome.MATCHED if condition else RuleOutcome.UNMATCHED


def _is_collection(value: Any) -> bool:
    return isinstance(value, _COLLECTION_TYPES)


def _as_text(value: Any) -> str:
    """Render a profile or rule value for case-insensitive text comparison."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if _is_collection(value):
        return ",".join(_as_text(item) for item in value)
    return str(value)


def _to_number(value: Any) -> Optional[float]:
    """Coerce to a float, or None when the value is not numeric."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def _split_values(rule_value: Optional[str]) -> set[str]:
    return {part.strip().lower() for part in (rule_value or "").split(",")}


def _parse_bool(rule_value: Optional[str]) -> bool:
    return rule_value in ("true", "1")


# =============================================================================
# Operator strategies
# =============================================================================


def compare_exists(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
    # An empty list still counts as answered
    return _outcome(_is_collection(profile_value) or bool(profile_value))


def compare_eq(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
    if isinstance(profile_value, bool):
        return _outcome(profile_value == _parse_bool(rule_value))
    expected = "null" if rule_value is None else _as_text(rule_value).lower()
    return _outcome(_as_text(profile_value).lower() == expected)


def _overlaps(profile_value: Any, rule_value: Optional[str]) -> bool:
    listed = _split_values(rule_value)
    if _is_collection(profile_value):
        return any(_as_text(item).lower() in listed for item in profile_value)
    return _as_text(profile_value).lower() in listed


def compare_in(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
    return _outcome(_overlaps(profile_value, rule_value))


def compare_not_in(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
    return _outcome(not _overlaps(profile_value, rule_value))


def compare_contains(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
    needle = _as_text(rule_value).lower()
    if _is_collection(profile_value):
        return _outcome(any(needle in _as_text(item).lower() for item in profile_value))
    return _outcome(needle in _as_text(profile_value).lower())


def _numeric(check: Callable[[float, float], bool]) -> Comparison:
    def compare(profile_value: Any, rule_value: Optional[str]) -> RuleOutcome:
        number = _to_number(profile_value)
        threshold = _to_number(rule_value)
        if number is None or threshold is None:
            return RuleOutcome.UNKNOWN
        return _outcome(check(number, threshold))

    return compare


compare_gte = _numeric(lambda number, threshold: number >= threshold)
compare_lte = _numeric(lambda number, threshold: number <= threshold)


OPERATOR_STRATEGIES: Mapping[RuleOperator, Comparison] = MappingProxyType(
    {
        RuleOperator.EXISTS: compare_exists,
        RuleOperator.EQ: compare_eq,
        RuleOperator.IN: compare_in,
        RuleOperator.NOT_IN: compare_not_in,
        RuleOperator.CONTAINS: compare_contains,
        RuleOperator.GTE: compare_gte,
        RuleOperator.LTE: compare_lte,
    }
)


# =============================================================================
# Evaluator
# =============================================================================


class RuleEvaluator:
    """
    Evaluates eligibility rules against a company profile.

    The vocabulary, operator table and calendar are injected so tests can
    substitute any of them.
    """

    def __init__(
        self,
        vocabulary: MatchVocabulary = DEFAULT_VOCABULARY,
        operators: Mapping[RuleOperator, Comparison] = OPERATOR_STRATEGIES,
        today: Callable[[], date] = date.today,
    ):
        self.vocabulary = vocabulary
        self.operators = operators
        self.today = today

    @staticmethod
    def _read(profile: Any, attribute: str) -> Any:
        if isinstance(profile, Mapping):
            return profile.get(attribute)
        return getattr(profile, attribute, None)

    def _age_from_founding_year(self, founding_year: Any) -> Optional[float]:
        year = _to_number(founding_year)
        if year is None:
            return None
        return self.today().year - year

    def evaluate(self, rule: EligibilityRuleData, profile: Any) -> RuleOutcome:
        """
        Evaluate a single rule.

        Args:
            rule: The eligibility rule.
            profile: Company profile (model instance or mapping of attributes).

        Returns:
            The tri-state outcome. Never raises for unmapped fields, missing
            values, unknown operators or non-numeric comparands.
        """
        rule_field = rule.rule_field
        attribute = self.vocabulary.profile_attribute(rule_field)
        if attribute is None:
            return RuleOutcome.UNKNOWN

        # confidence_level does not influence this branch
        profile_value = self._read(profile, attribute)
        if profile_value is None:
            return RuleOutcome.UNKNOWN

        try:
            operator = RuleOperator(rule.operator)
        except ValueError:
            return RuleOutcome.UNKNOWN

        compare = self.operators.get(operator)
        if compare is None:
            return RuleOutcome.UNKNOWN

        # Founding year becomes an age only for the gte direction
        if rule_field is RuleField.YEARS_OPERATING and operator is RuleOperator.GTE:
            profile_value = self._age_from_founding_year(profile_value)
            if profile_value is None:
                return RuleOutcome.UNKNOWN

        return compare(profile_value, rule.value)
