"""
Tests for the rule evaluator and its operator strategies.
"""
from datetime import date

import pytest

from agents.matching.evaluator import (
    OPERATOR_STRATEGIES,
    RuleEvaluator,
    compare_contains,
    compare_eq,
    compare_exists,
    compare_gte,
    compare_in,
    compare_lte,
    compare_not_in,
)
from agents.matching.models import CompanyProfileData, RuleOperator, RuleOutcome
from agents.matching.vocabulary import MatchVocabulary, RuleField

MATCHED = RuleOutcome.MATCHED
UNMATCHED = RuleOutcome.UNMATCHED
UNKNOWN = RuleOutcome.UNKNOWN


class TestOperatorStrategies:
    """Each comparison function in isolation."""

    def test_table_covers_every_operator(self):
        assert set(OPERATOR_STRATEGIES) == set(RuleOperator)

    @pytest.mark.parametrize(
        "profile_value,expected",
        [
            (True, MATCHED),
            (False, UNMATCHED),
            ("England", MATCHED),
            ("", UNMATCHED),
            (0, UNMATCHED),
            (3, MATCHED),
            ([], MATCHED),
            (["x"], MATCHED),
        ],
    )
    def test_exists_treats_any_list_as_present(self, profile_value, expected):
        assert compare_exists(profile_value, None) is expected

    def test_eq_is_case_insensitive(self):
        assert compare_eq("Charity", "charity") is MATCHED
        assert compare_eq("Charity", "CIC") is UNMATCHED

    @pytest.mark.parametrize("rule_value", ["true", "1"])
    def test_eq_boolean_truthy_strings(self, rule_value):
        assert compare_eq(True, rule_value) is MATCHED
        assert compare_eq(False, rule_value) is UNMATCHED

    @pytest.mark.parametrize("rule_value", ["false", "0", "yes", "TRUE", None])
    def test_eq_boolean_other_strings_parse_false(self, rule_value):
        assert compare_eq(False, rule_value) is MATCHED
        assert compare_eq(True, rule_value) is UNMATCHED

    def test_eq_number_against_string(self):
        assert compare_eq(25, "25") is MATCHED
        assert compare_eq(500000.0, "500000") is MATCHED

    def test_eq_null_rule_value_only_matches_literal_null(self):
        assert compare_eq("", None) is UNMATCHED
        assert compare_eq("England", None) is UNMATCHED
        assert compare_eq("NULL", None) is MATCHED

    def test_in_scalar(self):
        assert compare_in("Wales", "England, Wales") is MATCHED
        assert compare_in("Scotland", "England, Wales") is UNMATCHED

    def test_in_collection_overlap(self):
        assert compare_in(["Education", "Arts"], "Health,Education") is MATCHED
        assert compare_in(["Arts"], "Health,Education") is UNMATCHED

    def test_not_in_is_inverse_of_in(self):
        assert compare_not_in(["Education", "Arts"], "Health,Education") is UNMATCHED
        assert compare_not_in(["Arts"], "Health,Education") is MATCHED
        assert compare_not_in("for-profit", "charity,cic") is MATCHED

    def test_contains_substring(self):
        assert compare_contains("Greater Manchester", "manchester") is MATCHED
        assert compare_contains("Liverpool", "manchester") is UNMATCHED

    def test_contains_any_element(self):
        assert compare_contains(["Young People", "Families"], "young") is MATCHED
        assert compare_contains(["Families"], "young") is UNMATCHED

    def test_gte_lte_numeric(self):
        assert compare_gte(600000, "500000") is MATCHED
        assert compare_gte(500000, "500000") is MATCHED
        assert compare_gte(400000, "500000") is UNMATCHED
        assert compare_lte(400000, "500000") is MATCHED
        assert compare_lte(600000, "500000") is UNMATCHED

    @pytest.mark.parametrize(
        "profile_value,rule_value",
        [
            ("lots", "500000"),
            (600000, "a lot"),
            (600000, None),
            (600000, ""),
            (["a"], "5"),
            (float("nan"), "5"),
        ],
    )
    def test_numeric_coercion_failure_is_unknown(self, profile_value, rule_value):
        assert compare_gte(profile_value, rule_value) is UNKNOWN
        assert compare_lte(profile_value, rule_value) is UNKNOWN


class TestRuleEvaluator:
    """Tests for the full evaluate() path."""

    def test_annual_revenue_gte(self, evaluator, rule_factory):
        rule = rule_factory("annualRevenue", "gte", "500000")

        assert evaluator.evaluate(rule, CompanyProfileData(annual_revenue=600000)) is MATCHED
        assert evaluator.evaluate(rule, CompanyProfileData(annual_revenue=400000)) is UNMATCHED
        assert evaluator.evaluate(rule, CompanyProfileData()) is UNKNOWN

    def test_mission_area_in(self, evaluator, rule_factory):
        rule = rule_factory("missionArea", "in", "Health,Education")

        assert evaluator.evaluate(rule, CompanyProfileData(mission_areas=["Education", "Arts"])) is MATCHED
        assert evaluator.evaluate(rule, CompanyProfileData(mission_areas=["Arts"])) is UNMATCHED

    def test_years_operating_gte_uses_age(self, evaluator, rule_factory):
        rule = rule_factory("yearsOperating", "gte", "5")

        # 2024 - 2015 = 9
        assert evaluator.evaluate(rule, CompanyProfileData(years_founded=2015)) is MATCHED
        assert evaluator.evaluate(rule, CompanyProfileData(years_founded=2021)) is UNMATCHED

    def test_years_operating_lte_compares_raw_year(self, evaluator, rule_factory):
        rule = rule_factory("yearsOperating", "lte", "5")

        # No age transform in this direction: 2015 <= 5 is false
        assert evaluator.evaluate(rule, CompanyProfileData(years_founded=2015)) is UNMATCHED

    def test_years_operating_follows_injected_calendar(self, rule_factory):
        rule = rule_factory("yearsOperating", "gte", "10")
        profile = CompanyProfileData(years_founded=2015)

        assert RuleEvaluator(today=lambda: date(2024, 1, 1)).evaluate(rule, profile) is UNMATCHED
        assert RuleEvaluator(today=lambda: date(2025, 1, 1)).evaluate(rule, profile) is MATCHED

    def test_has_insurance_exists(self, evaluator, rule_factory):
        rule = rule_factory("hasInsurance", "exists")

        assert evaluator.evaluate(rule, CompanyProfileData(has_insurance=False)) is UNMATCHED
        assert evaluator.evaluate(rule, CompanyProfileData(has_insurance=True)) is MATCHED

    def test_mission_area_exists_with_empty_list(self, evaluator, rule_factory):
        rule = rule_factory("missionArea", "exists")

        assert evaluator.evaluate(rule, CompanyProfileData(mission_areas=[])) is MATCHED

    def test_unmapped_field_is_unknown(self, evaluator, rule_factory, profile):
        rule = rule_factory("bogusField", "eq", "x")

        assert evaluator.evaluate(rule, profile) is UNKNOWN
        assert evaluator.evaluate(rule, CompanyProfileData()) is UNKNOWN

    def test_document_only_fields_are_unknown(self, evaluator, rule_factory):
        rule = rule_factory("hasFinancialStatements", "eq", "true")

        assert evaluator.evaluate(rule, CompanyProfileData(has_financial_statements=True)) is UNKNOWN

    def test_unknown_operator_is_unknown(self, evaluator, rule_factory, profile):
        rule = rule_factory("jurisdiction", "between", "England")

        assert evaluator.evaluate(rule, profile) is UNKNOWN

    @pytest.mark.parametrize("confidence", ["certain", "likely", "uncertain"])
    def test_missing_value_unknown_regardless_of_confidence(self, evaluator, rule_factory, confidence):
        rule = rule_factory("taxStatus", "eq", "charitable", confidence_level=confidence)

        assert evaluator.evaluate(rule, CompanyProfileData()) is UNKNOWN

    def test_boolean_eq(self, evaluator, rule_factory):
        rule = rule_factory("hasAuditedAccounts", "eq", "true")

        assert evaluator.evaluate(rule, CompanyProfileData(has_audited_accounts=True)) is MATCHED
        assert evaluator.evaluate(rule, CompanyProfileData(has_audited_accounts=False)) is UNMATCHED

    def test_co_funding_reads_audited_accounts(self, evaluator, rule_factory):
        rule = rule_factory("coFundingAvailable", "eq", "true")

        assert evaluator.evaluate(rule, CompanyProfileData(has_audited_accounts=True)) is MATCHED

    def test_mapping_profile_is_accepted(self, evaluator, rule_factory):
        rule = rule_factory("jurisdiction", "eq", "england")

        assert evaluator.evaluate(rule, {"jurisdiction": "England"}) is MATCHED
        assert evaluator.evaluate(rule, {}) is UNKNOWN

    def test_injected_vocabulary(self, rule_factory):
        vocabulary = MatchVocabulary(attribute_map={RuleField.CUSTOM: "mission_statement"}, document_map={})
        evaluator = RuleEvaluator(vocabulary=vocabulary)
        rule = rule_factory("anything", "contains", "literacy")
        profile = CompanyProfileData(mission_statement="Improving literacy in the North West")

        assert evaluator.evaluate(rule, profile) is MATCHED
        # The default vocabulary cannot resolve the same rule
        assert RuleEvaluator().evaluate(rule, profile) is UNKNOWN

    def test_injected_operator_table(self, rule_factory, profile):
        evaluator = RuleEvaluator(operators={RuleOperator.EQ: lambda value, expected: RuleOutcome.UNMATCHED})

        assert evaluator.evaluate(rule_factory("jurisdiction", "eq", "England"), profile) is UNMATCHED
        # Operators missing from the table are unknown
        assert evaluator.evaluate(rule_factory("jurisdiction", "in", "England"), profile) is UNKNOWN
