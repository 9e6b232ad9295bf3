"""
Tests for the rule field vocabulary.
"""
from agents.matching.vocabulary import (
    DEFAULT_ATTRIBUTE_MAP,
    DEFAULT_DOCUMENT_MAP,
    DEFAULT_VOCABULARY,
    MatchVocabulary,
    RuleField,
)


class TestRuleField:
    """Tests for parsing stored field names."""

    def test_known_field_parses(self):
        assert RuleField.parse("annualRevenue") is RuleField.ANNUAL_REVENUE
        assert RuleField.parse("yearsOperating") is RuleField.YEARS_OPERATING

    def test_unknown_field_parses_to_custom(self):
        assert RuleField.parse("bogusField") is RuleField.CUSTOM
        assert RuleField("anything else") is RuleField.CUSTOM

    def test_none_parses_to_custom(self):
        assert RuleField.parse(None) is RuleField.CUSTOM

    def test_field_names_are_case_sensitive(self):
        assert RuleField.parse("AnnualRevenue") is RuleField.CUSTOM


class TestDefaultMaps:
    """Tests for the default lookup tables."""

    def test_aliases_share_attribute(self):
        assert DEFAULT_ATTRIBUTE_MAP[RuleField.LEGAL_STRUCTURE] == "legal_entity_type"
        assert DEFAULT_ATTRIBUTE_MAP[RuleField.LEGAL_ENTITY_TYPE] == "legal_entity_type"
        assert DEFAULT_ATTRIBUTE_MAP[RuleField.INDUSTRY] == "mission_areas"
        assert DEFAULT_ATTRIBUTE_MAP[RuleField.MISSION_AREA] == "mission_areas"

    def test_co_funding_reads_audited_accounts(self):
        assert DEFAULT_ATTRIBUTE_MAP[RuleField.CO_FUNDING_AVAILABLE] == "has_audited_accounts"

    def test_custom_has_no_attribute(self):
        assert DEFAULT_VOCABULARY.profile_attribute(RuleField.CUSTOM) is None

    def test_five_required_documents(self):
        assert DEFAULT_VOCABULARY.required_documents == [
            "audit",
            "financial_statements",
            "insurance",
            "safeguarding_policy",
            "logic_model",
        ]

    def test_document_map_covers_capability_flags_only(self):
        assert set(DEFAULT_DOCUMENT_MAP) == {
            RuleField.HAS_AUDITED_ACCOUNTS,
            RuleField.HAS_FINANCIAL_STATEMENTS,
            RuleField.HAS_INSURANCE,
            RuleField.HAS_SAFEGUARDING_POLICY,
            RuleField.HAS_LOGIC_MODEL,
        }
        assert DEFAULT_VOCABULARY.required_document(RuleField.ANNUAL_REVENUE) is None


class TestCustomVocabulary:
    """Alternate vocabularies are plain values, not global state."""

    def test_custom_vocabulary_does_not_affect_default(self):
        custom = MatchVocabulary(
            attribute_map={RuleField.CUSTOM: "mission_statement"},
            document_map={},
        )

        assert custom.profile_attribute(RuleField.CUSTOM) == "mission_statement"
        assert custom.required_documents == []
        assert DEFAULT_VOCABULARY.profile_attribute(RuleField.CUSTOM) is None

    def test_required_documents_deduplicated(self):
        custom = MatchVocabulary(
            document_map={
                RuleField.HAS_AUDITED_ACCOUNTS: "accounts",
                RuleField.HAS_FINANCIAL_STATEMENTS: "accounts",
                RuleField.HAS_INSURANCE: "insurance",
            }
        )

        assert custom.required_documents == ["accounts", "insurance"]
