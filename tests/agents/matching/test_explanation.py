"""
Tests for match explanation text.
"""
from agents.matching.explanation import NO_MANDATORY_MESSAGE, NO_PROFILE_MESSAGE, build_explanation


class TestBuildExplanation:
    """Clause selection and ordering."""

    def test_no_profile_stops_after_first_clause(self):
        text = build_explanation(
            has_profile=False,
            mandatory_total=3,
            mandatory_unmet=0,
            document_gaps=["audit"],
            unknown_count=3,
        )

        assert text == NO_PROFILE_MESSAGE

    def test_unmet_mandatory_warning(self):
        text = build_explanation(True, mandatory_total=3, mandatory_unmet=2, document_gaps=[], unknown_count=0)

        assert text == "⚠ 2 mandatory eligibility criteria are not met."

    def test_all_mandatory_satisfied(self):
        text = build_explanation(True, mandatory_total=4, mandatory_unmet=0, document_gaps=[], unknown_count=0)

        assert text == "✓ All 4 mandatory criteria are satisfied."

    def test_no_mandatory_fallback(self):
        text = build_explanation(True, mandatory_total=0, mandatory_unmet=0, document_gaps=[], unknown_count=0)

        assert text == NO_MANDATORY_MESSAGE

    def test_full_ordering(self):
        text = build_explanation(
            True,
            mandatory_total=2,
            mandatory_unmet=1,
            document_gaps=["audit", "safeguarding_policy"],
            unknown_count=2,
        )

        assert text == (
            "⚠ 1 mandatory eligibility criteria are not met. "
            "Missing documents: audit, safeguarding_policy. "
            "2 criteria could not be evaluated. Profile data missing."
        )

    def test_document_types_are_not_prettified(self):
        text = build_explanation(True, 1, 0, ["financial_statements"], 0)

        assert "financial_statements" in text
        assert "financial statements" not in text
