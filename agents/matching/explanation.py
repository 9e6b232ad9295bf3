"""
Match Explanation
Deterministic narrative for a computed match.
"""
from typing import Sequence

NO_PROFILE_MESSAGE = "No company profile found. Complete your organisation profile to enable matching."
NO_MANDATORY_MESSAGE = "No mandatory criteria defined. Match is based on scoring criteria only."


def build_explanation(
    has_profile: bool,
    mandatory_total: int,
    mandatory_unmet: int,
    document_gaps: Sequence[str],
    unknown_count: int,
) -> str:
    """
    Build the explanation sentence by sentence, joined with spaces.

    Document types are listed as stored (underscores included); the UI is
    responsible for prettifying them.
    """
    if not has_profile:
        return NO_PROFILE_MESSAGE

    lines: list[str] = []
    if mandatory_unmet > 0:
        lines.append(f"⚠ {mandatory_unmet} mandatory eligibility criteria are not met.")
    elif mandatory_total > 0:
        lines.append(f"✓ All {mandatory_total} mandatory criteria are satisfied.")
    else:
        lines.append(NO_MANDATORY_MESSAGE)

    if document_gaps:
        lines.append(f"Missing documents: {', '.join(document_gaps)}.")

    if unknown_count > 0:
        lines.append(f"{unknown_count} criteria could not be evaluated. Profile data missing.")

    return " ".join(lines)
