"""
API test fixtures.
Route handlers are called directly with the test session; background
recomputation tasks are patched out.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from agents.matching.matcher import EligibilityMatcher


@pytest.fixture
def matcher(session_factory) -> EligibilityMatcher:
    """Matcher bound to the test database."""
    return EligibilityMatcher(session_factory=session_factory)


@pytest.fixture
def mock_tasks():
    """Patch the match recomputation tasks so nothing reaches a broker."""
    with patch("backend.tasks.matching.recompute_grant_matches") as grant_task, patch(
        "backend.tasks.matching.recompute_company_matches"
    ) as company_task:
        grant_task.delay.return_value = MagicMock(id="grant-task-1")
        company_task.delay.return_value = MagicMock(id="company-task-1")
        yield SimpleNamespace(grant=grant_task, company=company_task)
