"""
Tests for the match recomputation Celery tasks.
The matcher is mocked; the tasks are run in-process via ``Task.run``.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from backend.tasks.matching import (
    compute_single_match,
    recompute_company_matches,
    recompute_grant_matches,
)


@pytest.fixture
def mock_matcher():
    """Matcher double with async fan-out methods, plus a patched close_db."""
    matcher = MagicMock()
    matcher.compute_matches_for_all_companies = AsyncMock(return_value=None)
    matcher.compute_matches_for_company = AsyncMock(return_value=None)
    matcher.compute_match_for_grant = AsyncMock(
        return_value=SimpleNamespace(scores=SimpleNamespace(overall=72, eligibility=100, readiness=40, fit=50))
    )
    with patch("backend.tasks.matching._build_matcher", return_value=matcher), patch(
        "backend.tasks.matching.close_db", new_callable=AsyncMock
    ) as close_db:
        matcher.close_db = close_db
        yield matcher


class TestRecomputeGrantMatches:
    """Tests for recompute_grant_matches."""

    def test_fans_out_over_companies(self, mock_matcher):
        grant_id = uuid4()

        stats = recompute_grant_matches.run(str(grant_id))

        mock_matcher.compute_matches_for_all_companies.assert_awaited_once_with(grant_id)
        mock_matcher.close_db.assert_awaited_once()
        assert stats["grant_id"] == str(grant_id)
        assert stats["processing_time_seconds"] >= 0

    def test_invalid_uuid(self, mock_matcher):
        with pytest.raises(ValueError, match="Invalid grant_id format"):
            recompute_grant_matches.run("not-a-uuid")

        mock_matcher.compute_matches_for_all_companies.assert_not_called()

    def test_connections_released_on_failure(self, mock_matcher):
        mock_matcher.compute_matches_for_all_companies.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            recompute_grant_matches.run(str(uuid4()))

        mock_matcher.close_db.assert_awaited_once()


class TestRecomputeCompanyMatches:
    """Tests for recompute_company_matches."""

    def test_fans_out_over_active_grants(self, mock_matcher):
        company_id = uuid4()

        stats = recompute_company_matches.run(str(company_id))

        mock_matcher.compute_matches_for_company.assert_awaited_once_with(company_id)
        assert stats["company_id"] == str(company_id)

    def test_invalid_uuid(self, mock_matcher):
        with pytest.raises(ValueError, match="Invalid company_id format"):
            recompute_company_matches.run("")


class TestComputeSingleMatch:
    """Tests for compute_single_match."""

    def test_returns_scores(self, mock_matcher):
        company_id, grant_id = uuid4(), uuid4()

        stats = compute_single_match.run(str(company_id), str(grant_id))

        mock_matcher.compute_match_for_grant.assert_awaited_once_with(company_id, grant_id)
        assert stats["overall_score"] == 72
        assert stats["eligibility_score"] == 100
        assert stats["readiness_score"] == 40
        assert stats["fit_score"] == 50

    def test_invalid_grant_uuid(self, mock_matcher):
        with pytest.raises(ValueError, match="Invalid grant_id format"):
            compute_single_match.run(str(uuid4()), "123")


class TestTaskConfiguration:
    """Routing and retry settings."""

    def test_tasks_use_matching_queue(self):
        for task in (recompute_grant_matches, recompute_company_matches, compute_single_match):
            assert task.queue == "matching"

    def test_retry_on_database_errors(self):
        from sqlalchemy.exc import SQLAlchemyError

        for task in (recompute_grant_matches, recompute_company_matches, compute_single_match):
            assert SQLAlchemyError in task.autoretry_for

    def test_matching_is_the_only_queue(self):
        from backend.celery_app import MATCHING_QUEUE, celery_app

        assert [queue.name for queue in celery_app.conf.task_queues] == [MATCHING_QUEUE]
        assert celery_app.conf.task_default_queue == MATCHING_QUEUE
