"""
Eligibility Matching Engine
Computes rule-based company-to-grant matches, upserts them and drives the
per-grant and per-company fan-out recomputations.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence
from uuid import UUID, uuid4

import structlog
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.core.config import settings
from backend.models import (
    Company,
    CompanyProfile,
    DocumentInventory,
    GrantEligibilityRule,
    GrantMatch,
    PublicGrant,
)

from .evaluator import RuleEvaluator
from .explanation import build_explanation
from .models import CompanyProfileData, EligibilityRuleData, MatchComputation
from .scoring import ScoreAggregator, find_document_gaps, partition_rules
from .vocabulary import DEFAULT_VOCABULARY, MatchVocabulary

logger = structlog.get_logger().bind(agent="matcher")

_UPSERT_BUILDERS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}

# Conflict target of the GrantMatch upsert
_MATCH_KEY = ("company_id", "public_grant_id")


class EligibilityMatcher:
    """
    Rule-based grant matching engine.

    Pipeline per (company, grant) pair:
    1. Load profile, document inventory and eligibility rules
    2. Evaluate each rule and partition into matched / unmatched / unknown
    3. Flag missing supporting documents
    4. Aggregate eligibility, readiness, fit and overall scores
    5. Narrate the result and upsert one GrantMatch row (stale=False)

    Every write recomputes from source rows, so concurrent recomputations of
    the same pair are safe to interleave; the last write wins.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        vocabulary: MatchVocabulary = DEFAULT_VOCABULARY,
        evaluator: Optional[RuleEvaluator] = None,
        aggregator: Optional[ScoreAggregator] = None,
        active_grant_statuses: Optional[Iterable[str]] = None,
    ):
        """
        Initialize matcher.

        Args:
            session_factory: Factory for the independent sessions used by
                single-pair computations and fan-out sub-tasks.
            vocabulary: Rule field lookup tables.
            evaluator: Rule evaluator; built from ``vocabulary`` if omitted.
            aggregator: Score aggregator; built from ``vocabulary`` if omitted.
            active_grant_statuses: Grant statuses matched per company.
        """
        self.session_factory = session_factory
        self.vocabulary = vocabulary
        self.evaluator = evaluator or RuleEvaluator(vocabulary=vocabulary)
        self.aggregator = aggregator or ScoreAggregator(vocabulary=vocabulary)
        self.active_grant_statuses = list(active_grant_statuses or settings.match_active_grant_statuses)

    # =========================================================================
    # Loading
    # =========================================================================

    async def load_profile(self, session: AsyncSession, company_id: UUID) -> Optional[CompanyProfileData]:
        result = await session.execute(select(CompanyProfile).where(CompanyProfile.company_id == company_id))
        profile = result.scalar_one_or_none()
        if profile is None:
            return None
        return CompanyProfileData.model_validate(profile)

    async def load_documents(self, session: AsyncSession, company_id: UUID) -> dict[str, bool]:
        result = await session.execute(
            select(DocumentInventory.doc_type, DocumentInventory.available).where(
                DocumentInventory.company_id == company_id
            )
        )
        return {doc_type: bool(available) for doc_type, available in result.all()}

    async def load_rules(self, session: AsyncSession, grant_id: UUID) -> list[EligibilityRuleData]:
        result = await session.execute(
            select(GrantEligibilityRule)
            .where(GrantEligibilityRule.public_grant_id == grant_id)
            .order_by(GrantEligibilityRule.created_at, GrantEligibilityRule.id)
        )
        return [EligibilityRuleData.model_validate(rule) for rule in result.scalars().all()]

    # =========================================================================
    # Computation
    # =========================================================================

    def compute(
        self,
        company_id: UUID,
        grant_id: UUID,
        profile: Optional[CompanyProfileData],
        documents: dict[str, bool],
        rules: Sequence[EligibilityRuleData],
    ) -> MatchComputation:
        """
        Compute a match from already-loaded inputs. No I/O.

        Args:
            company_id: Company identifier.
            grant_id: Public grant identifier.
            profile: Company profile, or None when the company has none yet.
            documents: Document type -> available.
            rules: The grant's eligibility rules.

        Returns:
            The scores, partitioned criteria, flags, gaps and explanation.
        """
        has_profile = profile is not None
        partition = partition_rules(rules, profile, self.evaluator)
        # Evidence is only checked for companies that have a profile
        document_gaps = find_document_gaps(rules, documents, self.vocabulary) if has_profile else []
        scores = self.aggregator.aggregate(rules, partition, documents, profile)

        explanation = build_explanation(
            has_profile=has_profile,
            mandatory_total=sum(1 for rule in rules if rule.is_mandatory),
            mandatory_unmet=partition.mandatory_unmet,
            document_gaps=document_gaps,
            unknown_count=len(partition.unknown),
        )

        return MatchComputation(
            company_id=company_id,
            grant_id=grant_id,
            scores=scores,
            matched_criteria=[rule.to_summary() for rule in partition.matched],
            unmatched_criteria=[rule.to_summary() for rule in partition.unmatched],
            unknown_criteria=[rule.to_summary() for rule in partition.unknown],
            risk_flags=partition.risk_flags,
            document_gaps=document_gaps,
            explanation=explanation,
        )

    # =========================================================================
    # Persistence
    # =========================================================================

    async def upsert_match(self, session: AsyncSession, computation: MatchComputation) -> None:
        """
        Insert or update the GrantMatch row for the computation's pair.

        Always clears ``stale`` and stamps ``computed_at``.
        """
        dialect = session.get_bind().dialect.name
        insert_builder = _UPSERT_BUILDERS.get(dialect)
        if insert_builder is None:
            raise NotImplementedError(f"GrantMatch upsert is not supported on {dialect}")

        values: dict[str, Any] = computation.to_row()
        values["computed_at"] = datetime.now(timezone.utc)
        values["stale"] = False

        statement = insert_builder(GrantMatch).values(id=uuid4(), **values)
        statement = statement.on_conflict_do_update(
            index_elements=list(_MATCH_KEY),
            set_={column: statement.excluded[column] for column in values if column not in _MATCH_KEY},
        )
        await session.execute(statement)

    async def compute_match(self, session: AsyncSession, company_id: UUID, grant_id: UUID) -> MatchComputation:
        """Load, compute and upsert one pair inside the caller's session."""
        profile = await self.load_profile(session, company_id)
        documents = await self.load_documents(session, company_id)
        rules = await self.load_rules(session, grant_id)

        computation = self.compute(company_id, grant_id, profile, documents, rules)
        await self.upsert_match(session, computation)

        logger.info(
            "match_computed",
            company_id=str(company_id),
            grant_id=str(grant_id),
            overall_score=computation.scores.overall,
            rules=len(rules),
            unknown=len(computation.unknown_criteria),
        )
        return computation

    async def compute_match_for_grant(self, company_id: UUID, grant_id: UUID) -> MatchComputation:
        """
        Compute and commit the match for one (company, grant) pair.

        Uses its own session. Data-layer errors propagate to the caller.
        """
        async with self.session_factory() as session:
            try:
                computation = await self.compute_match(session, company_id, grant_id)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
        return computation

    # =========================================================================
    # Fan-out
    # =========================================================================

    async def _compute_isolated(self, company_id: UUID, grant_id: UUID) -> None:
        try:
            await self.compute_match_for_grant(company_id, grant_id)
        except Exception as e:
            logger.warning(
                "match_computation_failed",
                company_id=str(company_id),
                grant_id=str(grant_id),
                error=str(e),
                error_type=type(e).__name__,
            )

    async def compute_matches_for_all_companies(self, grant_id: UUID) -> None:
        """
        Recompute every company's match for one grant, concurrently.

        Individual failures are logged and discarded; their rows keep their
        previous (possibly stale) contents.
        """
        async with self.session_factory() as session:
            result = await session.execute(select(Company.id))
            company_ids = list(result.scalars().all())

        logger.info("grant_fanout_started", grant_id=str(grant_id), companies=len(company_ids))
        await asyncio.gather(*(self._compute_isolated(company_id, grant_id) for company_id in company_ids))

    async def compute_matches_for_company(self, company_id: UUID) -> None:
        """
        Recompute one company's match against every active grant, concurrently.

        Same failure policy as ``compute_matches_for_all_companies``.
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(PublicGrant.id).where(PublicGrant.status.in_(self.active_grant_statuses))
            )
            grant_ids = list(result.scalars().all())

        logger.info("company_fanout_started", company_id=str(company_id), grants=len(grant_ids))
        await asyncio.gather(*(self._compute_isolated(company_id, grant_id) for grant_id in grant_ids))

    # =========================================================================
    # Staleness and reads
    # =========================================================================

    async def mark_matches_stale(self, grant_id: UUID, session: Optional[AsyncSession] = None) -> int:
        """
        Flag every existing match for a grant as stale, leaving scores untouched.

        Args:
            grant_id: Public grant identifier.
            session: Join the caller's transaction (e.g. a rule edit) when
                given; otherwise commit in a session of our own.

        Returns:
            Number of rows flagged.
        """
        statement = update(GrantMatch).where(GrantMatch.public_grant_id == grant_id).values(stale=True)

        if session is not None:
            result = await session.execute(statement)
        else:
            async with self.session_factory() as own_session:
                result = await own_session.execute(statement)
                await own_session.commit()

        logger.info("matches_marked_stale", grant_id=str(grant_id), rows=result.rowcount)
        return result.rowcount

    async def get_matches_for_company(
        self,
        session: AsyncSession,
        company_id: UUID,
        min_score: Optional[int] = None,
        include_stale: bool = True,
    ) -> list[GrantMatch]:
        """All GrantMatch rows for a company, best overall score first."""
        query = select(GrantMatch).where(GrantMatch.company_id == company_id)
        if min_score is not None:
            query = query.where(GrantMatch.overall_score >= min_score)
        if not include_stale:
            query = query.where(GrantMatch.stale.is_(False))
        query = query.order_by(GrantMatch.overall_score.desc(), GrantMatch.computed_at.desc())

        result = await session.execute(query)
        return list(result.scalars().all())
