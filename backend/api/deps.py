"""
FastAPI Dependencies
Shared dependencies for database access and the matching engine.
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agents.matching.matcher import EligibilityMatcher
from backend.database import AsyncSessionLocal, get_db

# =============================================================================
# Database
# =============================================================================

AsyncSessionDep = Annotated[AsyncSession, Depends(get_db)]


# =============================================================================
# Matching Engine
# =============================================================================


def get_matcher() -> EligibilityMatcher:
    """Matching engine bound to the application's session factory."""
    return EligibilityMatcher(session_factory=AsyncSessionLocal)


MatcherDep = Annotated[EligibilityMatcher, Depends(get_matcher)]
