"""
GrantFit Test Configuration and Fixtures
Shared pytest fixtures for all test modules.
"""
import os
import tempfile
import uuid
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.models import Base, Company, CompanyProfile, PublicGrant


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """Create an async SQLite engine for testing."""
    # Use a unique temp file for each test to ensure complete isolation
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"check_same_thread": False, "timeout": 30},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()

    # Clean up the temp file
    try:
        os.unlink(db_path)
    except OSError:
        pass


@pytest.fixture(scope="function")
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, as handed to the matcher."""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create an async session for testing."""
    async with session_factory() as session:
        yield session
        await session.rollback()


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_profile_data() -> dict[str, Any]:
    """A UK charity with a fairly complete profile."""
    return {
        "legal_entity_type": "charity",
        "jurisdiction": "England",
        "tax_status": "charitable",
        "registration_status": "registered",
        "years_founded": 2010,
        "employee_count": 25,
        "annual_revenue": 500000.0,
        "annual_budget": 450000.0,
        "prior_grant_wins": 3,
        "has_audited_accounts": True,
        "has_financial_statements": True,
        "has_insurance": True,
        "has_safeguarding_policy": True,
        "has_logic_model": False,
        "proposal_writer_available": True,
        "mission_statement": "Improving literacy for young people across the North West.",
        "mission_areas": ["education", "youth"],
        "beneficiary_population": ["children", "young people"],
        "geographies_served": ["North West", "Manchester"],
        "geographies_registered": ["England"],
    }


# =============================================================================
# Database Model Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_company(async_session: AsyncSession) -> Company:
    """Create a test company in the database."""
    company = Company(id=uuid.uuid4(), name="Northern Literacy Trust")
    async_session.add(company)
    await async_session.commit()
    await async_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def db_profile(async_session: AsyncSession, db_company: Company, sample_profile_data) -> CompanyProfile:
    """Create a profile for the test company."""
    profile = CompanyProfile(company_id=db_company.id, readiness_score=80, **sample_profile_data)
    async_session.add(profile)
    await async_session.commit()
    await async_session.refresh(profile)
    return profile


@pytest_asyncio.fixture
async def db_grant(async_session: AsyncSession) -> PublicGrant:
    """Create an open public grant in the database."""
    grant = PublicGrant(
        id=uuid.uuid4(),
        title="Community Literacy Fund",
        funder="National Lottery Community Fund",
        status="open",
        url="https://example.org/grants/community-literacy",
    )
    async_session.add(grant)
    await async_session.commit()
    await async_session.refresh(grant)
    return grant
