"""Pytest configuration and shared fixtures for all tests."""

import os

# Keep tests independent of any local .env
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio

from incentives.config.business_constants import TOKEN_UNIT
from incentives.database import create_engine, create_session_maker, init_models
from incentives.ledger import IncentiveLedger
from incentives.models.staker_account import StakerAccount
from tests.helpers import ALICE, BACKEND, OWNER, FakeClock


@pytest.fixture
def clock():
    """Ledger clock starting at GENESIS."""
    return FakeClock()


@pytest.fixture
def make_account():
    """Factory for transient StakerAccount objects."""

    def _make(**overrides):
        data = {
            "account": ALICE,
            "staked_amount": 0,
            "last_checkpoint": 0,
            "time_weighted_score": 0,
            "rewards_earned": 0,
            "current_tier": 0,
            "initialized": False,
            "token_id": None,
        }
        data.update(overrides)
        return StakerAccount(**data)

    return _make


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    """Session maker bound to the test engine."""
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def ledger(session_maker, clock):
    """Bootstrapped ledger with default tiers and bounties."""
    ledger = IncentiveLedger(session_maker, clock=clock)
    await ledger.bootstrap(
        owner=OWNER,
        authorized_backend=BACKEND,
        referrer_reward=50 * TOKEN_UNIT,
        referee_reward=25 * TOKEN_UNIT,
    )
    return ledger
