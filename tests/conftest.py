"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from simpleswap.api.endpoints import get_engine
from simpleswap.api.main import app
from simpleswap.engine import PoolEngine
from simpleswap.events import PoolEvent
from simpleswap.ledger import InMemoryLedger
from tests.helpers import ONE, FixedClock, make_engine, seed_pool


@pytest.fixture
def clock() -> FixedClock:
    """A clock frozen at NOW; tests move it by assigning ``clock.now``."""
    return FixedClock()


@pytest.fixture
def engine_and_ledgers(clock: FixedClock) -> tuple[PoolEngine, dict[str, InMemoryLedger]]:
    """Engine with the default 0.3% fee and fresh ERX/NINX/THIRD ledgers."""
    return make_engine(clock=clock)


@pytest.fixture
def engine(engine_and_ledgers: tuple[PoolEngine, dict[str, InMemoryLedger]]) -> PoolEngine:
    return engine_and_ledgers[0]


@pytest.fixture
def ledgers(
    engine_and_ledgers: tuple[PoolEngine, dict[str, InMemoryLedger]],
) -> dict[str, InMemoryLedger]:
    return engine_and_ledgers[1]


@pytest.fixture
def no_fee_engine_and_ledgers(clock: FixedClock) -> tuple[PoolEngine, dict[str, InMemoryLedger]]:
    """Engine configured with a zero trading fee."""
    return make_engine(fee_bps=0, clock=clock)


@pytest.fixture
def seeded_engine(engine: PoolEngine) -> PoolEngine:
    """Default-fee engine whose ERX/NINX pool holds 500/500, provided by OWNER."""
    seed_pool(engine, 500 * ONE, 500 * ONE)
    return engine


@pytest.fixture
def events(engine: PoolEngine) -> list[PoolEvent]:
    """Events emitted by the ``engine`` fixture, in order."""
    recorded: list[PoolEvent] = []
    engine.subscribe(recorded.append)
    return recorded


@pytest.fixture
def client(engine: PoolEngine) -> Iterator[TestClient]:
    """Test client serving the ``engine`` fixture."""
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()
