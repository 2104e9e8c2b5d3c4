"""
Pytest fixtures for the poultry ledger test suite.

Provides:
- Structured logging capture
- A deterministic clock and empty / seeded farm states
- In-memory and SQLite-backed state stores
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy.orm import sessionmaker

from poultry_engines import (
    add_flock,
    purchase_feed,
    record_egg_production,
    set_initial_balance,
)
from poultry_kernel.db.engine import build_engine, create_tables
from poultry_kernel.domain.clock import DeterministicClock
from poultry_kernel.domain.records import FarmState, default_state
from poultry_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from poultry_kernel.services.state_store import InMemoryStateStore, SqlStateStore

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture poultry_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            logs = captured_logs()
            assert any(r["message"] == "state_committed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("poultry_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and state fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def empty_state() -> FarmState:
    return default_state(FIXED_NOW)


@pytest.fixture
def seeded_state(empty_state) -> FarmState:
    """
    A small working farm:
    - 50,000 initial balance from the financier
    - one active flock of 1,000 layers
    - 5 Peti + 40 eggs in inventory
    - 20 bags of Layer Mash at 2,000 per bag (balance 10,000)
    """
    state = set_initial_balance(empty_state, amount=Decimal("50000"), now=FIXED_NOW)
    state = add_flock(
        state,
        breed="Lohmann Brown",
        number_of_layers=1000,
        age_weeks=22,
        start_date=date(2024, 1, 1),
    )
    state = record_egg_production(
        state,
        flock_id=state.flocks[0].id,
        production_date=TODAY,
        total_eggs=1900,
        broken_eggs=60,
        now=FIXED_NOW,
    )
    state = purchase_feed(
        state,
        feed_type="Layer Mash",
        bags=20,
        cost_per_bag=Decimal("2000"),
        purchase_date=TODAY,
        now=FIXED_NOW,
    )
    return state


@pytest.fixture
def flock_id(seeded_state):
    return seeded_state.flocks[0].id


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryStateStore:
    return InMemoryStateStore("farm")


@pytest.fixture
def sql_engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine, clock) -> SqlStateStore:
    factory = sessionmaker(bind=sql_engine, expire_on_commit=False)
    return SqlStateStore(factory, document_name="farm", clock=clock)
