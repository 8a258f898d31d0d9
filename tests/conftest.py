"""Pytest fixtures for fanbase tests.

Common fixtures for testing the creator/token ledger and marketplace.
Limits are kept small so capacity edges are cheap to reach.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.config_schema import FanbaseConfig, LimitsConfig
from src.fanbase.ledger import Ledger
from src.fanbase.logger import MemoryEventLog
from src.fanbase.marketplace import Marketplace
from src.fanbase.storage import FanbaseStorage
from src.fanbase.types import LaunchTokenMetadata
from tests.testing_utils import make_metadata


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "feature(name): mark test as belonging to a feature. "
        "Usage: @pytest.mark.feature('marketplace')"
    )


@pytest.fixture
def limits() -> LimitsConfig:
    """Small capacity limits for edge-case tests."""
    return LimitsConfig(max_creator_accounts=2, max_launch_tokens=3, max_tokens=3)


@pytest.fixture
def fanbase_config(limits: LimitsConfig) -> FanbaseConfig:
    """Fanbase config using the small limits."""
    return FanbaseConfig(limits=limits)


@pytest.fixture
def storage(limits: LimitsConfig) -> FanbaseStorage:
    """Create a fresh, empty storage."""
    return FanbaseStorage(limits)


@pytest.fixture
def ledger() -> Ledger:
    """Create a currency Ledger with funded accounts.

    - alice_acct: 1000
    - bob_acct: 500
    - carol_acct: 20
    """
    ledger = Ledger()
    ledger.create_principal("alice_acct", starting_balance=1000)
    ledger.create_principal("bob_acct", starting_balance=500)
    ledger.create_principal("carol_acct", starting_balance=20)
    return ledger


@pytest.fixture
def event_log() -> MemoryEventLog:
    """Create an empty in-memory event sink."""
    return MemoryEventLog()


@pytest.fixture
def market(
    storage: FanbaseStorage,
    ledger: Ledger,
    event_log: MemoryEventLog,
    fanbase_config: FanbaseConfig,
) -> Marketplace:
    """Create a Marketplace wired to the shared fixtures."""
    return Marketplace(
        storage=storage,
        currency=ledger,
        event_sink=event_log,
        fanbase_config=fanbase_config,
    )


@pytest.fixture
def metadata() -> LaunchTokenMetadata:
    """Launch token metadata with a supply of 2."""
    return make_metadata()


@pytest.fixture
def alice_launch(market: Marketplace, metadata: LaunchTokenMetadata) -> int:
    """Creator 'alice' owned by alice_acct with one launch token (supply 2, price 10).

    Returns:
        The launch token id
    """
    assert market.create_account("alice_acct", "alice")["success"]
    result: dict[str, Any] = market.mint("alice_acct", "alice", 10, metadata)
    assert result["success"], result
    return int(result["launch_token_id"])
