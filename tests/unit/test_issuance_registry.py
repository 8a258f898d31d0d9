"""Unit tests for IssuanceRegistry - monotonic id counters."""

import pytest

from src.fanbase.errors import ErrorCode, FanbaseError
from src.fanbase.id_registry import IssuanceRegistry, checked_increment
from src.fanbase.storage import FanbaseStorage
from src.fanbase.types import MAX_TOKEN_ID


class TestCheckedIncrement:
    """Tests for the overflow-checked increment."""

    def test_increments(self) -> None:
        assert checked_increment(0, 10, ErrorCode.TOKENS_OVERFLOW) == 1
        assert checked_increment(9, 10, ErrorCode.TOKENS_OVERFLOW) == 10

    def test_overflow(self) -> None:
        """At the maximum the counter cannot advance."""
        with pytest.raises(FanbaseError) as exc_info:
            checked_increment(10, 10, ErrorCode.LAUNCH_TOKENS_OVERFLOW)
        assert exc_info.value.code == ErrorCode.LAUNCH_TOKENS_OVERFLOW


class TestIssuanceRegistry:
    """Tests for reserve-then-commit id generation."""

    def test_next_ids_start_at_one(self, storage: FanbaseStorage) -> None:
        registry = IssuanceRegistry(storage)

        assert registry.next_launch_id() == 1
        assert registry.next_token_id() == 1

    def test_peek_does_not_advance(self, storage: FanbaseStorage) -> None:
        """Reserving an id twice without committing yields the same id."""
        registry = IssuanceRegistry(storage)

        assert registry.next_launch_id() == registry.next_launch_id()
        assert storage.launch_issuance_nonce == 0

    def test_commit_advances(self, storage: FanbaseStorage) -> None:
        registry = IssuanceRegistry(storage)
        launch_id = registry.next_launch_id()
        registry.commit_launch_id(launch_id)

        assert storage.launch_issuance_nonce == 1
        assert registry.next_launch_id() == 2

    def test_counters_are_separate(self, storage: FanbaseStorage) -> None:
        """Launch token and token ids come from independent counters."""
        registry = IssuanceRegistry(storage)
        registry.commit_launch_id(registry.next_launch_id())
        registry.commit_launch_id(registry.next_launch_id())

        assert registry.next_token_id() == 1
        assert registry.next_launch_id() == 3

    def test_commit_out_of_order_is_an_invariant_breach(self, storage: FanbaseStorage) -> None:
        registry = IssuanceRegistry(storage)

        with pytest.raises(AssertionError):
            registry.commit_token_id(5)

    def test_overflow_at_max(self, storage: FanbaseStorage) -> None:
        """A saturated counter reports its own overflow code."""
        storage.launch_issuance_nonce = MAX_TOKEN_ID
        storage.issuance_nonce = MAX_TOKEN_ID
        registry = IssuanceRegistry(storage)

        with pytest.raises(FanbaseError) as launch_exc:
            registry.next_launch_id()
        with pytest.raises(FanbaseError) as token_exc:
            registry.next_token_id()

        assert launch_exc.value.code == ErrorCode.LAUNCH_TOKENS_OVERFLOW
        assert token_exc.value.code == ErrorCode.TOKENS_OVERFLOW
