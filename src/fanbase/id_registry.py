"""Issuance counters - monotonic id generation for launch tokens and tokens.

Launch tokens and tokens draw from two separate counters, since they live
in distinct tables. Each counter stores the last id it handed out; the
next id is previous + 1.

Ids are reserved, not committed: peek the next id, perform every insert
that depends on it, and only then commit. A call that fails between the
two never advances the counter.

Usage:
    registry = IssuanceRegistry(storage)
    launch_id = registry.next_launch_id()     # raises on overflow
    ...insert records under launch_id...
    registry.commit_launch_id(launch_id)
"""

from __future__ import annotations

from .errors import ErrorCode, FanbaseError
from .storage import FanbaseStorage
from .types import MAX_TOKEN_ID, TokenId


def checked_increment(previous: TokenId, maximum: TokenId, code: ErrorCode) -> TokenId:
    """Return previous + 1, raising FanbaseError(code) when maximum is reached."""
    if previous >= maximum:
        raise FanbaseError(code, f"Id counter exhausted at {previous}", counter=previous)
    return previous + 1


class IssuanceRegistry:
    """Generates strictly increasing launch token and token ids.

    Thread-safety: This class is NOT thread-safe. The host executes calls
    sequentially.
    """

    storage: FanbaseStorage
    max_id: TokenId

    def __init__(self, storage: FanbaseStorage, max_id: TokenId = MAX_TOKEN_ID) -> None:
        self.storage = storage
        self.max_id = max_id

    def next_launch_id(self) -> TokenId:
        """Next launch token id without advancing the counter.

        Raises:
            FanbaseError: LAUNCH_TOKENS_OVERFLOW if the counter is saturated
        """
        return checked_increment(
            self.storage.launch_issuance_nonce, self.max_id, ErrorCode.LAUNCH_TOKENS_OVERFLOW
        )

    def next_token_id(self) -> TokenId:
        """Next token id without advancing the counter.

        Raises:
            FanbaseError: TOKENS_OVERFLOW if the counter is saturated
        """
        return checked_increment(
            self.storage.issuance_nonce, self.max_id, ErrorCode.TOKENS_OVERFLOW
        )

    def commit_launch_id(self, launch_token_id: TokenId) -> None:
        """Record launch_token_id as the last issued launch token id."""
        assert launch_token_id == self.storage.launch_issuance_nonce + 1, (
            f"launch id {launch_token_id} does not follow nonce "
            f"{self.storage.launch_issuance_nonce}"
        )
        self.storage.launch_issuance_nonce = launch_token_id

    def commit_token_id(self, token_id: TokenId) -> None:
        """Record token_id as the last issued token id."""
        assert token_id == self.storage.issuance_nonce + 1, (
            f"token id {token_id} does not follow nonce {self.storage.issuance_nonce}"
        )
        self.storage.issuance_nonce = token_id
