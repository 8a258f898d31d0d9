"""Persisted fanbase state and per-call transactions.

Holds the conceptual key space of the ledger:

    Creators[CreatorId]                     -> Creator
    CreatorIdsForAccount[AccountId]         -> BoundedIndex[CreatorId]
    LaunchTokens[TokenId]                   -> LaunchToken
    LaunchTokenIdsForCreator[CreatorId]     -> BoundedIndex[TokenId]
    Tokens[TokenId]                         -> Token
    TokenIdsForAccount[AccountId]           -> BoundedIndex[TokenId]
    LaunchIssuanceNonce                     -> last launch token id
    IssuanceNonce                           -> last token id

Index maps behave like value queries: a missing key reads as an empty
index, and an index that becomes empty is deleted. transaction() gives
every action all-or-nothing semantics by journaling the prior value of
each key a call touches and putting those values back on failure.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator

from ..config import get_validated_config
from ..config_schema import LimitsConfig
from .bounded import BoundedIndex
from .types import AccountId, Creator, CreatorId, LaunchToken, Token, TokenId

logger = logging.getLogger(__name__)

# Journal marker for a key that did not exist before the transaction
_MISSING = object()
_NONCES = "nonces"


@dataclass
class _State:
    creators: dict[CreatorId, Creator] = field(default_factory=dict)
    creator_ids_for_account: dict[AccountId, BoundedIndex[CreatorId]] = field(default_factory=dict)
    launch_tokens: dict[TokenId, LaunchToken] = field(default_factory=dict)
    launch_token_ids_for_creator: dict[CreatorId, BoundedIndex[TokenId]] = field(default_factory=dict)
    tokens: dict[TokenId, Token] = field(default_factory=dict)
    token_ids_for_account: dict[AccountId, BoundedIndex[TokenId]] = field(default_factory=dict)
    launch_issuance_nonce: TokenId = 0
    issuance_nonce: TokenId = 0


class FanbaseStorage:
    """In-memory fanbase state with journaled transactions.

    Records and indices handed out inside a transaction are live objects
    that callers mutate in place, so every accessor journals its key before
    returning. Rollback cost is proportional to the keys a call touched.

    Thread-safety: not thread-safe. The host runs one call to completion
    before starting the next.
    """

    limits: LimitsConfig
    _state: _State
    _journal: dict[tuple[str, Hashable], Any] | None

    def __init__(self, limits: LimitsConfig | None = None) -> None:
        self.limits = limits or get_validated_config().fanbase.limits
        self._state = _State()
        self._journal = None

    # ===== TRANSACTIONS =====

    @contextmanager
    def transaction(self) -> Iterator[FanbaseStorage]:
        """Run a block with all-or-nothing semantics.

        On any exception every key written inside the block gets its prior
        value back and the exception propagates. Nested blocks join the
        outer one.
        """
        if self._journal is not None:
            yield self
            return
        self._journal = {}
        try:
            yield self
        except BaseException:
            restored = self._undo(self._journal)
            logger.debug("Transaction rolled back (%d keys restored)", restored)
            raise
        finally:
            self._journal = None

    def journaled_keys(self) -> list[tuple[str, Hashable]]:
        """Keys recorded by the open transaction, in first-touch order."""
        return list(self._journal) if self._journal is not None else []

    def _touch(self, table: str, key: Hashable) -> None:
        """Record the prior value of table[key] once per transaction."""
        if self._journal is None or (table, key) in self._journal:
            return
        current = getattr(self._state, table).get(key, _MISSING)
        self._journal[(table, key)] = current if current is _MISSING else copy.deepcopy(current)

    def _touch_nonce(self, name: str) -> None:
        if self._journal is None or (_NONCES, name) in self._journal:
            return
        self._journal[(_NONCES, name)] = getattr(self._state, name)

    def _undo(self, journal: dict[tuple[str, Hashable], Any]) -> int:
        for (table, key), prior in journal.items():
            if table == _NONCES:
                setattr(self._state, str(key), prior)
                continue
            values = getattr(self._state, table)
            if prior is _MISSING:
                values.pop(key, None)
            else:
                values[key] = prior
        return len(journal)

    def _index(self, table: str, key: Hashable, bound: int) -> BoundedIndex[Any]:
        self._touch(table, key)
        values = getattr(self._state, table)
        index = values.get(key)
        if index is None:
            index = BoundedIndex(bound)
            values[key] = index
        return index

    def _remove_from_index(self, table: str, key: Hashable, item: Any) -> bool:
        values = getattr(self._state, table)
        index = values.get(key)
        if index is None or item not in index:
            return False
        self._touch(table, key)
        index.swap_remove(item)
        if not index:
            del values[key]
        return True

    # ===== CREATORS =====

    def get_creator(self, creator_id: CreatorId) -> Creator | None:
        self._touch("creators", creator_id)
        return self._state.creators.get(creator_id)

    def insert_creator(self, creator: Creator) -> None:
        self._touch("creators", creator.id)
        self._state.creators[creator.id] = creator

    def remove_creator(self, creator_id: CreatorId) -> None:
        self._touch("creators", creator_id)
        self._state.creators.pop(creator_id, None)

    def creator_ids_for_account(self, account: AccountId) -> BoundedIndex[CreatorId]:
        """Mutable index of creator ids owned by account (created on demand)."""
        return self._index("creator_ids_for_account", account, self.limits.max_creator_accounts)

    def remove_creator_id(self, account: AccountId, creator_id: CreatorId) -> bool:
        """Swap-remove creator_id from account's index, dropping the index once empty."""
        return self._remove_from_index("creator_ids_for_account", account, creator_id)

    # ===== LAUNCH TOKENS =====

    def get_launch_token(self, launch_token_id: TokenId) -> LaunchToken | None:
        self._touch("launch_tokens", launch_token_id)
        return self._state.launch_tokens.get(launch_token_id)

    def insert_launch_token(self, launch_token: LaunchToken) -> None:
        self._touch("launch_tokens", launch_token.id)
        self._state.launch_tokens[launch_token.id] = launch_token

    def launch_token_ids_for_creator(self, creator_id: CreatorId) -> BoundedIndex[TokenId]:
        """Mutable index of launch token ids minted by creator (created on demand)."""
        return self._index(
            "launch_token_ids_for_creator", creator_id, self.limits.max_launch_tokens
        )

    def count_launch_tokens_for_creator(self, creator_id: CreatorId) -> int:
        index = self._state.launch_token_ids_for_creator.get(creator_id)
        return len(index) if index is not None else 0

    # ===== TOKENS =====

    def get_token(self, token_id: TokenId) -> Token | None:
        self._touch("tokens", token_id)
        return self._state.tokens.get(token_id)

    def insert_token(self, token: Token) -> None:
        self._touch("tokens", token.id)
        self._state.tokens[token.id] = token

    def remove_token(self, token_id: TokenId) -> None:
        self._touch("tokens", token_id)
        self._state.tokens.pop(token_id, None)

    def token_ids_for_account(self, account: AccountId) -> BoundedIndex[TokenId]:
        """Mutable index of token ids owned by account (created on demand)."""
        return self._index("token_ids_for_account", account, self.limits.max_tokens)

    def remove_token_id(self, account: AccountId, token_id: TokenId) -> bool:
        """Swap-remove token_id from account's index, dropping the index once empty."""
        return self._remove_from_index("token_ids_for_account", account, token_id)

    # ===== NONCES =====

    @property
    def launch_issuance_nonce(self) -> TokenId:
        return self._state.launch_issuance_nonce

    @launch_issuance_nonce.setter
    def launch_issuance_nonce(self, value: TokenId) -> None:
        self._touch_nonce("launch_issuance_nonce")
        self._state.launch_issuance_nonce = value

    @property
    def issuance_nonce(self) -> TokenId:
        return self._state.issuance_nonce

    @issuance_nonce.setter
    def issuance_nonce(self, value: TokenId) -> None:
        self._touch_nonce("issuance_nonce")
        self._state.issuance_nonce = value

    # ===== READ-ONLY VIEWS =====

    def read_creator_ids(self, account: AccountId) -> list[CreatorId]:
        index = self._state.creator_ids_for_account.get(account)
        return index.to_list() if index is not None else []

    def read_launch_token_ids(self, creator_id: CreatorId) -> list[TokenId]:
        index = self._state.launch_token_ids_for_creator.get(creator_id)
        return index.to_list() if index is not None else []

    def read_token_ids(self, account: AccountId) -> list[TokenId]:
        index = self._state.token_ids_for_account.get(account)
        return index.to_list() if index is not None else []

    def stats(self) -> dict[str, Any]:
        """Record counts, for logging and diagnostics."""
        return {
            "creators": len(self._state.creators),
            "launch_tokens": len(self._state.launch_tokens),
            "tokens": len(self._state.tokens),
            "creator_indices": len(self._state.creator_ids_for_account),
            "token_indices": len(self._state.token_ids_for_account),
            "launch_issuance_nonce": self._state.launch_issuance_nonce,
            "issuance_nonce": self._state.issuance_nonce,
        }
