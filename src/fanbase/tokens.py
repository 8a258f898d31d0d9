"""Token ledger - ownership, pricing and destruction of issued tokens."""

from __future__ import annotations

import logging

from .bounded import IndexFullError
from .errors import ErrorCode, FanbaseError
from .storage import FanbaseStorage
from .types import AccountId, Balance, Token, TokenId

logger = logging.getLogger(__name__)


class TokenLedger:
    """Tokens keyed by id plus the bounded token index of each account.

    Methods here are unchecked: callers must have verified authority.
    """

    storage: FanbaseStorage

    def __init__(self, storage: FanbaseStorage) -> None:
        self.storage = storage

    def get(self, token_id: TokenId) -> Token | None:
        return self.storage.get_token(token_id)

    def require(self, token_id: TokenId) -> Token:
        """Return the token or raise TOKEN_NOT_FOUND."""
        token = self.storage.get_token(token_id)
        if token is None:
            raise FanbaseError(
                ErrorCode.TOKEN_NOT_FOUND,
                f"Token {token_id} not found",
                token_id=token_id,
            )
        return token

    def transfer(self, token_id: TokenId, owner: AccountId, receiver: AccountId) -> None:
        """Move token_id from owner's index to receiver's.

        The receiver entry is added before the owner entry is removed, so a
        full receiver index fails without losing the token reference.

        Raises:
            FanbaseError: TOKEN_NOT_FOUND or MAX_TOKENS_REACHED
        """
        token = self.require(token_id)

        try:
            self.storage.token_ids_for_account(receiver).try_push(token_id)
        except IndexFullError as e:
            raise FanbaseError(
                ErrorCode.MAX_TOKENS_REACHED,
                f"Account '{receiver}' already holds {e.bound} tokens",
                account=receiver,
                limit=e.bound,
            ) from e

        self.storage.remove_token_id(owner, token_id)
        token.owner = receiver
        logger.debug("Token %d transferred %s -> %s", token_id, owner, receiver)

    def set_price(self, token_id: TokenId, price: Balance | None) -> None:
        """Overwrite the listing price; None unlists. Raises TOKEN_NOT_FOUND."""
        self.require(token_id).price = price

    def burn(self, token_id: TokenId) -> None:
        """Destroy token_id and shrink its launch token's remaining supply.

        Raises:
            FanbaseError: TOKEN_NOT_FOUND
        """
        token = self.require(token_id)
        launch_token = self.storage.get_launch_token(token.launch_id)
        # Launch tokens are never deleted, so an issued token's origin exists
        assert launch_token is not None, (
            f"token {token_id} references missing launch token {token.launch_id}"
        )

        self.storage.remove_token_id(token.owner, token_id)
        self.storage.remove_token(token_id)
        launch_token.bump_destroyed_and_decrease_supply()
        logger.debug("Token %d burned (launch token %d)", token_id, token.launch_id)

    def owner_of(self, token_id: TokenId) -> AccountId | None:
        token = self.storage.get_token(token_id)
        return token.owner if token is not None else None

    def price_of(self, token_id: TokenId) -> Balance | None:
        """Listing price, or None if the token is absent or unlisted."""
        token = self.storage.get_token(token_id)
        return token.price if token is not None else None

    def ensure_owner(self, account: AccountId, token_id: TokenId) -> None:
        """Raise NOT_OWNER unless account owns token_id."""
        if self.owner_of(token_id) != account:
            raise FanbaseError(
                ErrorCode.NOT_OWNER,
                f"Account '{account}' does not own token {token_id}",
                token_id=token_id,
            )
