"""Launch token store - mintable templates and first-hand issuance.

Storage order for every write: validate, reserve id, update bounded
indices, insert records, commit the counter. A failure before the commit
leaves the counter untouched.
"""

from __future__ import annotations

import logging

from .bounded import IndexFullError
from .creators import CreatorRegistry
from .errors import ErrorCode, FanbaseError
from .id_registry import IssuanceRegistry
from .storage import FanbaseStorage
from .types import (
    AccountId,
    Balance,
    CreatorId,
    LaunchToken,
    LaunchTokenMetadata,
    Token,
    TokenId,
)

logger = logging.getLogger(__name__)


class LaunchTokenStore:
    """Holds launch tokens keyed by id and issues tokens from them.

    Methods here are unchecked: callers must have verified authority
    (see Marketplace).
    """

    storage: FanbaseStorage
    ids: IssuanceRegistry
    creators: CreatorRegistry

    def __init__(
        self,
        storage: FanbaseStorage,
        ids: IssuanceRegistry,
        creators: CreatorRegistry,
    ) -> None:
        self.storage = storage
        self.ids = ids
        self.creators = creators

    def get(self, launch_token_id: TokenId) -> LaunchToken | None:
        return self.storage.get_launch_token(launch_token_id)

    def require(self, launch_token_id: TokenId) -> LaunchToken:
        """Return the launch token or raise TOKEN_NOT_FOUND."""
        launch_token = self.storage.get_launch_token(launch_token_id)
        if launch_token is None:
            raise FanbaseError(
                ErrorCode.TOKEN_NOT_FOUND,
                f"Launch token {launch_token_id} not found",
                launch_token_id=launch_token_id,
            )
        return launch_token

    def mint(
        self,
        creator_id: CreatorId,
        price: Balance,
        metadata: LaunchTokenMetadata,
    ) -> TokenId:
        """Create a launch token for creator_id.

        Returns:
            The new launch token id

        Raises:
            FanbaseError: ZERO_SUPPLY, LAUNCH_TOKENS_OVERFLOW or
                MAX_LAUNCH_TOKENS_REACHED
        """
        if metadata.supply == 0:
            raise FanbaseError(ErrorCode.ZERO_SUPPLY, "Cannot mint a launch token with zero supply")

        launch_token_id = self.ids.next_launch_id()

        try:
            self.storage.launch_token_ids_for_creator(creator_id).try_push(launch_token_id)
        except IndexFullError as e:
            raise FanbaseError(
                ErrorCode.MAX_LAUNCH_TOKENS_REACHED,
                f"Creator '{creator_id}' already has {e.bound} launch tokens",
                creator_id=creator_id,
                limit=e.bound,
            ) from e

        self.storage.insert_launch_token(
            LaunchToken.new(launch_token_id, creator_id, price, metadata)
        )
        self.ids.commit_launch_id(launch_token_id)
        logger.debug(
            "Launch token %d minted by %s (supply=%d, price=%d)",
            launch_token_id, creator_id, metadata.supply, price,
        )
        return launch_token_id

    def issue_one(self, launch_token_id: TokenId, receiver: AccountId) -> TokenId:
        """Issue a new token from a launch token to receiver.

        Returns:
            The new token id

        Raises:
            FanbaseError: TOKEN_NOT_FOUND, TOKEN_SOLD_OUT, TOKENS_OVERFLOW or
                MAX_TOKENS_REACHED
        """
        launch_token = self.require(launch_token_id)
        if launch_token.is_sold_out():
            raise FanbaseError(
                ErrorCode.TOKEN_SOLD_OUT,
                f"Launch token {launch_token_id} is sold out "
                f"({launch_token.issued}/{launch_token.total_supply()} issued)",
                launch_token_id=launch_token_id,
            )

        token_id = self.ids.next_token_id()

        try:
            self.storage.token_ids_for_account(receiver).try_push(token_id)
        except IndexFullError as e:
            raise FanbaseError(
                ErrorCode.MAX_TOKENS_REACHED,
                f"Account '{receiver}' already holds {e.bound} tokens",
                account=receiver,
                limit=e.bound,
            ) from e

        self.storage.insert_token(Token.new(receiver, token_id, launch_token))
        launch_token.bump_issued()
        self.ids.commit_token_id(token_id)
        logger.debug("Token %d issued from launch token %d to %s", token_id, launch_token_id, receiver)
        return token_id

    def set_price(self, launch_token_id: TokenId, price: Balance) -> None:
        """Overwrite the launch price. Raises TOKEN_NOT_FOUND if absent."""
        self.require(launch_token_id).price = price

    def owner_of(self, launch_token_id: TokenId) -> AccountId | None:
        """Account owning the launch token's creator.

        None if the launch token is absent or its creator is disconnected.
        """
        launch_token = self.storage.get_launch_token(launch_token_id)
        if launch_token is None:
            return None
        return self.creators.owner_of(launch_token.creator)

    def ensure_creator_owns(self, creator_id: CreatorId, launch_token_id: TokenId) -> None:
        """Raise NOT_OWNER unless launch_token_id was minted by creator_id."""
        launch_token = self.storage.get_launch_token(launch_token_id)
        if launch_token is None or launch_token.creator != creator_id:
            raise FanbaseError(
                ErrorCode.NOT_OWNER,
                f"Creator '{creator_id}' does not own launch token {launch_token_id}",
                creator_id=creator_id,
                launch_token_id=launch_token_id,
            )
