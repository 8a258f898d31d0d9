"""Creator registry - creator accounts and the creator ids each account owns."""

from __future__ import annotations

import logging

from .bounded import IndexFullError
from .errors import ErrorCode, FanbaseError
from .storage import FanbaseStorage
from .types import AccountId, Creator, CreatorId, validate_creator_id

logger = logging.getLogger(__name__)


class CreatorRegistry:
    """Creates, looks up and drops creator accounts.

    A dropped creator that still has launch tokens is disconnected rather
    than removed, so templates never point at a missing creator.
    """

    storage: FanbaseStorage

    def __init__(self, storage: FanbaseStorage) -> None:
        self.storage = storage

    def create(self, creator_id: CreatorId, owner: AccountId) -> Creator:
        """Register creator_id under owner.

        Raises:
            FanbaseError: CREATOR_ACCOUNT_TAKEN if the id exists,
                MAX_CREATOR_ACCOUNTS_REACHED if owner's index is full
        """
        validate_creator_id(creator_id)
        if self.storage.get_creator(creator_id) is not None:
            raise FanbaseError(
                ErrorCode.CREATOR_ACCOUNT_TAKEN,
                f"Creator account '{creator_id}' is already taken",
                creator_id=creator_id,
            )

        try:
            self.storage.creator_ids_for_account(owner).try_push(creator_id)
        except IndexFullError as e:
            raise FanbaseError(
                ErrorCode.MAX_CREATOR_ACCOUNTS_REACHED,
                f"Account '{owner}' already holds {e.bound} creator accounts",
                account=owner,
                limit=e.bound,
            ) from e

        creator = Creator.new(creator_id, owner)
        self.storage.insert_creator(creator)
        logger.debug("Creator %s registered to %s", creator_id, owner)
        return creator

    def disconnect_or_remove(self, creator_id: CreatorId, owner: AccountId) -> bool:
        """Drop creator_id from owner.

        Removes the creator permanently when no launch token references it,
        otherwise only clears its owner.

        Returns:
            True if the record was removed, False if it was disconnected

        Raises:
            FanbaseError: NOT_OWNER unless owner currently owns creator_id
        """
        self.ensure_owner(owner, creator_id)

        removed = self.storage.count_launch_tokens_for_creator(creator_id) == 0
        if removed:
            self.storage.remove_creator(creator_id)
        else:
            creator = self.storage.get_creator(creator_id)
            # ensure_owner above guarantees the record exists
            assert creator is not None, f"creator {creator_id} vanished after ownership check"
            creator.disconnect()

        self.storage.remove_creator_id(owner, creator_id)
        logger.debug(
            "Creator %s %s from %s", creator_id, "removed" if removed else "disconnected", owner
        )
        return removed

    def get(self, creator_id: CreatorId) -> Creator | None:
        return self.storage.get_creator(creator_id)

    def owner_of(self, creator_id: CreatorId) -> AccountId | None:
        """Current owning account, or None if absent or disconnected."""
        creator = self.storage.get_creator(creator_id)
        return creator.owner if creator is not None else None

    def ensure_owner(self, account: AccountId, creator_id: CreatorId) -> None:
        """Raise NOT_OWNER unless account owns creator_id."""
        if account is None or self.owner_of(creator_id) != account:
            raise FanbaseError(
                ErrorCode.NOT_OWNER,
                f"Account '{account}' does not own creator '{creator_id}'",
                creator_id=creator_id,
            )
