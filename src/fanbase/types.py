"""Fanbase record types.

Creator, LaunchToken (the mintable template) and Token (an issued unit)
are plain dataclasses owned by FanbaseStorage. Byte bounds on names and
URIs are checked at construction so that no oversized value reaches
storage.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, TypedDict

from .errors import ErrorCode, FanbaseError

# Account references are opaque strings supplied by the host
AccountId = str
CreatorId = str
TokenId = int
Balance = int
TokenSupply = int

MAX_CREATOR_ID_BYTES = 63  # domain name label
MAX_TOKEN_NAME_BYTES = 255
MAX_MIME_TYPE_BYTES = 255
MAX_METADATA_URI_BYTES = 2048
MAX_TOKEN_ID = 2**128 - 1
MAX_TOKEN_SUPPLY = 2**32 - 1


def _check_bytes(field_name: str, value: str, limit: int) -> None:
    if not isinstance(value, str):
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} must be a string, got {type(value).__name__}",
            field=field_name,
        )
    size = len(value.encode("utf-8"))
    if size > limit:
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} is {size} bytes, limit is {limit}",
            field=field_name,
            limit=limit,
        )


def validate_creator_id(creator_id: CreatorId) -> None:
    """Reject empty creator ids and ids longer than 63 UTF-8 bytes."""
    _check_bytes("creator_id", creator_id, MAX_CREATOR_ID_BYTES)
    if not creator_id:
        raise FanbaseError(ErrorCode.INVALID_ARGUMENT, "creator_id must not be empty")


def validate_token_id(field_name: str, token_id: TokenId) -> None:
    """Reject ids that are not integers in 0..MAX_TOKEN_ID (bool included)."""
    if isinstance(token_id, bool) or not isinstance(token_id, int):
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} must be an integer, got {type(token_id).__name__}: {token_id!r}",
            field=field_name,
        )
    if not 0 <= token_id <= MAX_TOKEN_ID:
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} {token_id} is outside 0..{MAX_TOKEN_ID}",
            field=field_name,
        )


def validate_account_id(field_name: str, account: AccountId) -> None:
    """Account references are non-empty strings."""
    if not isinstance(account, str) or not account:
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} must be a non-empty string, got {account!r}",
            field=field_name,
        )


def validate_amount(field_name: str, amount: Balance) -> None:
    """Reject non-integer and negative balances."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} must be an integer, got {type(amount).__name__}: {amount!r}",
            field=field_name,
        )
    if amount < 0:
        raise FanbaseError(
            ErrorCode.INVALID_ARGUMENT,
            f"{field_name} must not be negative, got {amount}",
            field=field_name,
        )


@dataclass
class Creator:
    """A named identity that can mint launch tokens.

    owner is None once the creator has been disconnected from its account;
    the id stays reserved while launch tokens reference it.
    """

    id: CreatorId
    owner: AccountId | None

    @classmethod
    def new(cls, creator_id: CreatorId, owner: AccountId) -> Creator:
        return cls(id=creator_id, owner=owner)

    def disconnect(self) -> None:
        """Remove the owning account."""
        self.owner = None


@dataclass(frozen=True)
class LaunchTokenMetadata:
    """Descriptive fields supplied at mint time."""

    name: str
    mime_type: str
    metadata_uri: str
    supply: TokenSupply

    def __post_init__(self) -> None:
        _check_bytes("name", self.name, MAX_TOKEN_NAME_BYTES)
        _check_bytes("mime_type", self.mime_type, MAX_MIME_TYPE_BYTES)
        _check_bytes("metadata_uri", self.metadata_uri, MAX_METADATA_URI_BYTES)
        if isinstance(self.supply, bool) or not isinstance(self.supply, int):
            raise FanbaseError(ErrorCode.INVALID_ARGUMENT, "supply must be an integer")
        if self.supply < 0 or self.supply > MAX_TOKEN_SUPPLY:
            raise FanbaseError(
                ErrorCode.INVALID_ARGUMENT,
                f"supply must be between 0 and {MAX_TOKEN_SUPPLY}, got {self.supply}",
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LaunchTokenMetadata:
        if not isinstance(data, Mapping):
            raise FanbaseError(
                ErrorCode.INVALID_ARGUMENT,
                f"metadata must be a mapping, got {type(data).__name__}",
                field="metadata",
            )
        try:
            return cls(
                name=data["name"],
                mime_type=data["mime_type"],
                metadata_uri=data["metadata_uri"],
                supply=data["supply"],
            )
        except KeyError as e:
            raise FanbaseError(
                ErrorCode.INVALID_ARGUMENT,
                f"metadata is missing field {e.args[0]!r}",
                required=["name", "mime_type", "metadata_uri", "supply"],
            ) from e
        except TypeError as e:
            raise FanbaseError(
                ErrorCode.INVALID_ARGUMENT,
                f"metadata could not be read: {e}",
                field="metadata",
            ) from e


@dataclass
class LaunchToken:
    """A limited-edition template from which tokens are issued.

    Invariant: issued <= total_supply(). Burning an issued token moves one
    unit from supply to destroyed, so total_supply() never grows.
    """

    id: TokenId
    creator: CreatorId
    name: str
    price: Balance
    mime_type: str
    metadata_uri: str
    supply: TokenSupply
    issued: TokenSupply = 0
    destroyed: TokenSupply = 0

    @classmethod
    def new(
        cls,
        token_id: TokenId,
        creator: CreatorId,
        price: Balance,
        metadata: LaunchTokenMetadata,
    ) -> LaunchToken:
        return cls(
            id=token_id,
            creator=creator,
            name=metadata.name,
            price=price,
            mime_type=metadata.mime_type,
            metadata_uri=metadata.metadata_uri,
            supply=metadata.supply,
        )

    def total_supply(self) -> TokenSupply:
        return min(self.supply + self.destroyed, MAX_TOKEN_SUPPLY)

    def is_sold_out(self) -> bool:
        return self.issued >= self.total_supply()

    def bump_issued(self) -> None:
        self.issued = min(self.issued + 1, MAX_TOKEN_SUPPLY)

    def bump_destroyed_and_decrease_supply(self) -> None:
        self.supply = max(self.supply - 1, 0)
        self.destroyed = min(self.destroyed + 1, MAX_TOKEN_SUPPLY)

    def to_dict(self) -> LaunchTokenDict:
        return asdict(self)  # type: ignore[return-value]


@dataclass
class Token:
    """One issued unit of a launch token.

    price is None when the token is not listed for sale.
    """

    id: TokenId
    launch_id: TokenId
    creator: CreatorId
    owner: AccountId
    name: str
    price: Balance | None
    mime_type: str
    metadata_uri: str

    @classmethod
    def new(cls, owner: AccountId, token_id: TokenId, launch_token: LaunchToken) -> Token:
        """Issue a token from a launch token; the listing price starts empty."""
        return cls(
            id=token_id,
            launch_id=launch_token.id,
            creator=launch_token.creator,
            owner=owner,
            name=launch_token.name,
            price=None,
            mime_type=launch_token.mime_type,
            metadata_uri=launch_token.metadata_uri,
        )

    def to_dict(self) -> TokenDict:
        return asdict(self)  # type: ignore[return-value]


class LaunchTokenDict(TypedDict):
    """Serialized launch token."""

    id: int
    creator: str
    name: str
    price: int
    mime_type: str
    metadata_uri: str
    supply: int
    issued: int
    destroyed: int


class TokenDict(TypedDict):
    """Serialized token."""

    id: int
    launch_id: int
    creator: str
    owner: str
    name: str
    price: int | None
    mime_type: str
    metadata_uri: str
