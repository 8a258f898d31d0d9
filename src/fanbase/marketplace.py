"""Fanbase marketplace - the externally callable creator and token actions.

Every action follows the same shape:
1. Validate arguments
2. Existence check, then ownership check, then state-specific checks
3. Mutate through the registry/store/ledger components
4. Move funds last (paid actions only)
5. Deposit exactly one event once the call has committed

Each action runs inside one storage transaction. A failure at any step
discards every mutation of that call and comes back as an error value:

    result = market.list("alice_acct", token_id, 100)
    if not result["success"]:
        print(result["code"])   # e.g. "token_already_listed"
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Callable, TypedDict

from ..config import get_validated_config
from ..config_schema import FanbaseConfig, MethodConfig
from .creators import CreatorRegistry
from .errors import ErrorCode, FanbaseError, error_response
from .events import EventSink, FanbaseEvent
from .id_registry import IssuanceRegistry
from .launch_tokens import LaunchTokenStore
from .ledger import Currency, Ledger
from .logger import MemoryEventLog
from .storage import FanbaseStorage
from .tokens import TokenLedger
from .types import (
    AccountId,
    Balance,
    Creator,
    CreatorId,
    LaunchToken,
    LaunchTokenMetadata,
    Token,
    TokenId,
    validate_account_id,
    validate_amount,
    validate_creator_id,
    validate_token_id,
)

logger = logging.getLogger(__name__)

ActionResult = dict[str, Any]


class MethodInfo(TypedDict):
    """Information about a marketplace method for listing."""
    name: str
    weight: int
    description: str


@dataclass
class MarketplaceMethod:
    """A method exposed through Marketplace.invoke"""
    name: str
    handler: Callable[..., ActionResult]
    arity: int  # positional args after the caller
    weight: int
    description: str


class Marketplace:
    """
    Creator and token marketplace over a FanbaseStorage.

    Composes the creator registry, launch token store and token ledger,
    performing authorization before delegating. Funds move through the
    Currency collaborator; events go to the EventSink.

    Method weights and descriptions are configurable via config.yaml.
    """

    storage: FanbaseStorage
    currency: Currency
    events: EventSink
    ids: IssuanceRegistry
    creators: CreatorRegistry
    launch_tokens: LaunchTokenStore
    tokens: TokenLedger
    methods: dict[str, MarketplaceMethod]

    def __init__(
        self,
        storage: FanbaseStorage | None = None,
        currency: Currency | None = None,
        event_sink: EventSink | None = None,
        fanbase_config: FanbaseConfig | None = None,
    ) -> None:
        """
        Args:
            storage: State to operate on (fresh storage if not provided)
            currency: Funds collaborator (Ledger from config if not provided)
            event_sink: Where events go (in-memory log if not provided)
            fanbase_config: Optional fanbase config (uses global if not provided)
        """
        cfg = fanbase_config or get_validated_config().fanbase

        self.storage = storage or FanbaseStorage(cfg.limits)
        self.currency = currency if currency is not None else Ledger.from_config()
        self.events = event_sink if event_sink is not None else MemoryEventLog()

        self.ids = IssuanceRegistry(self.storage)
        self.creators = CreatorRegistry(self.storage)
        self.launch_tokens = LaunchTokenStore(self.storage, self.ids, self.creators)
        self.tokens = TokenLedger(self.storage)

        self.methods = {}
        method_cfg = cfg.methods
        self.register_method("create_account", self.create_account, 1, method_cfg.create_account)
        self.register_method("drop_account", self.drop_account, 1, method_cfg.drop_account)
        self.register_method("mint", self.mint, 3, method_cfg.mint)
        self.register_method("launch_gift", self.launch_gift, 3, method_cfg.launch_gift)
        self.register_method("launch_buy", self.launch_buy, 2, method_cfg.launch_buy)
        self.register_method("buy", self.buy, 2, method_cfg.buy)
        self.register_method("transfer", self.transfer, 1, method_cfg.transfer)
        self.register_method("list", self.list, 2, method_cfg.list)
        self.register_method("unlist", self.unlist, 1, method_cfg.unlist)
        self.register_method("set_launch_price", self.set_launch_price, 3, method_cfg.set_launch_price)
        self.register_method("set_price", self.set_price, 2, method_cfg.set_price)
        self.register_method("burn", self.burn, 1, method_cfg.burn)

    # ===== DISPATCH =====

    def register_method(
        self,
        name: str,
        handler: Callable[..., ActionResult],
        arity: int,
        method_config: MethodConfig,
    ) -> None:
        """Register a callable action on this marketplace"""
        self.methods[name] = MarketplaceMethod(
            name=name,
            handler=handler,
            arity=arity,
            weight=method_config.weight,
            description=method_config.description,
        )

    def get_method(self, method_name: str) -> MarketplaceMethod | None:
        """Get a method by name"""
        return self.methods.get(method_name)

    def list_methods(self) -> list[MethodInfo]:
        """List available methods"""
        return [
            {"name": m.name, "weight": m.weight, "description": m.description}
            for m in self.methods.values()
        ]

    def invoke(self, method_name: str, args: list[Any], caller: AccountId) -> ActionResult:
        """Dispatch an action by name, as the host's call surface does.

        Args:
            method_name: Registered action name (e.g. "buy")
            args: Positional arguments after the caller
            caller: Authenticated account making the call
        """
        method = self.methods.get(method_name)
        if method is None:
            return error_response(
                ErrorCode.INVALID_ARGUMENT,
                f"Unknown method '{method_name}'",
                available=sorted(self.methods),
            )
        if not isinstance(args, (list, tuple)):
            return error_response(
                ErrorCode.INVALID_ARGUMENT,
                f"{method_name} args must be a list, got {type(args).__name__}",
                method=method_name,
            )
        if len(args) != method.arity:
            return error_response(
                ErrorCode.INVALID_ARGUMENT,
                f"{method_name} takes {method.arity} args, got {len(args)}. {method.description}",
                method=method_name,
            )
        return method.handler(caller, *args)

    def _execute(
        self,
        method: str,
        caller: AccountId,
        event: FanbaseEvent,
        body: Callable[[], dict[str, Any]],
    ) -> ActionResult:
        """Run body in a transaction, convert failures to values, deposit the event."""
        try:
            with self.storage.transaction():
                data = body()
        except FanbaseError as e:
            logger.info("%s by %s rejected: %s (%s)", method, caller, e.code.value, e.message)
            return e.to_dict()

        self.events.log(event.value, {"method": method, "caller": caller, **data})
        logger.debug("%s by %s succeeded: %s", method, caller, data)
        return {"success": True, **data}

    # ===== CREATOR ACCOUNTS =====

    def create_account(self, caller: AccountId, creator_id: CreatorId) -> ActionResult:
        """Create a new creator account owned by caller."""

        def body() -> dict[str, Any]:
            self.creators.create(creator_id, caller)
            return {"creator_id": creator_id}

        return self._execute("create_account", caller, FanbaseEvent.NEW_CREATOR, body)

    def drop_account(self, caller: AccountId, creator_id: CreatorId) -> ActionResult:
        """Drop a creator account.

        Keeps the creator record (disconnected) if it has minted launch tokens.
        """

        def body() -> dict[str, Any]:
            validate_creator_id(creator_id)
            removed = self.creators.disconnect_or_remove(creator_id, caller)
            return {"creator_id": creator_id, "removed": removed}

        return self._execute("drop_account", caller, FanbaseEvent.DROPPED_CREATOR, body)

    # ===== LAUNCH TOKENS =====

    def mint(
        self,
        caller: AccountId,
        creator_id: CreatorId,
        price: Balance,
        metadata: LaunchTokenMetadata | dict[str, Any],
    ) -> ActionResult:
        """Create a new launch token for a creator the caller owns.

        Args: creator_id, price, metadata (LaunchTokenMetadata or a dict with
        name, mime_type, metadata_uri, supply)
        """

        def body() -> dict[str, Any]:
            validate_creator_id(creator_id)
            validate_amount("price", price)
            meta = (
                metadata if isinstance(metadata, LaunchTokenMetadata)
                else LaunchTokenMetadata.from_dict(metadata)
            )
            self.creators.ensure_owner(caller, creator_id)
            launch_token_id = self.launch_tokens.mint(creator_id, price, meta)
            return {
                "creator_id": creator_id,
                "launch_token_id": launch_token_id,
                "price": price,
                "supply": meta.supply,
            }

        return self._execute("mint", caller, FanbaseEvent.TOKEN_CREATED, body)

    def launch_gift(
        self,
        caller: AccountId,
        creator_id: CreatorId,
        launch_token_id: TokenId,
        receiver: AccountId,
    ) -> ActionResult:
        """Gift a token to receiver first hand, free of charge."""

        def body() -> dict[str, Any]:
            validate_creator_id(creator_id)
            validate_token_id("launch_token_id", launch_token_id)
            validate_account_id("receiver", receiver)
            self.launch_tokens.require(launch_token_id)
            self.creators.ensure_owner(caller, creator_id)
            self.launch_tokens.ensure_creator_owns(creator_id, launch_token_id)
            token_id = self.launch_tokens.issue_one(launch_token_id, receiver)
            return {
                "launch_token_id": launch_token_id,
                "token_id": token_id,
                "receiver": receiver,
            }

        return self._execute("launch_gift", caller, FanbaseEvent.TOKEN_INITIAL_COLLECTION, body)

    def launch_buy(
        self,
        caller: AccountId,
        launch_token_id: TokenId,
        bid_price: Balance,
    ) -> ActionResult:
        """Buy a token first hand; the bid goes to the creator's owner."""

        def body() -> dict[str, Any]:
            validate_token_id("launch_token_id", launch_token_id)
            validate_amount("bid_price", bid_price)
            launch_token = self.launch_tokens.require(launch_token_id)

            seller = self.launch_tokens.owner_of(launch_token_id)
            if seller is None:
                raise FanbaseError(
                    ErrorCode.TOKEN_UNAVAILABLE,
                    f"Creator '{launch_token.creator}' of launch token {launch_token_id} "
                    f"is disconnected",
                    launch_token_id=launch_token_id,
                )
            if bid_price < launch_token.price:
                raise FanbaseError(
                    ErrorCode.BID_PRICE_TOO_LOW,
                    f"Bid {bid_price} is below launch price {launch_token.price}",
                    price=launch_token.price,
                )
            self._ensure_can_pay(caller, bid_price)

            token_id = self.launch_tokens.issue_one(launch_token_id, caller)
            self._pay(caller, seller, bid_price)
            return {
                "launch_token_id": launch_token_id,
                "token_id": token_id,
                "price": bid_price,
                "seller": seller,
                "buyer": caller,
            }

        return self._execute("launch_buy", caller, FanbaseEvent.TOKEN_INITIAL_COLLECTION, body)

    def set_launch_price(
        self,
        caller: AccountId,
        creator_id: CreatorId,
        launch_token_id: TokenId,
        price: Balance,
    ) -> ActionResult:
        """Update the first-hand price of a launch token."""

        def body() -> dict[str, Any]:
            validate_creator_id(creator_id)
            validate_token_id("launch_token_id", launch_token_id)
            validate_amount("price", price)
            self.launch_tokens.require(launch_token_id)
            self.creators.ensure_owner(caller, creator_id)
            self.launch_tokens.ensure_creator_owns(creator_id, launch_token_id)
            self.launch_tokens.set_price(launch_token_id, price)
            return {"launch_token_id": launch_token_id, "price": price}

        return self._execute(
            "set_launch_price", caller, FanbaseEvent.TOKEN_LAUNCH_PRICE_UPDATED, body
        )

    # ===== TOKENS =====

    def buy(self, caller: AccountId, token_id: TokenId, bid_price: Balance) -> ActionResult:
        """Buy a listed token; the bid goes to its current owner.

        The listing is cleared once ownership changes.
        """

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            validate_amount("bid_price", bid_price)
            token = self.tokens.require(token_id)
            if token.price is None:
                raise FanbaseError(
                    ErrorCode.TOKEN_NOT_FOR_SALE,
                    f"Token {token_id} is not for sale",
                    token_id=token_id,
                )
            seller = token.owner
            if seller == caller:
                raise FanbaseError(
                    ErrorCode.TRANSFER_TO_SELF,
                    f"Account '{caller}' already owns token {token_id}",
                    token_id=token_id,
                )
            if bid_price < token.price:
                raise FanbaseError(
                    ErrorCode.BID_PRICE_TOO_LOW,
                    f"Bid {bid_price} is below listed price {token.price}",
                    price=token.price,
                )
            self._ensure_can_pay(caller, bid_price)

            self.tokens.transfer(token_id, seller, caller)
            self.tokens.set_price(token_id, None)
            self._pay(caller, seller, bid_price)
            return {
                "token_id": token_id,
                "price": bid_price,
                "seller": seller,
                "buyer": caller,
            }

        return self._execute("buy", caller, FanbaseEvent.TOKEN_TRANSFERRED, body)

    def transfer(self, caller: AccountId, token_id: TokenId) -> ActionResult:
        """Transfer an owned token back to the caller, refreshing its index entry."""

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            self.tokens.require(token_id)
            self.tokens.ensure_owner(caller, token_id)
            self.tokens.transfer(token_id, caller, caller)
            return {"token_id": token_id, "owner": caller}

        return self._execute("transfer", caller, FanbaseEvent.TOKEN_TRANSFERRED, body)

    def list(self, caller: AccountId, token_id: TokenId, price: Balance) -> ActionResult:
        """List an owned token for sale at price."""

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            validate_amount("price", price)
            token = self.tokens.require(token_id)
            self.tokens.ensure_owner(caller, token_id)
            if token.price is not None:
                raise FanbaseError(
                    ErrorCode.TOKEN_ALREADY_LISTED,
                    f"Token {token_id} is already listed at {token.price}",
                    token_id=token_id,
                    price=token.price,
                )
            self.tokens.set_price(token_id, price)
            return {"token_id": token_id, "price": price}

        return self._execute("list", caller, FanbaseEvent.TOKEN_LISTED, body)

    def unlist(self, caller: AccountId, token_id: TokenId) -> ActionResult:
        """Remove an owned token from sale."""

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            self._require_listed(caller, token_id)
            self.tokens.set_price(token_id, None)
            return {"token_id": token_id}

        return self._execute("unlist", caller, FanbaseEvent.TOKEN_UNLISTED, body)

    def set_price(self, caller: AccountId, token_id: TokenId, price: Balance) -> ActionResult:
        """Change the price of an owned, listed token."""

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            validate_amount("price", price)
            self._require_listed(caller, token_id)
            self.tokens.set_price(token_id, price)
            return {"token_id": token_id, "price": price}

        return self._execute("set_price", caller, FanbaseEvent.TOKEN_PRICE_UPDATED, body)

    def burn(self, caller: AccountId, token_id: TokenId) -> ActionResult:
        """Permanently destroy an owned token."""

        def body() -> dict[str, Any]:
            validate_token_id("token_id", token_id)
            token = self.tokens.require(token_id)
            self.tokens.ensure_owner(caller, token_id)
            self.tokens.burn(token_id)
            return {"token_id": token_id, "launch_token_id": token.launch_id}

        return self._execute("burn", caller, FanbaseEvent.TOKEN_DESTROYED, body)

    # ===== HELPERS =====

    def _require_listed(self, caller: AccountId, token_id: TokenId) -> Token:
        token = self.tokens.require(token_id)
        self.tokens.ensure_owner(caller, token_id)
        if token.price is None:
            raise FanbaseError(
                ErrorCode.TOKEN_NOT_LISTED,
                f"Token {token_id} is not listed",
                token_id=token_id,
            )
        return token

    def _ensure_can_pay(self, payer: AccountId, amount: Balance) -> None:
        if not self.currency.can_afford(payer, amount, keep_alive=True):
            raise FanbaseError(
                ErrorCode.INSUFFICIENT_FUNDS,
                f"Insufficient funds. Need {amount}, have {self.currency.free_balance(payer)}",
                required=amount,
            )

    def _pay(self, payer: AccountId, payee: AccountId, amount: Balance) -> None:
        # Affordability was checked before any token-side mutation
        if not self.currency.transfer(payer, payee, amount, keep_alive=True):
            raise FanbaseError(
                ErrorCode.INSUFFICIENT_FUNDS,
                f"Funds transfer of {amount} from '{payer}' to '{payee}' failed",
                required=amount,
            )

    # ===== QUERIES =====

    def creator(self, creator_id: CreatorId) -> Creator | None:
        creator = self.storage.get_creator(creator_id)
        return dataclasses.replace(creator) if creator is not None else None

    def creator_ids_for_account(self, account: AccountId) -> list[CreatorId]:
        return self.storage.read_creator_ids(account)

    def launch_token(self, launch_token_id: TokenId) -> LaunchToken | None:
        launch_token = self.storage.get_launch_token(launch_token_id)
        return dataclasses.replace(launch_token) if launch_token is not None else None

    def launch_token_ids_for_creator(self, creator_id: CreatorId) -> list[TokenId]:
        return self.storage.read_launch_token_ids(creator_id)

    def token(self, token_id: TokenId) -> Token | None:
        token = self.storage.get_token(token_id)
        return dataclasses.replace(token) if token is not None else None

    def token_ids_for_account(self, account: AccountId) -> list[TokenId]:
        return self.storage.read_token_ids(account)

    def launch_issuance_nonce(self) -> TokenId:
        return self.storage.launch_issuance_nonce

    def issuance_nonce(self) -> TokenId:
        return self.storage.issuance_nonce

    def get_token_price(self, token_id: TokenId) -> Balance | None:
        return self.tokens.price_of(token_id)

    def get_launch_token_owner(self, launch_token_id: TokenId) -> AccountId | None:
        return self.launch_tokens.owner_of(launch_token_id)
