"""Events deposited by marketplace actions."""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol


class FanbaseEvent(str, Enum):
    """One event per completed action."""

    NEW_CREATOR = "NewCreator"
    DROPPED_CREATOR = "DroppedCreator"
    TOKEN_CREATED = "TokenCreated"
    TOKEN_INITIAL_COLLECTION = "TokenInitialCollection"
    TOKEN_TRANSFERRED = "TokenTransferred"
    TOKEN_LISTED = "TokenListed"
    TOKEN_UNLISTED = "TokenUnlisted"
    TOKEN_LAUNCH_PRICE_UPDATED = "TokenLaunchPriceUpdated"
    TOKEN_PRICE_UPDATED = "TokenPriceUpdated"
    TOKEN_DESTROYED = "TokenDestroyed"


class EventSink(Protocol):
    """Anything that can record an event; EventLogger and MemoryEventLog qualify."""

    def log(self, event_type: str, data: dict[str, Any]) -> None: ...
