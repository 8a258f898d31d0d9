# Fanbase ledger package
from .bounded import BoundedIndex, IndexFullError
from .creators import CreatorRegistry
from .errors import ErrorCategory, ErrorCode, ErrorResponse, FanbaseError
from .events import EventSink, FanbaseEvent
from .id_registry import IssuanceRegistry
from .launch_tokens import LaunchTokenStore
from .ledger import Currency, Ledger
from .logger import EventLogger, MemoryEventLog
from .marketplace import Marketplace, MarketplaceMethod
from .storage import FanbaseStorage
from .tokens import TokenLedger
from .types import Creator, LaunchToken, LaunchTokenMetadata, Token

__all__ = [
    "Marketplace", "MarketplaceMethod",
    "FanbaseStorage",
    "CreatorRegistry", "LaunchTokenStore", "TokenLedger", "IssuanceRegistry",
    "BoundedIndex", "IndexFullError",
    "Creator", "LaunchToken", "LaunchTokenMetadata", "Token",
    "ErrorCategory", "ErrorCode", "ErrorResponse", "FanbaseError",
    "FanbaseEvent", "EventSink", "EventLogger", "MemoryEventLog",
    "Currency", "Ledger",
]
