"""
Subscan events package.

Fetches pallet events from the Subscan block explorer, block range by block
range, and yields them with their parameters.
"""

from .config import SubscanEventsConfig
from .event_fetcher import SubscanEventFetcher
from .exceptions import MissingEventParametersError, SubscanAPIError, SubscanError
from .models import NormalizedEvent, ParsedEvent
from .subscan_client import SubscanClient

__all__ = [
    "SubscanEventsConfig",
    "SubscanEventFetcher",
    "SubscanClient",
    "ParsedEvent",
    "NormalizedEvent",
    "SubscanError",
    "SubscanAPIError",
    "MissingEventParametersError",
]
__version__ = "0.1.0"
