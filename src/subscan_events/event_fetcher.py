"""
Block range walker that streams Subscan events to the caller.

"""

import asyncio
import inspect
import logging
import math
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Protocol

from .config import SubscanEventsConfig
from .models import NormalizedEvent, ParsedEvent
from .subscan_client import SubscanClient

logger = logging.getLogger(__name__)

# Applied to every page before flattening; may add or modify parameters
PageTransform = Callable[
    [list[ParsedEvent]],
    list[ParsedEvent] | Awaitable[list[ParsedEvent]]
]


class BlockHeightSource(Protocol):
    async def get_block_number(self) -> int: ...


class SubscanEventFetcher:
    """
    Walks block ranges on Subscan and yields normalized events.

    Within a block range pages are visited from the last to the first, so
    events are not emitted in chronological order. Callers that need strict
    ordering must sort what they collect.
    """

    def __init__(
        self,
        config: SubscanEventsConfig,
        chain: BlockHeightSource | None,
        client: SubscanClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ) -> None:
        """
        Initialize the SubscanEventFetcher.

        Args:
            config: Subscan, node and fetch configuration
            chain: Source of the current block height, unused when Subscan is disabled
            client: Subscan client, built from config when not provided
            sleep: Awaitable used to wait between provider calls
        """
        self.config = config
        self.chain = chain
        self.client = client or SubscanClient(config.subscan, config.fetch)
        self.sleep = sleep

    async def _wait(self) -> None:
        await self.sleep(self.config.fetch.query_interval)

    async def _apply_transform(
        self,
        events: list[ParsedEvent],
        transform: PageTransform | None
    ) -> list[ParsedEvent]:
        if transform is None:
            return events
        result = transform(events)
        if inspect.isawaitable(result):
            result = await result
        return list(result)

    async def event_generator(
        self,
        module: str,
        event_id: str,
        start_block: int,
        transform: PageTransform | None = None
    ) -> AsyncIterator[NormalizedEvent]:
        """
        Yield every finalized event of a kind from start_block up to the current block.

        The current block is read once when the walk starts; blocks produced
        afterwards are left for the next walk.

        Each range is first counted with the events list endpoint alone, so the
        count never fails on missing parameters; only page fetches do.

        Args:
            module: Pallet name
            event_id: Event emitted
            start_block: First block to look at
            transform: Optional function applied to each page of events before yielding

        Yields:
            NormalizedEvent for each event found

        Raises:
            MissingEventParametersError: If an event comes without parameters
            SubscanAPIError: If Subscan reports an error code
            httpx.HTTPError: On transport or HTTP status errors
        """
        if not self.config.subscan.enabled:
            logger.debug("Subscan is disabled, no events to fetch")
            return

        range_size = self.config.fetch.block_range_size
        page_size = self.config.fetch.max_rows

        current_block = await self.chain.get_block_number()
        logger.info(
            f"Fetching \"{module}.{event_id}\" events "
            f"from block {start_block} to {current_block}"
        )

        # get events in batches until the current block is reached
        for from_block in range(start_block, current_block, range_size):
            block_range = f"{from_block} - {from_block + range_size}"

            count = await self.client.get_event_count(module, event_id, from_block)
            await self._wait()

            if count == 0:
                logger.debug(
                    f"No new \"{event_id}\" events found on Subscan in block range {block_range}."
                )
                continue

            logger.debug(
                f"Found {count} new \"{event_id}\" events on Subscan in block range {block_range}."
            )

            pages = math.ceil(count / page_size) - 1

            for page in range(pages, -1, -1):
                events_page = await self.client.get_events(
                    module, event_id, from_block, page, row=page_size
                )
                if events_page.events:
                    logger.debug(
                        f"Loaded page {page} of \"{event_id}\" events in block range {block_range}."
                    )
                    for event in await self._apply_transform(events_page.events, transform):
                        yield NormalizedEvent.from_parsed(event)

                await self._wait()
