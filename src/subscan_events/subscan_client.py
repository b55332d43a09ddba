"""
Subscan API client for listing events and fetching their parameters.

"""

import json
import logging
from typing import Any

import httpx

from .config import FetchConfig, SubscanConfig
from .exceptions import MissingEventParametersError, SubscanAPIError
from .models import EventParamSet, EventsPage, EventSummary, ParsedEvent

logger = logging.getLogger(__name__)


class SubscanClient:
    """
    Client for the Subscan events endpoints.

    Every call opens its own httpx.AsyncClient, so the client holds no
    connection state between calls.
    """

    def __init__(
        self,
        subscan: SubscanConfig,
        fetch: FetchConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        """
        Initialize the SubscanClient.

        Args:
            subscan: Subscan network and API secret
            fetch: Paging settings and request timeout
            transport: Optional httpx transport, used instead of the network
        """
        self.subscan = subscan
        self.fetch = fetch or FetchConfig()
        self.transport = transport

    async def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        async with httpx.AsyncClient(
            transport=self.transport,
            headers=self.subscan.headers,
            timeout=self.fetch.request_timeout
        ) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()

        code = body.get("code")
        if code:
            raise SubscanAPIError(code, body.get("message", ""))
        return body

    def _events_list_payload(
        self,
        module: str,
        event_id: str,
        from_block: int,
        page: int,
        row: int
    ) -> dict[str, Any]:
        to_block = from_block + self.fetch.block_range_size
        return {
            "module": module,
            "event_id": event_id,
            "block_range": f"{from_block}-{to_block}",
            "order": "asc",
            "row": row,
            "page": page,
            "finalized": True,
        }

    async def _list_events(
        self,
        module: str,
        event_id: str,
        from_block: int,
        page: int,
        row: int
    ) -> tuple[int, list[dict[str, Any]] | None]:
        payload = self._events_list_payload(module, event_id, from_block, page, row)
        logger.debug(f"Events list payload: {json.dumps(payload, indent=2)}")

        body = await self._post(self.subscan.events_list_url, payload)
        data = body.get("data") or {}
        return data.get("count") or 0, data.get("events")

    async def get_event_count(self, module: str, event_id: str, from_block: int) -> int:
        """
        Count the events in the block range starting at from_block.

        Only the events list endpoint is queried, with a single row.
        """
        count, _ = await self._list_events(module, event_id, from_block, page=0, row=1)
        return count

    async def get_event_params(self, event_indices: list[str]) -> list[EventParamSet]:
        """
        Fetch the parameters of the given events in one request.

        Args:
            event_indices: Event indices such as '4205391-2'

        Returns:
            The parameter sets in the order Subscan returned them
        """
        payload = {"event_index": event_indices}
        logger.debug(f"Events params payload: {json.dumps(payload, indent=2)}")

        body = await self._post(self.subscan.events_params_url, payload)
        return [EventParamSet.from_json(entry) for entry in body.get("data") or []]

    async def get_events(
        self,
        module: str,
        event_id: str,
        from_block: int,
        page: int,
        row: int | None = None
    ) -> EventsPage:
        """
        Fetch one page of events together with their parameters.

        Args:
            module: Pallet name
            event_id: Event emitted
            from_block: First block of the queried range
            page: Page index
            row: Page size, defaults to the configured maximum

        Returns:
            EventsPage with the total count of the range and, if any, the parsed events

        Raises:
            MissingEventParametersError: If an event has no matching or an empty parameter list
            SubscanAPIError: If Subscan reports an error code
            httpx.HTTPError: On transport or HTTP status errors
        """
        if row is None:
            row = self.fetch.max_rows

        count, raw_events = await self._list_events(module, event_id, from_block, page, row)
        if not raw_events:
            return EventsPage(count=count)

        summaries = [EventSummary.from_json(event) for event in raw_events]
        params_by_index = {}
        for param_set in await self.get_event_params([s.event_index for s in summaries]):
            # keep the first entry of a repeated index
            params_by_index.setdefault(param_set.event_index, param_set.params)

        parsed_events = []
        for summary in summaries:
            params = params_by_index.get(summary.event_index)
            if not params:
                raise MissingEventParametersError(summary.event_index)

            parsed_events.append(ParsedEvent(
                block=summary.block_number,
                block_timestamp_ms=summary.block_timestamp * 1000,
                params=params,
                extrinsic_hash=summary.extrinsic_hash,
            ))

        logger.debug(
            "Parsed events: "
            f"{json.dumps([event.to_dict() for event in parsed_events], indent=2)}"
        )
        return EventsPage(count=count, events=parsed_events)
