#!/usr/bin/env python3
"""Data models for Subscan events.

This module provides immutable data classes for the event summaries and
parameters returned by Subscan, and for the parsed and normalized events
handed to callers.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


def _require(data: dict[str, Any], key: str, kind: str) -> Any:
    """Return ``data[key]``, raising ValueError when the field is absent."""
    if key not in data or data[key] is None:
        raise ValueError(f"Missing field '{key}' in {kind}: {data}")
    return data[key]


def block_from_event_index(event_index: str) -> int:
    """Block number of an event index such as '4205391-2'."""
    return int(event_index.split("-")[0])


@dataclass(frozen=True, slots=True)
class EventSummary:
    """One event occurrence as listed by `/api/v2/scan/events`.

    Attributes:
        event_index: Composite index '<block>-<ordinal in block>'
        module_id: Pallet that emitted the event
        event_id: Event kind
        block_timestamp: UNIX time of the block in seconds
        extrinsic_hash: Hash of the extrinsic that emitted the event
        extrinsic_index: Composite index of that extrinsic
        finalized: Whether the block is finalized
        id: Subscan internal id
        phase: Execution phase of the event
    """

    event_index: str
    module_id: str
    event_id: str
    block_timestamp: int
    extrinsic_hash: str
    extrinsic_index: str = ""
    finalized: bool = False
    id: int = 0
    phase: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "EventSummary":
        return cls(
            event_index=_require(data, "event_index", "event summary"),
            module_id=data.get("module_id", ""),
            event_id=data.get("event_id", ""),
            block_timestamp=_require(data, "block_timestamp", "event summary"),
            extrinsic_hash=_require(data, "extrinsic_hash", "event summary"),
            extrinsic_index=data.get("extrinsic_index", ""),
            finalized=bool(data.get("finalized", False)),
            id=data.get("id", 0),
            phase=data.get("phase", 0),
        )

    @property
    def block_number(self) -> int:
        return block_from_event_index(self.event_index)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_index": self.event_index,
            "module_id": self.module_id,
            "event_id": self.event_id,
            "block_timestamp": self.block_timestamp,
            "extrinsic_hash": self.extrinsic_hash,
            "extrinsic_index": self.extrinsic_index,
            "finalized": self.finalized,
            "id": self.id,
            "phase": self.phase
        }


@dataclass(frozen=True, slots=True)
class EventParam:
    """A single typed event parameter.

    Attributes:
        type_name: Type tag of the parameter, used as key when flattening
        value: Raw value, any JSON shape
        name: Parameter name, when the runtime metadata provides one
        type: Low level type, when provided
    """

    type_name: str
    value: Any
    name: str | None = None
    type: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "EventParam":
        if "value" not in data:
            raise ValueError(f"Missing field 'value' in event parameter: {data}")
        return cls(
            type_name=_require(data, "type_name", "event parameter"),
            value=data["value"],
            name=data.get("name"),
            type=data.get("type"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"type_name": self.type_name, "value": self.value}
        if self.name is not None:
            result["name"] = self.name
        if self.type is not None:
            result["type"] = self.type
        return result


@dataclass(frozen=True, slots=True)
class EventParamSet:
    """Parameters of one event as returned by `/api/scan/event/params`."""

    event_index: str
    params: tuple[EventParam, ...]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "EventParamSet":
        raw_params = data.get("params") or []
        return cls(
            event_index=_require(data, "event_index", "event parameters"),
            params=tuple(EventParam.from_json(param) for param in raw_params),
        )


def flatten_params(params: Iterable[EventParam]) -> dict[str, Any]:
    """Map each parameter's type name to its value.

    Later parameters overwrite earlier ones that share a type name.
    """
    return {param.type_name: param.value for param in params}


@dataclass(frozen=True, slots=True)
class ParsedEvent:
    """An event summary correlated with its parameters.

    Attributes:
        block: Block number the event was emitted in
        block_timestamp_ms: UNIX time of the block in milliseconds
        params: Ordered parameters of the event
        extrinsic_hash: Hash of the extrinsic that emitted the event
    """

    block: int
    block_timestamp_ms: int
    params: tuple[EventParam, ...]
    extrinsic_hash: str

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"ParsedEvent(block={self.block}, "
            f"extrinsic={self.extrinsic_hash[:10]}..., "
            f"params={len(self.params)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "block": self.block,
            "block_timestamp_ms": self.block_timestamp_ms,
            "params": [param.to_dict() for param in self.params],
            "extrinsic_hash": self.extrinsic_hash
        }


@dataclass(frozen=True, slots=True)
class NormalizedEvent:
    """A parsed event extended with its parameters keyed by type name.

    ``parsed_params`` makes value extraction a lookup, e.g.
    ``event.parsed_params["AccountId"]``.
    """

    block: int
    block_timestamp_ms: int
    params: tuple[EventParam, ...]
    extrinsic_hash: str
    parsed_params: dict[str, Any]

    @classmethod
    def from_parsed(cls, event: ParsedEvent) -> "NormalizedEvent":
        return cls(
            block=event.block,
            block_timestamp_ms=event.block_timestamp_ms,
            params=event.params,
            extrinsic_hash=event.extrinsic_hash,
            parsed_params=flatten_params(event.params),
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"NormalizedEvent(block={self.block}, "
            f"extrinsic={self.extrinsic_hash[:10]}..., "
            f"params={sorted(self.parsed_params)})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "block": self.block,
            "block_timestamp_ms": self.block_timestamp_ms,
            "params": [param.to_dict() for param in self.params],
            "extrinsic_hash": self.extrinsic_hash,
            "parsed_params": dict(self.parsed_params)
        }


@dataclass(frozen=True, slots=True)
class EventsPage:
    """One page of events with the total count for the queried block range.

    ``events`` is None when Subscan returned no events for the page.
    """

    count: int
    events: list[ParsedEvent] | None = None
