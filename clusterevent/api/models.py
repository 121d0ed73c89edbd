"""
Cluster event models.

This module contains the event records sent by the session:
- ClusterEvent (a JSON cluster event as understood by nDisplay-style listeners)
- JsonSerializable, the contract any other event type must satisfy
- Conversion of events to JSON bodies
"""

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from ..exceptions import SerializationError


@runtime_checkable
class JsonSerializable(Protocol):
    def to_json_value(self) -> dict[str, Any]: ...


@dataclass
class ClusterEvent:
    """Represents a JSON cluster event"""
    name: str = ""
    type: str = ""
    category: str = ""
    parameters: dict[str, str] | str = field(default_factory=dict)
    is_system_event: bool = False
    should_discard_on_repeat: bool = False

    def to_json_value(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "type": self.type,
            "name": self.name,
            "parameters": dict(self.parameters) if isinstance(self.parameters, Mapping) else self.parameters,
            "isSystemEvent": self.is_system_event,
            "shouldDiscardOnRepeat": self.should_discard_on_repeat,
        }


def to_json_value(event: Any) -> dict[str, Any]:
    """
    Convert an event to a JSON object value.

    Accepts anything implementing to_json_value(), a dataclass instance, or a
    mapping with string keys. The result must be a JSON object.
    """
    try:
        if isinstance(event, JsonSerializable):
            value = event.to_json_value()
        elif dataclasses.is_dataclass(event) and not isinstance(event, type):
            value = dataclasses.asdict(event)
        elif isinstance(event, Mapping):
            value = dict(event)
        else:
            raise SerializationError(f"Can't convert {type(event).__name__} to a JSON object")
    except SerializationError:
        raise
    except Exception as e:
        raise SerializationError(f"Couldn't convert {type(event).__name__} to JSON: {e}") from e

    if not isinstance(value, dict):
        raise SerializationError(f"Event must convert to a JSON object, got {type(value).__name__}")
    bad_keys = [k for k in value if not isinstance(k, str)]
    if bad_keys:
        raise SerializationError(f"JSON object keys must be strings, got {bad_keys!r}")
    return value


def serialize(value: dict[str, Any]) -> bytes:
    """Serialize a JSON value to a compact UTF-8 body"""
    try:
        text = json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Couldn't serialize json data: {e}") from e
