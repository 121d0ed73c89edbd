"""
API-level models and session implementation.

This module contains the components that belong to the API layer:
- ClusterEvent, JsonSerializable (event records and their JSON contract)
- EventSenderSession (delivers events using the io layer)
"""

from .models import ClusterEvent, JsonSerializable, to_json_value, serialize
from .session import EventSenderSession

__all__ = [
    "ClusterEvent",
    "JsonSerializable",
    "to_json_value",
    "serialize",
    "EventSenderSession",
]
