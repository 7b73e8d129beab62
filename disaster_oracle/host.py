"""
Host-facing capability interface and explicit feature registration.

The host decides how messages are discovered and dispatched; features
only promise ``is_message_valid`` and ``process``.
"""

from __future__ import annotations

from typing import Any, Iterator, Protocol

from disaster_oracle.models import OracleMessage


class FeatureHandler(Protocol):
    """Anything the host can route oracle messages to."""
    feature_id: int
    feature_name: str

    def is_message_valid(self, message: Any) -> bool: ...

    def process(self, message: OracleMessage) -> OracleMessage: ...


class FeatureRegistry:
    """Feature handlers keyed by route tag (feature id)."""

    def __init__(self):
        self._handlers: dict[int, FeatureHandler] = {}

    def register(self, handler: FeatureHandler) -> FeatureHandler:
        if handler.feature_id in self._handlers:
            raise ValueError(
                f"Feature id {handler.feature_id} already registered "
                f"by '{self._handlers[handler.feature_id].feature_name}'"
            )
        self._handlers[handler.feature_id] = handler
        return handler

    def get(self, feature_id: int) -> FeatureHandler:
        if feature_id not in self._handlers:
            raise KeyError(
                f"Unknown feature id {feature_id}. Available: {sorted(self._handlers)}"
            )
        return self._handlers[feature_id]

    def __iter__(self) -> Iterator[FeatureHandler]:
        return iter(self._handlers.values())

    def __len__(self) -> int:
        return len(self._handlers)
