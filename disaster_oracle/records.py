"""
Provider result -> ExternalEventRecord mapping.

The mapping is a total function over three provider outcomes:

    matches(first, count)  -> confirmed record built from the first match
    empty()                -> unconfirmed record, all defaults
    failure(reason)        -> unconfirmed record, all defaults

Network and parsing problems are turned into ``failure`` results by the
fetchers *before* mapping, so ``to_event_record`` never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from disaster_oracle.models import ExternalEventRecord

UINT32_MAX = 2**32 - 1

MATCHES = "matches"
EMPTY = "empty"
FAILURE = "failure"


# ============================================================================
# Provider-side types
# ============================================================================

@dataclass(frozen=True)
class ProviderRecord:
    """One provider event, already normalised to unix seconds."""

    external_id: str = ""
    start_time: int = 0
    end_time: int = 0
    category: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProviderResult:
    status: str
    first: Optional[ProviderRecord] = None
    count: int = 0
    reason: str = ""

    @classmethod
    def matches(cls, first: ProviderRecord, count: int) -> "ProviderResult":
        return cls(status=MATCHES, first=first, count=count)

    @classmethod
    def empty(cls) -> "ProviderResult":
        return cls(status=EMPTY)

    @classmethod
    def failure(cls, reason: str) -> "ProviderResult":
        return cls(status=FAILURE, reason=reason)

    @property
    def is_failure(self) -> bool:
        return self.status == FAILURE


# ============================================================================
# Pure mapping
# ============================================================================

def to_event_record(result: ProviderResult) -> ExternalEventRecord:
    """Map any provider result to a fully populated record."""
    if result.status == MATCHES and result.first is not None and result.count > 0:
        first = result.first
        return ExternalEventRecord(
            is_confirmed=True,
            external_id=first.external_id,
            start_time=first.start_time,
            end_time=first.end_time,
            category=first.category,
            tags=first.tags,
        )
    return ExternalEventRecord.unconfirmed()


# ============================================================================
# Body parsing
# ============================================================================

def to_unix_seconds(value: Any) -> int:
    """ISO-8601 string (or numeric epoch) -> whole unix seconds.

    ``None`` and ``""`` map to 0.  Naive timestamps are taken as UTC.
    Raises ``ValueError`` for unparseable or out-of-uint32-range values.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")
    if isinstance(value, (int, float)):
        seconds = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        seconds = int(dt.timestamp())
    else:
        raise ValueError(f"Not a timestamp: {value!r}")
    if not 0 <= seconds <= UINT32_MAX:
        raise ValueError(f"Timestamp {value!r} does not fit uint32.")
    return seconds


def _text(value: Any) -> str:
    """Field value -> str that will ABI-encode as UTF-8.  ``None`` -> ''."""
    if value is None:
        return ""
    text = str(value)
    # lone surrogates survive json.loads but cannot be encoded
    text.encode("utf-8")
    return text


def parse_record(raw: Any) -> ProviderRecord:
    """One provider event dict -> ``ProviderRecord``.  Raises ``ValueError``."""
    if not isinstance(raw, dict):
        raise ValueError(f"Event is not an object: {type(raw).__name__}")
    tags = raw.get("tags")
    if tags is None:
        tags = []
    if not isinstance(tags, list):
        raise ValueError("'tags' is not a list")
    return ProviderRecord(
        external_id=_text(raw.get("id")),
        start_time=to_unix_seconds(raw.get("start")),
        end_time=to_unix_seconds(raw.get("end")),
        category=_text(raw.get("category")),
        tags=tuple(_text(t) for t in tags),
    )


def parse_results(body: Any) -> ProviderResult:
    """Decoded JSON body -> ``ProviderResult``.

    Only the first event is authoritative, so only the first is parsed.
    A malformed body or first event becomes a ``failure``.
    """
    if not isinstance(body, dict):
        return ProviderResult.failure("response body is not a JSON object")
    results = body.get("results")
    if not isinstance(results, list):
        return ProviderResult.failure("response body has no 'results' list")
    if not results:
        return ProviderResult.empty()
    try:
        first = parse_record(results[0])
    except (ValueError, OverflowError) as exc:
        return ProviderResult.failure(f"malformed first result: {exc}")
    return ProviderResult.matches(first, count=len(results))
