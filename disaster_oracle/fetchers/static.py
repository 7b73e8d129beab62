"""
Static record fetcher for offline demos and testing.

Serves PredictHQ-shaped results from an in-memory catalogue, so replies
go through exactly the same parsing and mapping as live data.  Never
touches the network.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from disaster_oracle.models import ExternalEventRecord
from disaster_oracle.records import ProviderResult, parse_results, to_event_record

log = logging.getLogger(__name__)


def _key(disaster_type: str, location: str) -> tuple[str, str]:
    return disaster_type.strip().lower(), location.strip().lower()


class StaticRecordFetcher:
    """Look up canned provider results by ``(disaster_type, location)``.

    Parameters
    ----------
    catalogue : list[dict]
        Entries of the form
        ``{"disaster_type": str, "location": str, "results": [event, ...]}``
        where each event uses the PredictHQ shape
        (``id``, ``start``, ``end``, ``category``, ``tags``).
        Matching is case-insensitive.
    """

    def __init__(self, catalogue: list[dict] | None = None):
        self._results: dict[tuple[str, str], list] = {}
        self.calls: list[tuple[str, str]] = []
        for entry in catalogue or []:
            key = _key(entry["disaster_type"], entry["location"])
            self._results[key] = list(entry.get("results", []))

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticRecordFetcher":
        with open(path) as f:
            return cls(json.load(f))

    def query(self, disaster_type: str, location: str,
              timeout: float | None = None) -> ProviderResult:
        self.calls.append((disaster_type, location))
        results = self._results.get(_key(disaster_type, location), [])
        return parse_results({"results": results})

    def fetch(self, disaster_type: str, location: str,
              timeout: float | None = None) -> ExternalEventRecord:
        result = self.query(disaster_type, location, timeout)
        if result.is_failure:
            log.warning("Static catalogue entry for %r at %r is malformed (%s)",
                        disaster_type, location, result.reason)
        return to_event_record(result)
