"""
Pluggable external record fetchers.

Each fetcher exposes::

    fetch(disaster_type: str, location: str, timeout: float) -> ExternalEventRecord

and must never raise: provider failures resolve to an unconfirmed record.
"""

from typing import Protocol

from disaster_oracle.fetchers.predicthq import PredictHQFetcher
from disaster_oracle.fetchers.static import StaticRecordFetcher
from disaster_oracle.models import ExternalEventRecord


class RecordFetcher(Protocol):
    """Any object with a fail-open ``fetch`` method."""
    def fetch(self, disaster_type: str, location: str,
              timeout: float) -> ExternalEventRecord: ...


FETCHER_REGISTRY: dict[str, type] = {
    "predicthq": PredictHQFetcher,
    "static": StaticRecordFetcher,
}


def get_fetcher(name: str, **kwargs):
    """Instantiate a fetcher by name."""
    if name not in FETCHER_REGISTRY:
        raise KeyError(
            f"Unknown fetcher '{name}'. Available: {sorted(FETCHER_REGISTRY)}"
        )
    return FETCHER_REGISTRY[name](**kwargs)
