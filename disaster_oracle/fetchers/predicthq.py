"""
PredictHQ events API fetcher.

Issues one authenticated read query per disaster request and maps the
response to an ``ExternalEventRecord``.  The fetcher is fail-open: every
network, HTTP or parsing problem resolves to an unconfirmed record.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import requests

from disaster_oracle.models import ExternalEventRecord
from disaster_oracle.records import ProviderResult, parse_results, to_event_record

log = logging.getLogger(__name__)

PREDICTHQ_EVENTS_URL = "https://api.predicthq.com/v1/events/"
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_MAX_CONCURRENT = 4


class PredictHQFetcher:
    """Fetch disaster records from PredictHQ.

    Parameters
    ----------
    api_key : str
        Bearer credential for the PredictHQ API.
    max_concurrent : int
        Maximum number of in-flight requests (default 4).  Callers beyond
        the bound block until a slot frees up.
    base_url : str
        Events endpoint (default the public v1 endpoint).
    session : requests.Session, optional
        Anything with a ``get(url, params=, headers=, timeout=)`` method.
    """

    def __init__(
        self,
        api_key: str,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        base_url: str = PREDICTHQ_EVENTS_URL,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("PredictHQ API key is required.")
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1.")
        self.api_key = api_key
        self.max_concurrent = max_concurrent
        self.base_url = base_url
        self.session = session if session is not None else requests.Session()
        self._slots = threading.BoundedSemaphore(max_concurrent)

    # ------------------------------------------------------------------

    @staticmethod
    def build_params(disaster_type: str, location: str) -> dict:
        return {"q": f"{disaster_type} AND location={location}"}

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def query(
        self,
        disaster_type: str,
        location: str,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> ProviderResult:
        """Run the provider query and classify the outcome.  Never raises."""
        params = self.build_params(disaster_type, location)
        with self._slots:
            try:
                resp = self.session.get(
                    self.base_url,
                    params=params,
                    headers=self._headers(),
                    timeout=timeout,
                )
            except requests.exceptions.Timeout:
                return ProviderResult.failure(f"timed out after {timeout}s")
            except requests.exceptions.RequestException as exc:
                return ProviderResult.failure(f"request failed: {exc}")

        if not 200 <= resp.status_code < 300:
            return ProviderResult.failure(f"HTTP {resp.status_code}")
        try:
            body = resp.json()
        except ValueError as exc:
            return ProviderResult.failure(f"response is not JSON: {exc}")
        return parse_results(body)

    def fetch(
        self,
        disaster_type: str,
        location: str,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> ExternalEventRecord:
        result = self.query(disaster_type, location, timeout=timeout)
        if result.is_failure:
            log.warning(
                "PredictHQ lookup failed for %r at %r (%s); "
                "replying unconfirmed", disaster_type, location, result.reason,
            )
        else:
            log.debug("PredictHQ returned %d result(s) for %r at %r",
                      result.count, disaster_type, location)
        return to_event_record(result)
