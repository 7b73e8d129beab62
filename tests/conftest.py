"""Shared fixtures: a fake HTTP session and PredictHQ-shaped payloads."""

import pytest
import requests

from disaster_oracle.config import OracleConfig

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
OTHER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
API_KEY = "phq-test-key"

T0 = 1_700_000_000           # 2023-11-14T22:13:20Z
T0_ISO = "2023-11-14T22:13:20Z"
T1_ISO = "2023-11-15T22:13:20Z"  # T0 + 86400

PHQ_MATCH = {
    "count": 1,
    "results": [
        {
            "id": "phq_1",
            "start": T0_ISO,
            "end": T1_ISO,
            "category": "storm",
            "tags": ["severe"],
        }
    ],
}
PHQ_EMPTY = {"count": 0, "results": []}


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """Stand-in for ``requests.Session`` that records every call.

    ``outcome`` is either a ``FakeResponse`` or an exception to raise.
    """

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.fixture
def config():
    return OracleConfig(
        deployed_contract_address=CONTRACT,
        predicthq_api_key=API_KEY,
        external_call_timeout=2.5,
        max_concurrent_external_calls=2,
    )


@pytest.fixture
def match_session():
    return FakeSession(FakeResponse(200, PHQ_MATCH))


@pytest.fixture
def empty_session():
    return FakeSession(FakeResponse(200, PHQ_EMPTY))


@pytest.fixture
def broken_session():
    return FakeSession(requests.exceptions.ConnectionError("connection refused"))
