"""Admission check: only messages from the deployed contract are processed."""

from __future__ import annotations

import logging
from typing import Optional

log = logging.getLogger(__name__)


def _normalise(address: Optional[str]) -> str:
    return (address or "").strip().lower()


def is_valid(sender: Optional[str], expected_address: str) -> bool:
    """True iff ``sender`` equals ``expected_address`` ignoring letter case."""
    ok = bool(_normalise(sender)) and _normalise(sender) == _normalise(expected_address)
    if ok:
        log.debug("Valid request from deployed contract: %s", sender)
    else:
        log.info("Ignoring request from non-deployed contract: %s", sender)
    return ok


class MessageValidator:
    def __init__(self, expected_address: str):
        if not _normalise(expected_address):
            raise ValueError("Expected contract address is required.")
        self.expected_address = expected_address

    def is_valid(self, sender: Optional[str]) -> bool:
        return is_valid(sender, self.expected_address)
