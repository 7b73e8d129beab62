"""Exception taxonomy for the disaster oracle feature."""

from __future__ import annotations


class OracleError(Exception):
    """Base class for all disaster oracle errors."""


class ConfigurationError(OracleError):
    """Required configuration is missing or invalid.  Fatal at startup."""


class DecodeError(OracleError):
    """Inbound payload does not match the request schema."""


class EncodeError(OracleError):
    """Values do not fit the reply schema."""
