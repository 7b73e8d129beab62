"""
ABI payload codec for the EmergencyFund contract.

Both schemas are binding contracts with the on-chain consumer.  Any change
to a field list or its order is a breaking change and must ship as a new
schema version, never as an edit to an existing one.

    request (v1): uint256 requestId, string disasterType, string location
    reply   (v1): uint256 requestId, string disasterType, string location,
                  bool isConfirmed, string externalId, uint32 startTime,
                  uint32 endTime, string category, string[] tags
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from disaster_oracle.errors import DecodeError, EncodeError
from disaster_oracle.models import DecodedDisasterRequest, OutboundReply, Payload


# ============================================================================
# Versioned schemas
# ============================================================================

@dataclass(frozen=True)
class PayloadSchema:
    """Ordered, typed field list of one ABI payload."""

    name: str
    version: int
    fields: tuple[tuple[str, str], ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    @property
    def types(self) -> tuple[str, ...]:
        return tuple(abi_type for _, abi_type in self.fields)


REQUEST_SCHEMA_V1 = PayloadSchema(
    name="disaster-request",
    version=1,
    fields=(
        ("requestId", "uint256"),
        ("disasterType", "string"),
        ("location", "string"),
    ),
)

REPLY_SCHEMA_V1 = PayloadSchema(
    name="disaster-reply",
    version=1,
    fields=(
        ("requestId", "uint256"),
        ("disasterType", "string"),
        ("location", "string"),
        ("isConfirmed", "bool"),
        ("externalId", "string"),
        ("startTime", "uint32"),
        ("endTime", "uint32"),
        ("category", "string"),
        ("tags", "string[]"),
    ),
)

# Current versions used on the wire.
REQUEST_SCHEMA = REQUEST_SCHEMA_V1
REPLY_SCHEMA = REPLY_SCHEMA_V1


# ============================================================================
# Helpers
# ============================================================================

def to_bytes(data: Optional[Payload]) -> bytes:
    """Normalise a raw or ``0x`` hex payload to bytes.

    Raises ``DecodeError`` if the payload is absent, empty or bad hex.
    """
    if data is None:
        raise DecodeError("No featureData found in message.")
    if isinstance(data, str):
        text = data[2:] if data[:2].lower() == "0x" else data
        try:
            data = bytes.fromhex(text)
        except ValueError as exc:
            raise DecodeError(f"featureData is not valid hex: {exc}") from exc
    if not data:
        raise DecodeError("featureData is empty.")
    return bytes(data)


def _decode(schema: PayloadSchema, data: Optional[Payload]) -> tuple:
    raw = to_bytes(data)
    try:
        return decode(list(schema.types), raw)
    except (DecodingError, ValueError, TypeError) as exc:
        # UnicodeDecodeError (bad string bytes) is a ValueError.
        raise DecodeError(
            f"Payload does not match {schema.name} v{schema.version} "
            f"({', '.join(schema.types)}): {exc}"
        ) from exc


def _encode(schema: PayloadSchema, values: tuple) -> bytes:
    try:
        return encode(list(schema.types), list(values))
    except (EncodingError, TypeError, ValueError) as exc:
        # UnicodeEncodeError (lone surrogates) is a ValueError.
        raise EncodeError(
            f"Values do not fit {schema.name} v{schema.version}: {exc}"
        ) from exc


# ============================================================================
# Request
# ============================================================================

def decode_request(data: Optional[Payload]) -> DecodedDisasterRequest:
    """Decode an inbound ``(uint256, string, string)`` payload."""
    request_id, disaster_type, location = _decode(REQUEST_SCHEMA, data)
    return DecodedDisasterRequest(
        request_id=int(request_id),
        disaster_type=disaster_type,
        location=location,
    )


def encode_request(request: DecodedDisasterRequest) -> bytes:
    """Encode a request the way the contract's ``reportDisaster`` emits it."""
    return _encode(
        REQUEST_SCHEMA,
        (request.request_id, request.disaster_type, request.location),
    )


# ============================================================================
# Reply
# ============================================================================

def encode_reply(reply: OutboundReply) -> bytes:
    return _encode(REPLY_SCHEMA, reply.as_abi_values())


def decode_reply(data: Optional[Payload]) -> OutboundReply:
    return OutboundReply.from_abi_values(_decode(REPLY_SCHEMA, data))
