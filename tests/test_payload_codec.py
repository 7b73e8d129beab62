"""Tests for the ABI payload codec.

Tests cover:
  - the versioned schema constants (field list + order)
  - request wire layout
  - reply round-trip and inbound-half recovery
  - decode failures
"""

import pytest

from disaster_oracle.errors import DecodeError, EncodeError
from disaster_oracle.models import (
    DecodedDisasterRequest,
    ExternalEventRecord,
    OutboundReply,
)
from disaster_oracle.payload_codec import (
    REPLY_SCHEMA,
    REPLY_SCHEMA_V1,
    REQUEST_SCHEMA,
    REQUEST_SCHEMA_V1,
    decode_reply,
    decode_request,
    encode_reply,
    encode_request,
)

from conftest import T0

REQUEST = DecodedDisasterRequest(42, "Hurricane", "Miami, FL")
RECORD = ExternalEventRecord(
    is_confirmed=True,
    external_id="phq_1",
    start_time=T0,
    end_time=T0 + 86400,
    category="storm",
    tags=("severe",),
)


# ---------------------------------------------------------------------------
# Schema constants
# ---------------------------------------------------------------------------

def test_request_schema_v1_is_fixed():
    assert REQUEST_SCHEMA is REQUEST_SCHEMA_V1
    assert REQUEST_SCHEMA.version == 1
    assert REQUEST_SCHEMA.types == ("uint256", "string", "string")
    assert REQUEST_SCHEMA.names == ("requestId", "disasterType", "location")


def test_reply_schema_v1_is_fixed():
    assert REPLY_SCHEMA is REPLY_SCHEMA_V1
    assert REPLY_SCHEMA.version == 1
    assert REPLY_SCHEMA.types == (
        "uint256", "string", "string", "bool", "string",
        "uint32", "uint32", "string", "string[]",
    )
    assert REPLY_SCHEMA.names == (
        "requestId", "disasterType", "location", "isConfirmed", "externalId",
        "startTime", "endTime", "category", "tags",
    )


def test_reply_values_follow_schema_order():
    values = OutboundReply(REQUEST, RECORD).as_abi_values()
    assert len(values) == len(REPLY_SCHEMA.fields)
    assert values == (42, "Hurricane", "Miami, FL", True, "phq_1",
                      T0, T0 + 86400, "storm", ["severe"])


# ---------------------------------------------------------------------------
# Request wire layout
# ---------------------------------------------------------------------------

def test_request_wire_layout():
    data = encode_request(REQUEST)
    # 3 head words + 2 * (length word + one padded data word)
    assert len(data) == 3 * 32 + 2 * 64
    assert int.from_bytes(data[0:32], "big") == 42
    assert int.from_bytes(data[32:64], "big") == 96
    assert int.from_bytes(data[96:128], "big") == len("Hurricane")
    assert data[128:128 + 9] == b"Hurricane"


def test_decode_request_from_bytes_and_hex():
    data = encode_request(REQUEST)
    assert decode_request(data) == REQUEST
    assert decode_request("0x" + data.hex()) == REQUEST
    assert decode_request(data.hex()) == REQUEST


def test_decode_request_unicode_strings():
    req = DecodedDisasterRequest(2**256 - 1, "Séisme", "Zürich, CH")
    assert decode_request(encode_request(req)) == req


# ---------------------------------------------------------------------------
# Reply round-trip
# ---------------------------------------------------------------------------

def test_reply_round_trip_confirmed():
    reply = OutboundReply(REQUEST, RECORD)
    assert decode_reply(encode_reply(reply)) == reply


def test_reply_round_trip_unconfirmed_defaults():
    reply = OutboundReply(REQUEST, ExternalEventRecord.unconfirmed())
    decoded = decode_reply(encode_reply(reply))
    assert decoded.as_abi_values() == (
        42, "Hurricane", "Miami, FL", False, "", 0, 0, "", [],
    )


@pytest.mark.parametrize("record", [
    RECORD,
    ExternalEventRecord.unconfirmed(),
    ExternalEventRecord(True, "x", 1, 0, "", ("a", "b", "c")),
])
def test_inbound_half_recovered_from_reply(record):
    reply_bytes = encode_reply(OutboundReply(REQUEST, record))
    assert decode_request(reply_bytes) == REQUEST


def test_encode_reply_rejects_out_of_range_timestamp():
    bad = ExternalEventRecord(True, "x", 2**32, 0, "", ())
    with pytest.raises(EncodeError):
        encode_reply(OutboundReply(REQUEST, bad))


def test_encode_reply_rejects_unencodable_string():
    bad = ExternalEventRecord(True, "phq_\ud800", 0, 0, "", ())
    with pytest.raises(EncodeError):
        encode_reply(OutboundReply(REQUEST, bad))


# ---------------------------------------------------------------------------
# Decode failures
# ---------------------------------------------------------------------------

def test_decode_missing_payload():
    with pytest.raises(DecodeError, match="No featureData"):
        decode_request(None)


def test_decode_empty_payload():
    with pytest.raises(DecodeError):
        decode_request(b"")
    with pytest.raises(DecodeError):
        decode_request("0x")


def test_decode_bad_hex():
    with pytest.raises(DecodeError, match="not valid hex"):
        decode_request("0xnothex")


def test_decode_truncated_payload():
    data = encode_request(REQUEST)
    with pytest.raises(DecodeError):
        decode_request(data[:40])
    with pytest.raises(DecodeError):
        decode_request(data[:-32])


def test_decode_invalid_utf8_string():
    data = bytearray(encode_request(REQUEST))
    start = data.index(b"Hurricane")
    data[start:start + 2] = b"\xff\xfe"
    with pytest.raises(DecodeError):
        decode_request(bytes(data))
