"""
Value types exchanged between the host, the pipeline and the contract.

All types are frozen dataclasses.  ``OracleMessage`` doubles as the inbound
request and the (possibly reply-carrying) message handed back to the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence, Union


Payload = Union[bytes, str]


# ============================================================================
# Host message
# ============================================================================

@dataclass(frozen=True)
class OracleMessage:
    """One inbound on-chain event as delivered by the host.

    Parameters
    ----------
    transaction_id : str
        Unique token of the on-chain event; the deduplication key.
    sender : str | None
        Address of the contract that emitted the event.
    feature_data : bytes | str | None
        ABI-encoded request, raw or as a ``0x`` hex string.
    reply_payload : bytes | None
        ABI-encoded reply, set only when the pipeline produced one.
    route_tag : int | None
        Feature id the host uses to route ``reply_payload``.
    """

    transaction_id: str
    sender: Optional[str]
    feature_data: Optional[Payload] = None
    reply_payload: Optional[bytes] = None
    route_tag: Optional[int] = None

    @property
    def has_reply(self) -> bool:
        return self.reply_payload is not None

    def with_reply(self, reply_payload: bytes, route_tag: int) -> "OracleMessage":
        return replace(self, reply_payload=reply_payload, route_tag=route_tag)

    @classmethod
    def from_dict(cls, data: dict) -> "OracleMessage":
        """Build a message from the host's JSON shape.

        Accepts ``txId`` or ``transactionId`` (top level or under ``values``),
        ``sender`` and ``featureData``.
        """
        values = data.get("values") or {}
        tx_id = (
            data.get("transactionId")
            or data.get("txId")
            or values.get("txId")
        )
        if not tx_id:
            raise ValueError("Message is missing a transaction id ('txId').")
        return cls(
            transaction_id=str(tx_id),
            sender=data.get("sender"),
            feature_data=data.get("featureData"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "transactionId": self.transaction_id,
            "sender": self.sender,
            "featureData": _as_hex(self.feature_data),
        }
        if self.reply_payload is not None:
            out["featureReply"] = _as_hex(self.reply_payload)
            out["featureId"] = self.route_tag
        return out


def _as_hex(data: Optional[Payload]) -> Optional[str]:
    if data is None or isinstance(data, str):
        return data
    return "0x" + bytes(data).hex()


# ============================================================================
# Decoded request / external record / reply
# ============================================================================

@dataclass(frozen=True)
class DecodedDisasterRequest:
    request_id: int
    disaster_type: str
    location: str


@dataclass(frozen=True)
class ExternalEventRecord:
    """Best-effort disaster record from the external provider.

    Always fully populated: "no data" is ``is_confirmed=False`` with every
    other field at its default.
    """

    is_confirmed: bool = False
    external_id: str = ""
    start_time: int = 0
    end_time: int = 0
    category: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def unconfirmed(cls) -> "ExternalEventRecord":
        return cls()


@dataclass(frozen=True)
class OutboundReply:
    """Decoded request fields passed through, followed by the external record."""

    request: DecodedDisasterRequest
    record: ExternalEventRecord

    def as_abi_values(self) -> tuple:
        """Values in reply-schema order."""
        return (
            self.request.request_id,
            self.request.disaster_type,
            self.request.location,
            self.record.is_confirmed,
            self.record.external_id,
            self.record.start_time,
            self.record.end_time,
            self.record.category,
            list(self.record.tags),
        )

    @classmethod
    def from_abi_values(cls, values: Sequence) -> "OutboundReply":
        (request_id, disaster_type, location, is_confirmed,
         external_id, start_time, end_time, category, tags) = values
        return cls(
            request=DecodedDisasterRequest(
                request_id=int(request_id),
                disaster_type=disaster_type,
                location=location,
            ),
            record=ExternalEventRecord(
                is_confirmed=bool(is_confirmed),
                external_id=external_id,
                start_time=int(start_time),
                end_time=int(end_time),
                category=category,
                tags=tuple(tags),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "requestId": self.request.request_id,
            "disasterType": self.request.disaster_type,
            "location": self.request.location,
            "isConfirmed": self.record.is_confirmed,
            "externalId": self.record.external_id,
            "startTime": self.record.start_time,
            "endTime": self.record.end_time,
            "category": self.record.category,
            "tags": list(self.record.tags),
        }
