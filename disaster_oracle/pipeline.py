"""
Disaster oracle feature handler.

Per-message flow:

    Received -> validate -> dedup -> decode -> fetch -> compose -> Replied

Rejected, duplicate and undecodable messages are handed back to the host
unchanged so unrelated traffic is never blocked.  External lookups are
fail-open, so every decoded request gets exactly one reply.  Nothing is
retried here; a retry is a new event for the host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from disaster_oracle.config import OracleConfig
from disaster_oracle.dedup import DedupDecision, RequestDeduplicator
from disaster_oracle.errors import DecodeError
from disaster_oracle.fetchers import RecordFetcher, get_fetcher
from disaster_oracle.models import OracleMessage, OutboundReply
from disaster_oracle.payload_codec import decode_request, encode_reply
from disaster_oracle.validator import MessageValidator

log = logging.getLogger(__name__)


class ProcessOutcome(Enum):
    REJECTED = "rejected"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    DECODE_FAILED = "decode_failed"
    REPLIED = "replied"


@dataclass(frozen=True)
class ProcessResult:
    message: OracleMessage
    outcome: ProcessOutcome
    reply: Optional[OutboundReply] = None


class DisasterOracleHandler:
    """Feature handler bridging EmergencyFund disaster reports to PredictHQ.

    Build with :meth:`create`; the constructor expects already-validated
    collaborators.
    """

    feature_id = 1
    feature_name = "DisasterOracle"
    feature_description = "Oracle for fetching disaster data from PredictHQ"

    def __init__(
        self,
        config: OracleConfig,
        validator: MessageValidator,
        deduplicator: RequestDeduplicator,
        fetcher: RecordFetcher,
    ):
        self.config = config
        self.validator = validator
        self.deduplicator = deduplicator
        self.fetcher = fetcher

    @classmethod
    def create(
        cls,
        config: OracleConfig,
        fetcher: Optional[RecordFetcher] = None,
        deduplicator: Optional[RequestDeduplicator] = None,
    ) -> "DisasterOracleHandler":
        """Fully configured handler, or ``ConfigurationError``.

        ``config`` is validated on construction, so reaching this point
        means required settings are present.
        """
        if fetcher is None:
            fetcher = get_fetcher(
                "predicthq",
                api_key=config.predicthq_api_key,
                max_concurrent=config.max_concurrent_external_calls,
            )
        return cls(
            config=config,
            validator=MessageValidator(config.deployed_contract_address),
            deduplicator=deduplicator if deduplicator is not None else RequestDeduplicator(),
            fetcher=fetcher,
        )

    # ------------------------------------------------------------------

    def is_message_valid(self, message: Union[OracleMessage, str, None]) -> bool:
        sender = message.sender if isinstance(message, OracleMessage) else message
        return self.validator.is_valid(sender)

    def process(self, message: OracleMessage) -> OracleMessage:
        return self.handle(message).message

    def handle(self, message: OracleMessage) -> ProcessResult:
        tx_id = message.transaction_id
        log.info("[%s] Processing request: %s", self.feature_name, tx_id)

        if not self.is_message_valid(message):
            return ProcessResult(message, ProcessOutcome.REJECTED)

        if self.deduplicator.check_and_mark(tx_id) is DedupDecision.ALREADY_PROCESSED:
            log.info("[%s] Already processed request: %s, skipping",
                     self.feature_name, tx_id)
            return ProcessResult(message, ProcessOutcome.SKIPPED_DUPLICATE)

        try:
            request = decode_request(message.feature_data)
        except DecodeError as exc:
            log.error("[%s] Cannot decode request %s: %s",
                      self.feature_name, tx_id, exc)
            return ProcessResult(message, ProcessOutcome.DECODE_FAILED)

        log.info("[%s] Decoded requestId: %d, disasterType: %s, location: %s",
                 self.feature_name, request.request_id,
                 request.disaster_type, request.location)

        record = self.fetcher.fetch(
            request.disaster_type,
            request.location,
            timeout=self.config.external_call_timeout,
        )
        reply = OutboundReply(request=request, record=record)
        out = message.with_reply(encode_reply(reply), route_tag=self.feature_id)

        log.info("[%s] Reply encoded for requestId: %d (confirmed=%s)",
                 self.feature_name, request.request_id, record.is_confirmed)
        return ProcessResult(out, ProcessOutcome.REPLIED, reply)
