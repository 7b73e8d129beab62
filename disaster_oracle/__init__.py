"""
Disaster oracle: bridges EmergencyFund ``reportDisaster`` events to PredictHQ
and returns an ABI-encoded verdict the contract can decode.
"""

from disaster_oracle.config import OracleConfig
from disaster_oracle.dedup import DedupDecision, RequestDeduplicator, TimeWindowRetention
from disaster_oracle.errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    OracleError,
)
from disaster_oracle.host import FeatureHandler, FeatureRegistry
from disaster_oracle.models import (
    DecodedDisasterRequest,
    ExternalEventRecord,
    OracleMessage,
    OutboundReply,
)
from disaster_oracle.pipeline import DisasterOracleHandler, ProcessOutcome, ProcessResult

__version__ = "0.1.0"
