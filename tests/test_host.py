"""Tests for explicit feature registration."""

import pytest

from disaster_oracle.host import FeatureRegistry
from disaster_oracle.pipeline import DisasterOracleHandler
from disaster_oracle.fetchers import StaticRecordFetcher


class OtherFeature:
    feature_id = 2
    feature_name = "Other"

    def is_message_valid(self, message):
        return True

    def process(self, message):
        return message


def test_register_and_lookup(config):
    registry = FeatureRegistry()
    handler = DisasterOracleHandler.create(config, fetcher=StaticRecordFetcher())
    assert registry.register(handler) is handler
    registry.register(OtherFeature())

    assert registry.get(1) is handler
    assert len(registry) == 2
    assert [f.feature_name for f in registry] == ["DisasterOracle", "Other"]


def test_duplicate_feature_id_rejected(config):
    registry = FeatureRegistry()
    registry.register(DisasterOracleHandler.create(config, fetcher=StaticRecordFetcher()))
    with pytest.raises(ValueError, match="already registered"):
        registry.register(DisasterOracleHandler.create(config, fetcher=StaticRecordFetcher()))


def test_unknown_feature_id():
    with pytest.raises(KeyError):
        FeatureRegistry().get(7)
