"""Tests for sender admission."""

import pytest

from disaster_oracle.validator import MessageValidator, is_valid

from conftest import CONTRACT, OTHER


@pytest.mark.parametrize("sender", [
    CONTRACT,
    CONTRACT.lower(),
    "0x" + CONTRACT[2:].upper(),
    f"  {CONTRACT}  ",
])
def test_same_address_any_case_is_valid(sender):
    assert MessageValidator(CONTRACT).is_valid(sender)


@pytest.mark.parametrize("sender", [
    OTHER,
    OTHER.lower(),
    CONTRACT[:-1] + "0",
    "",
    None,
])
def test_other_addresses_are_rejected(sender):
    assert not MessageValidator(CONTRACT).is_valid(sender)


def test_rejection_is_logged_at_info(caplog):
    with caplog.at_level("INFO", logger="disaster_oracle"):
        assert not is_valid(OTHER, CONTRACT)
    assert "Ignoring request from non-deployed contract" in caplog.text
    assert caplog.records[-1].levelname == "INFO"


def test_validator_requires_address():
    with pytest.raises(ValueError):
        MessageValidator("")
