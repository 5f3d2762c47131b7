# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

import pytest

from regkeeper.core.exceptions import FlagFormatError, ValidationError
from regkeeper.core.params import munge_boolean, resolve_boolean, validate_boolean


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, True),
        (False, False),
        (None, False),
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("false", False),
        ("FaLsE", False),
    ],
)
def test_resolve_boolean(value, expected):
    """Test the accepted true/false vocabulary"""
    assert validate_boolean(value)
    assert resolve_boolean(value) is expected


@pytest.mark.parametrize("literal", ["yes", "no", "1", "", 1, 0, "on"])
def test_invalid_literals(literal):
    """Test anything else is rejected with the literal in the message"""
    with pytest.raises(FlagFormatError) as exc_info:
        resolve_boolean(literal)

    assert exc_info.value.literal == literal
    assert str(literal) in exc_info.value.message
    assert exc_info.value.parameter == "purge_values"


def test_flag_error_is_validation_error():
    """Test the error fits the hierarchy and names the parameter"""
    with pytest.raises(ValidationError, match="other must be true or false, not maybe"):
        validate_boolean("maybe", parameter="other")


def test_munge_does_not_validate():
    """Test munging maps unknown values to False"""
    assert munge_boolean("yes") is False
    assert munge_boolean(True) is True
