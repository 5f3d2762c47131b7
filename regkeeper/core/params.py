# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Boolean parameter validation and munging shared by resource declarations.

Accepted: True, False, None, and the strings 'true' / 'false' in any case.
"""

from typing import Any

from .exceptions import FlagFormatError


def validate_boolean(value: Any, parameter: str = "purge_values") -> bool:
    """
    Check that `value` belongs to the true/false vocabulary.

    Raises:
        FlagFormatError: carrying the offending literal
    """
    if value is None or value is True or value is False:
        return True
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return True
    raise FlagFormatError(value, parameter=parameter)


def munge_boolean(value: Any) -> bool:
    """Map true-ish literals to True and everything else to False"""
    if value is True:
        return True
    return isinstance(value, str) and value.lower() == "true"


def resolve_boolean(value: Any, parameter: str = "purge_values") -> bool:
    validate_boolean(value, parameter)
    return munge_boolean(value)
