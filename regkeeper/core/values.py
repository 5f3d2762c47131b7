# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Registry value paths: a key path plus a value name.

    HKLM\\Software\\Vendor\\Setting    -> key HKLM\\Software\\Vendor, value 'Setting'
    HKLM\\Software\\Vendor\\           -> key HKLM\\Software\\Vendor, default value
    HKLM\\Software\\\\Path\\To\\Name   -> key HKLM\\Software, value 'Path\\To\\Name'

A double separator marks where the key ends, which lets value names contain
backslashes.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from .exceptions import PathSyntaxError
from .paths import SEPARATOR, KeyPath, parse

VALUE_DELIMITER = SEPARATOR * 2


@dataclass(frozen=True)
class ValuePath:
    """Registry value location; an empty name is the key's default value"""

    key: KeyPath
    value_name: str = ""

    @property
    def is_default(self) -> bool:
        return self.value_name == ""

    @property
    def canonical(self) -> str:
        return compose(self.key, self.value_name)

    @property
    def aliases(self) -> Tuple[str, ...]:
        return (self.canonical.casefold(),)

    def __str__(self) -> str:
        return self.canonical


def parse_value_path(raw: Any) -> ValuePath:
    """
    Split a combined key+value path.

    Args:
        raw: Value path string

    Returns:
        ValuePath

    Raises:
        PathSyntaxError: If the key part is invalid or there is no separator
    """
    if not isinstance(raw, str):
        raise PathSyntaxError("value path must be a string", fragment=raw, path=raw)

    if VALUE_DELIMITER in raw:
        key_part, _, value_name = raw.partition(VALUE_DELIMITER)
    elif SEPARATOR in raw:
        key_part, _, value_name = raw.rpartition(SEPARATOR)
    else:
        raise PathSyntaxError(
            "value path must contain a key and a value name", fragment=raw, path=raw
        )

    try:
        key = parse(key_part)
    except PathSyntaxError as e:
        raise PathSyntaxError(e.reason, fragment=e.fragment, path=raw) from e

    return ValuePath(key=key, value_name=value_name)


def compose(key: KeyPath, value_name: str) -> str:
    """Build the value path string that parse_value_path() splits back"""
    if SEPARATOR in value_name:
        return key.canonical + VALUE_DELIMITER + value_name
    return key.canonical + SEPARATOR + value_name
