# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Registry key path grammar.

Syntax:
    [32:|64:]<hive>[\\<segment>[\\<segment>...]]

- Hive: HKLM / HKEY_LOCAL_MACHINE or HKCR / HKEY_CLASSES_ROOT (any case)
- '32:' selects the 32-bit registry view on a 64-bit system; '64:' is the
  native view and is dropped from the canonical form
- Trailing separators are trimmed, empty segments are rejected

Windows keys are case-insensitive but case-preserving, so a KeyPath keeps
the declared casing in `canonical` and exposes case-folded `aliases` for
identity matching.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Tuple

from .exceptions import PathSyntaxError

SEPARATOR = "\\"
PREFIX_DELIMITER = ":"

# WOW64 access flags passed to RegOpenKeyEx by providers
KEY_WOW64_64KEY = 0x0100
KEY_WOW64_32KEY = 0x0200


class Hive(Enum):
    """Supported predefined root keys"""

    LOCAL_MACHINE = "HKLM"
    CLASSES_ROOT = "HKCR"

    @property
    def token(self) -> str:
        return self.value

    @property
    def long_name(self) -> str:
        return _LONG_NAMES[self]


class BitWidth(Enum):
    """Registry view selected by the path prefix"""

    NATIVE = "64"
    THIRTY_TWO = "32"

    @property
    def prefix(self) -> str:
        """Canonical prefix; only the 32-bit view needs one"""
        if self is BitWidth.THIRTY_TWO:
            return self.value + PREFIX_DELIMITER
        return ""

    @property
    def access(self) -> int:
        if self is BitWidth.THIRTY_TWO:
            return KEY_WOW64_32KEY
        return KEY_WOW64_64KEY


_LONG_NAMES = {
    Hive.LOCAL_MACHINE: "HKEY_LOCAL_MACHINE",
    Hive.CLASSES_ROOT: "HKEY_CLASSES_ROOT",
}

HIVE_NAMES = {
    "hklm": Hive.LOCAL_MACHINE,
    "hkey_local_machine": Hive.LOCAL_MACHINE,
    "hkcr": Hive.CLASSES_ROOT,
    "hkey_classes_root": Hive.CLASSES_ROOT,
}

# Predefined roots that exist on Windows but are not managed here
UNSUPPORTED_ROOTS = {
    "hkcu",
    "hkey_current_user",
    "hku",
    "hkey_users",
    "hkcc",
    "hkey_current_config",
    "hkey_performance_data",
}

BIT_WIDTH_PREFIXES = {
    "32": BitWidth.THIRTY_TWO,
    "64": BitWidth.NATIVE,
}


@dataclass(frozen=True)
class KeyPath:
    """Immutable, parsed registry key location"""

    hive: Hive
    segments: Tuple[str, ...] = ()
    bit_width: BitWidth = BitWidth.NATIVE

    @property
    def canonical(self) -> str:
        root = self.bit_width.prefix + self.hive.token
        if not self.segments:
            return root
        return root + SEPARATOR + SEPARATOR.join(self.segments)

    @property
    def folded(self) -> str:
        """Case-folded canonical form used as the namespace identity"""
        return self.canonical.casefold()

    @property
    def aliases(self) -> Tuple[str, ...]:
        return (self.folded,)

    @property
    def access(self) -> int:
        return self.bit_width.access

    def ascend(self) -> Iterator["KeyPath"]:
        """Yield ancestors from the immediate parent up to the hive root"""
        for depth in range(len(self.segments) - 1, -1, -1):
            yield KeyPath(self.hive, self.segments[:depth], self.bit_width)

    def __str__(self) -> str:
        return self.canonical


def _parse_hive(token: str, raw: str) -> Hive:
    if token == "":
        raise PathSyntaxError("path must start with a hive", fragment=raw, path=raw)

    hive = HIVE_NAMES.get(token.lower())
    if hive is not None:
        return hive

    if token.lower() in UNSUPPORTED_ROOTS:
        raise PathSyntaxError("unsupported predefined key", fragment=token, path=raw)
    raise PathSyntaxError("unknown hive", fragment=token, path=raw)


def parse(raw: Any) -> KeyPath:
    """
    Parse a registry key path.

    Args:
        raw: Path string, e.g. 'HKLM\\Software' or '32:HKEY_CLASSES_ROOT\\CLSID'

    Returns:
        KeyPath

    Raises:
        PathSyntaxError: If the string does not match the grammar
    """
    if not isinstance(raw, str):
        raise PathSyntaxError("path must be a string", fragment=raw, path=raw)

    path = raw.rstrip(SEPARATOR)
    if path == "":
        raise PathSyntaxError("empty path", fragment=raw, path=raw)

    head, _, tail = path.partition(SEPARATOR)

    bit_width = BitWidth.NATIVE
    if PREFIX_DELIMITER in head:
        width_token, _, head = head.partition(PREFIX_DELIMITER)
        if width_token not in BIT_WIDTH_PREFIXES:
            raise PathSyntaxError(
                "unsupported bit-width prefix",
                fragment=width_token + PREFIX_DELIMITER,
                path=raw,
            )
        bit_width = BIT_WIDTH_PREFIXES[width_token]

    hive = _parse_hive(head, raw)

    segments: Tuple[str, ...] = ()
    if tail:
        segments = tuple(tail.split(SEPARATOR))
        if "" in segments:
            raise PathSyntaxError(
                "empty path segment (consecutive separators)",
                fragment=SEPARATOR * 2,
                path=raw,
            )

    return KeyPath(hive=hive, segments=segments, bit_width=bit_width)


def validate(raw: Any) -> bool:
    """Non-throwing syntax check"""
    try:
        parse(raw)
    except PathSyntaxError:
        return False
    return True


def canonicalize(raw: Any) -> str:
    return parse(raw).canonical


def ascend(key: KeyPath) -> Iterator[KeyPath]:
    """Ancestor chain of `key`, nearest first, ending at the hive root"""
    return key.ascend()
