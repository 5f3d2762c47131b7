# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Resource declarations managed by RegKeeper.

- registry_key:   a key, optionally purging values nobody declared
- registry_value: a single named (or default) value under a key

Keys created by a provider get their missing parent keys created by
Windows automatically; keys are never deleted recursively.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import ValidationError
from .params import resolve_boolean
from .paths import KeyPath, parse
from .values import ValuePath, parse_value_path

KEY_TYPE = "registry_key"
VALUE_TYPE = "registry_value"


class Ensure(Enum):
    PRESENT = "present"
    ABSENT = "absent"


class ValueType(Enum):
    """Registry value data types"""

    STRING = "string"
    EXPAND = "expand"
    BINARY = "binary"
    DWORD = "dword"
    QWORD = "qword"
    ARRAY = "array"


def make_ref(resource_type: str, title: str) -> str:
    return f"{resource_type}[{title}]"


def _coerce_enum(enum_cls, value: Any, parameter: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationError(
            f"Invalid {parameter} {value!r}. Must be one of: {allowed}",
            field=parameter,
            value=value,
        )


def _coerce_require(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass
class Resource:
    """Common fields of a declared or generated resource"""

    type = ""

    @property
    def title(self) -> str:
        return self.path.canonical

    @property
    def ref(self) -> str:
        return make_ref(self.type, self.title)

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self.path.aliases

    def __str__(self) -> str:
        return self.ref


@dataclass
class RegistryKey(Resource):
    """Manages a registry key"""

    type = KEY_TYPE

    path: Union[str, KeyPath]
    ensure: Union[str, Ensure] = Ensure.PRESENT
    purge_values: Any = False
    require: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.path, KeyPath):
            self.path = parse(self.path)
        self.ensure = _coerce_enum(Ensure, self.ensure, "ensure")
        self.purge_values = resolve_boolean(self.purge_values, "purge_values")
        self.require = _coerce_require(self.require)

    @staticmethod
    def folded_title(title: str) -> str:
        return parse(title).folded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "path": self.title,
            "ensure": self.ensure.value,
            "purge_values": self.purge_values,
        }


@dataclass
class RegistryValue(Resource):
    """Manages a registry value"""

    type = VALUE_TYPE

    path: Union[str, ValuePath]
    ensure: Union[str, Ensure] = Ensure.PRESENT
    value_type: Union[str, ValueType] = ValueType.STRING
    data: Optional[Any] = None
    require: Tuple[str, ...] = ()
    generated: bool = False

    def __post_init__(self):
        if not isinstance(self.path, ValuePath):
            self.path = parse_value_path(self.path)
        self.ensure = _coerce_enum(Ensure, self.ensure, "ensure")
        self.value_type = _coerce_enum(ValueType, self.value_type, "type")
        self.require = _coerce_require(self.require)

    @staticmethod
    def folded_title(title: str) -> str:
        return parse_value_path(title).aliases[0]

    @property
    def key(self) -> KeyPath:
        return self.path.key

    @property
    def value_name(self) -> str:
        return self.path.value_name

    @classmethod
    def absent(cls, path: ValuePath) -> "RegistryValue":
        """Removal descriptor synthesized by purging"""
        return cls(path=path, ensure=Ensure.ABSENT, generated=True)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.type,
            "path": self.title,
            "ensure": self.ensure.value,
        }
        if self.ensure is Ensure.PRESENT:
            result["value_type"] = self.value_type.value
            result["data"] = self.data
        if self.generated:
            result["generated"] = True
        return result


RESOURCE_TYPES: Dict[str, type] = {
    KEY_TYPE: RegistryKey,
    VALUE_TYPE: RegistryValue,
}
