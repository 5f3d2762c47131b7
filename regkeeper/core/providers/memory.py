# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
In-memory registry provider.

Holds a snapshot of keys and their values, loaded from YAML:

    'HKLM\\Software\\Vendor':
      Setting: hello
      '': default data
    '32:HKLM\\Software\\Vendor': {}

Keys and value names are matched case-insensitively; stored names keep
their case.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..base_provider import RegistryProvider
from ..exceptions import PathSyntaxError, ProviderError
from ..parsers.manifest import load_yaml_stream
from ..paths import KeyPath, parse


class MemoryProvider(RegistryProvider):
    """Provider backed by a dictionary snapshot"""

    def __init__(self, snapshot: Optional[Dict[str, Dict[str, Any]]] = None):
        super().__init__("memory")
        self._keys: Dict[str, Dict[str, Any]] = {}
        for key_path, values in (snapshot or {}).items():
            key = self._parse_key(key_path)
            if values is not None and not isinstance(values, dict):
                raise ProviderError(
                    f"Values of key {key_path!r} must be a mapping",
                    provider_name=self.provider_name,
                    key=str(key_path),
                )
            for name, data in (values or {}).items():
                self.set_value(key, str(name), data)
            self.create_key(key)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "MemoryProvider":
        """
        Load a YAML snapshot.

        Raises:
            ProviderError: If the file cannot be read or is malformed
        """
        path = Path(file_path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = load_yaml_stream(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ProviderError(
                f"Failed to load registry snapshot {path}: {e}",
                provider_name="memory",
                cause=e,
            )

        if not isinstance(data, dict):
            raise ProviderError(
                f"Registry snapshot {path} must be a mapping of key paths",
                provider_name="memory",
            )
        return cls(data)

    def _parse_key(self, key_path: Any) -> KeyPath:
        if isinstance(key_path, KeyPath):
            return key_path
        try:
            return parse(key_path)
        except PathSyntaxError as e:
            raise ProviderError(
                f"Invalid key in registry snapshot: {e.message}",
                provider_name=self.provider_name,
                key=str(key_path),
                cause=e,
            )

    def create_key(self, key: Union[str, KeyPath]):
        key = self._parse_key(key)
        self._keys.setdefault(key.folded, {})

    def set_value(self, key: Union[str, KeyPath], name: str, data: Any = None):
        key = self._parse_key(key)
        values = self._keys.setdefault(key.folded, {})
        for existing in list(values):
            if existing.casefold() == name.casefold():
                del values[existing]
        values[name] = data

    def list_value_names(self, key: KeyPath) -> List[str]:
        self.log_execution("list_value_names", key)
        names = list(self._keys.get(key.folded, {}))
        self.log_success("list_value_names", key, len(names))
        return names
