# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Core - Init file

Registry path model, catalog and purge reconciliation.
"""

from .autorequire import autorequire, nearest_managed_ancestor, nearest_managed_key
from .base_provider import RegistryProvider
from .catalog import Catalog
from .dag import ResourceGraph
from .exceptions import (
    FlagFormatError,
    PathSyntaxError,
    ProviderError,
    RegKeeperError,
)
from .params import munge_boolean, resolve_boolean, validate_boolean
from .parsers.manifest import ManifestParser
from .paths import BitWidth, Hive, KeyPath, ascend, canonicalize, parse, validate
from .purge import PurgeEngine, reconcile
from .registry import ProviderRegistry, get_registry
from .resources import Ensure, RegistryKey, RegistryValue, ValueType
from .runtime import Plan, compile_catalog, compile_file
from .values import ValuePath, compose, parse_value_path

__all__ = [
    # Paths
    "Hive",
    "BitWidth",
    "KeyPath",
    "parse",
    "validate",
    "canonicalize",
    "ascend",
    "ValuePath",
    "parse_value_path",
    "compose",
    # Resources
    "Ensure",
    "ValueType",
    "RegistryKey",
    "RegistryValue",
    "validate_boolean",
    "munge_boolean",
    "resolve_boolean",
    # Catalog
    "Catalog",
    "ResourceGraph",
    "autorequire",
    "nearest_managed_ancestor",
    "nearest_managed_key",
    # Reconciliation
    "PurgeEngine",
    "reconcile",
    "Plan",
    "compile_catalog",
    "compile_file",
    "ManifestParser",
    # Providers
    "RegistryProvider",
    "ProviderRegistry",
    "get_registry",
    # Errors
    "RegKeeperError",
    "PathSyntaxError",
    "FlagFormatError",
    "ProviderError",
]
