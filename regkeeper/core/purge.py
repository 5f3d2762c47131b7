# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Purge reconciliation for registry keys with purge_values enabled.

The values declared under a key (the "should" names) are compared with the
values the provider reports (the "is" names). Every present value nobody
declared gets an ensure=absent registry_value descriptor. Comparison is
case-insensitive, so a declared 'Setting' protects a stored 'SETTING'.

The engine only returns descriptors; inserting them into the catalog is the
caller's job.
"""

import logging
from typing import Iterable, List, Set

from .base_provider import RegistryProvider
from .exceptions import ProviderError
from .paths import KeyPath
from .resources import VALUE_TYPE, RegistryKey, RegistryValue
from .values import ValuePath

logger = logging.getLogger("regkeeper.purge")


def reconcile(
    key: KeyPath, should_names: Iterable[str], is_names: Iterable[str]
) -> List[ValuePath]:
    """
    Case-insensitive difference is_names - should_names.

    Args:
        key: Key both name sets belong to
        should_names: Declared value names
        is_names: Value names present in the store, in listing order

    Returns:
        Value paths to remove, in listing order, one per folded name
    """
    should = {name.casefold() for name in should_names}
    seen: Set[str] = set()
    removals = []

    for name in is_names:
        folded = name.casefold()
        if folded in should or folded in seen:
            continue
        seen.add(folded)
        removals.append(ValuePath(key=key, value_name=name))

    return removals


class PurgeEngine:
    """Generates removal descriptors for unmanaged values"""

    def __init__(self, catalog, provider: RegistryProvider):
        self.catalog = catalog
        self.provider = provider

    def should_names(self, key_resource: RegistryKey) -> Set[str]:
        """Folded names of the values declared as dependents of the key"""
        return {
            dependent.value_name.casefold()
            for dependent in self.catalog.direct_dependents_of(key_resource)
            if dependent.type == VALUE_TYPE
        }

    def generate(self, key_resource: RegistryKey) -> List[RegistryValue]:
        """
        Removal descriptors for `key_resource`.

        Returns:
            ensure=absent registry_value resources; empty if purging is off

        Raises:
            ProviderError: If the provider cannot list the key's values; no
                descriptors are produced for the key in that case
        """
        if not key_resource.purge_values:
            return []

        should = self.should_names(key_resource)

        try:
            is_names = list(self.provider.list_value_names(key_resource.path))
        except ProviderError as e:
            logger.error(f"Cannot purge {key_resource.ref}: {e}")
            raise

        removals = [
            RegistryValue.absent(value_path)
            for value_path in reconcile(key_resource.path, should, is_names)
        ]
        for removal in removals:
            logger.info(f"Purging unmanaged value {removal.title}")

        return removals
