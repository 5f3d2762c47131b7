# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Autorequire: order nested resources after their nearest managed parent key.

Windows creates missing intermediate keys on its own, so only keys that are
actually declared in the catalog take part. Matching is done against the
case-folded path because every key aliases itself to that form.
"""

from typing import Callable, List, Optional, TypeVar

from .paths import KeyPath
from .resources import KEY_TYPE, VALUE_TYPE, Resource

Ref = TypeVar("Ref")


def nearest_managed_ancestor(
    key: KeyPath, lookup: Callable[[str], Optional[Ref]]
) -> Optional[Ref]:
    """
    Find the closest ancestor of `key` known to `lookup`.

    Args:
        key: Key whose ancestors are searched (the key itself is skipped)
        lookup: Resolves a case-folded canonical path to a ref or None

    Returns:
        First ref found walking from the parent up to the hive root, or None
    """
    for ancestor in key.ascend():
        found = lookup(ancestor.folded)
        if found is not None:
            return found
    return None


def nearest_managed_key(
    key: KeyPath, lookup: Callable[[str], Optional[Ref]]
) -> Optional[Ref]:
    """Like nearest_managed_ancestor(), but `key` itself is tried first"""
    found = lookup(key.folded)
    if found is not None:
        return found
    return nearest_managed_ancestor(key, lookup)


def autorequire(resource: Resource, catalog) -> List[Resource]:
    """Resources that `resource` must be realized after"""

    def lookup(folded: str) -> Optional[Resource]:
        return catalog.lookup(KEY_TYPE, folded)

    if resource.type == KEY_TYPE:
        found = nearest_managed_ancestor(resource.path, lookup)
    elif resource.type == VALUE_TYPE:
        found = nearest_managed_key(resource.path.key, lookup)
    else:
        found = None

    return [found] if found is not None else []
