# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Resource catalog.

Stores declared and generated resources, their case-folded aliases, and the
relationship graph between them. Windows paths are case-insensitive but
case-preserving, so every resource is also reachable through the folded
form of its path: 'HKLM\\SOFTWARE' and 'hklm\\Software' name the same key.
"""

import logging
from typing import Dict, List, Optional

from .dag import ResourceGraph
from .exceptions import (
    DuplicateResourceError,
    PathSyntaxError,
    UnknownResourceError,
)
from .resources import RESOURCE_TYPES, Resource, make_ref

logger = logging.getLogger("regkeeper.catalog")


class Catalog:
    """In-memory catalog of resources with alias-based identity"""

    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._aliases: Dict[str, Resource] = {}
        self.relationship_graph = ResourceGraph()

    def add_resource(self, resource: Resource) -> Resource:
        """
        Bind a resource to this catalog and register its aliases.

        Raises:
            DuplicateResourceError: If the title or an alias is already taken
        """
        if resource.ref in self._resources:
            raise DuplicateResourceError(
                f"Duplicate declaration: {resource.ref} is already declared",
                details={"ref": resource.ref},
            )

        # Check first so a rejected resource leaves no partial aliases behind
        for alias in resource.aliases:
            self._check_alias(resource, alias)

        self._resources[resource.ref] = resource
        self.relationship_graph.add_node(resource.ref)
        for alias in resource.aliases:
            self.register_alias(resource, alias)

        return resource

    def _check_alias(self, resource: Resource, alias: str):
        existing = self._aliases.get(make_ref(resource.type, alias))
        if existing is not None and existing.ref != resource.ref:
            raise DuplicateResourceError(
                f"Cannot alias {resource.ref} to {alias!r}; "
                f"resource {existing.ref} already declared",
                details={"ref": resource.ref, "alias": alias, "existing": existing.ref},
            )

    def register_alias(self, resource: Resource, alias: str):
        """Record an additional identity for `resource`"""
        self._check_alias(resource, alias)
        self._aliases[make_ref(resource.type, alias)] = resource
        logger.debug(f"Aliased {resource.ref} to {alias!r}")

    def lookup(self, resource_type: str, folded: str) -> Optional[Resource]:
        """Resolve a resource by its title or a registered alias"""
        resource = self._resources.get(make_ref(resource_type, folded))
        if resource is not None:
            return resource
        return self._aliases.get(make_ref(resource_type, folded))

    def resource(self, resource_type: str, title: str) -> Optional[Resource]:
        """Resolve a resource by title, falling back to its folded alias"""
        return self.lookup(resource_type, title) or self.lookup(
            resource_type, title.casefold()
        )

    def resolve_ref(self, ref: str) -> Resource:
        """
        Resolve a 'type[title]' reference.

        Raises:
            UnknownResourceError: If the reference is malformed or unknown
        """
        resource_type, sep, rest = ref.partition("[")
        if not sep or not rest.endswith("]"):
            raise UnknownResourceError(
                f"Malformed resource reference {ref!r}; expected type[title]",
                details={"ref": ref},
            )
        resource_type = resource_type.strip().lower()
        title = rest[:-1]
        resource = self.resource(resource_type, title)
        if resource is None and resource_type in RESOURCE_TYPES:
            try:
                folded = RESOURCE_TYPES[resource_type].folded_title(title)
            except PathSyntaxError as e:
                raise UnknownResourceError(
                    f"Could not find resource {ref!r} in the catalog",
                    details={"ref": ref},
                    cause=e,
                ) from e
            resource = self.lookup(resource_type, folded)
        if resource is None:
            raise UnknownResourceError(
                f"Could not find resource {ref!r} in the catalog",
                details={"ref": ref},
            )
        return resource

    def resources(self, resource_type: Optional[str] = None) -> List[Resource]:
        """Resources in insertion order, optionally filtered by type"""
        return [
            r
            for r in self._resources.values()
            if resource_type is None or r.type == resource_type
        ]

    def add_edge(self, before: Resource, after: Resource):
        """`after` must be realized after `before`"""
        self.relationship_graph.add_edge(before.ref, after.ref)

    def direct_dependents_of(self, resource: Resource) -> List[Resource]:
        return [
            self._resources[ref]
            for ref in self.relationship_graph.direct_dependents_of(resource.ref)
        ]

    def __len__(self) -> int:
        return len(self._resources)
