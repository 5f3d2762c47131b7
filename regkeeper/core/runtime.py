# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Catalog compilation.

1. Bind declared resources to a catalog (aliases registered)
2. Add explicit 'require' and autorequire edges
3. Run purge generation for every registry_key and insert the results
4. Compute evaluation levels
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from .autorequire import autorequire
from .base_provider import RegistryProvider
from .catalog import Catalog
from .exceptions import ProviderError
from .parsers.manifest import ManifestParser
from .purge import PurgeEngine
from .resources import KEY_TYPE, Resource

logger = logging.getLogger("regkeeper.runtime")


@dataclass
class Plan:
    """Result of compiling a set of declarations"""

    catalog: Catalog
    levels: List[List[str]] = field(default_factory=list)
    generated: List[Resource] = field(default_factory=list)
    failures: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": [r.to_dict() for r in self.catalog.resources()],
            "levels": self.levels,
            "purged": [r.title for r in self.generated],
            "failures": self.failures,
        }


def _add_relationships(catalog: Catalog, resource: Resource):
    for ref in resource.require:
        catalog.add_edge(catalog.resolve_ref(ref), resource)
    for required in autorequire(resource, catalog):
        catalog.add_edge(required, resource)


def compile_catalog(
    resources: Iterable[Resource],
    provider: RegistryProvider,
    fail_fast: bool = False,
) -> Plan:
    """
    Build a catalog, generate purge removals and order everything.

    Args:
        resources: Declared resources
        provider: Live store used for purge generation
        fail_fast: Propagate the first ProviderError instead of recording it

    Returns:
        Plan

    Raises:
        DuplicateResourceError, UnknownResourceError: On bad declarations
        DAGCycleError: If explicit requirements form a cycle
        ProviderError: Only when fail_fast is set
    """
    catalog = Catalog()
    declared = [catalog.add_resource(resource) for resource in resources]
    for resource in declared:
        _add_relationships(catalog, resource)

    plan = Plan(catalog=catalog)
    engine = PurgeEngine(catalog, provider)

    for key_resource in catalog.resources(KEY_TYPE):
        try:
            removals = engine.generate(key_resource)
        except ProviderError as e:
            if fail_fast:
                raise
            plan.failures[key_resource.ref] = e.to_dict()
            continue

        for removal in removals:
            if catalog.lookup(removal.type, removal.aliases[0]) is not None:
                logger.debug(f"Skipping {removal.ref}; already declared")
                continue
            catalog.add_resource(removal)
            catalog.add_edge(key_resource, removal)
            plan.generated.append(removal)

    plan.levels = catalog.relationship_graph.get_execution_levels()
    logger.info(
        f"Compiled {len(catalog)} resources "
        f"({len(plan.generated)} purged, {len(plan.failures)} failed)"
    )
    return plan


def compile_file(
    manifest_path: Union[str, Path],
    provider: RegistryProvider,
    fail_fast: bool = False,
) -> Plan:
    """Load a manifest and compile it"""
    resources = ManifestParser.parse_file(manifest_path)
    logger.debug(f"Loaded {len(resources)} declarations from {manifest_path}")
    return compile_catalog(resources, provider, fail_fast=fail_fast)
