# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Relationship graph for catalog resources.
Edges point from a resource to the resources that must be realized after it.
"""

from collections import deque
from typing import Dict, List, Optional

from .exceptions import DAGCycleError, DAGValidationError


class ResourceGraph:
    """
    Directed Acyclic Graph of resource refs.

    Nodes and edges are kept in insertion order so that evaluation levels
    are deterministic.
    """

    def __init__(self):
        self.graph: Dict[str, Dict[str, Dict[str, None]]] = {}

    def add_node(self, ref: str):
        """Add a node (no-op if present)"""
        if ref not in self.graph:
            self.graph[ref] = {"dependencies": {}, "dependents": {}}

    def add_edge(self, before: str, after: str):
        """
        Record that `after` depends on `before`.

        Raises:
            DAGValidationError: If either node is unknown or before == after
        """
        for ref in (before, after):
            if ref not in self.graph:
                raise DAGValidationError(f"Edge refers to unknown resource '{ref}'")
        if before == after:
            raise DAGValidationError(f"Resource '{before}' cannot depend on itself")

        self.graph[after]["dependencies"][before] = None
        self.graph[before]["dependents"][after] = None

    def direct_dependents_of(self, ref: str) -> List[str]:
        """Refs that declare a direct dependency on `ref`"""
        return list(self.graph[ref]["dependents"])

    def find_cycle(self) -> Optional[List[str]]:
        """Return one dependency cycle as a list of refs, or None"""
        visited = set()
        stack: List[str] = []
        on_stack = set()

        def visit(node_id: str) -> Optional[List[str]]:
            visited.add(node_id)
            stack.append(node_id)
            on_stack.add(node_id)

            for dep in self.graph[node_id]["dependencies"]:
                if dep not in visited:
                    cycle = visit(dep)
                    if cycle:
                        return cycle
                elif dep in on_stack:
                    return stack[stack.index(dep):] + [dep]

            stack.pop()
            on_stack.remove(node_id)
            return None

        for node_id in self.graph:
            if node_id not in visited:
                cycle = visit(node_id)
                if cycle:
                    return cycle
        return None

    def validate_acyclic(self):
        cycle = self.find_cycle()
        if cycle:
            raise DAGCycleError(
                "Cycle detected in resource dependencies: " + " -> ".join(cycle),
                cycle=cycle,
            )

    def get_execution_levels(self) -> List[List[str]]:
        """
        Get evaluation levels.

        Returns:
            List of levels; every resource appears after all its dependencies

        Raises:
            DAGCycleError: If the graph has a cycle
        """
        self.validate_acyclic()

        levels = []
        in_degree = {
            node_id: len(node["dependencies"]) for node_id, node in self.graph.items()
        }
        queue = deque([node_id for node_id, degree in in_degree.items() if degree == 0])

        while queue:
            current_level = []
            level_size = len(queue)

            for _ in range(level_size):
                node_id = queue.popleft()
                current_level.append(node_id)

                for dependent in self.graph[node_id]["dependents"]:
                    in_degree[dependent] -= 1
                    if in_degree[dependent] == 0:
                        queue.append(dependent)

            levels.append(current_level)

        return levels
