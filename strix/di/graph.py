"""
Graph analysis and cycle detection for DI system.

Works on declared metadata only; nothing is instantiated.
"""

from typing import Dict, List, Optional, Set
from collections import defaultdict, deque

from ..faults import qualname
from .container import Container
from .errors import CyclicDependencyError


class DependencyGraph:
    """
    Build and analyze the provider dependency graph.

    Uses Tarjan's algorithm for cycle detection.
    """

    def __init__(self):
        self.adj_list: Dict[type, List[type]] = defaultdict(list)  # token -> [dependencies]
        self.providers: Dict[type, None] = {}  # ordered set of nodes
        self._index_counter = 0
        self._stack: List[type] = []
        self._lowlinks: Dict[type, int] = {}
        self._index: Dict[type, int] = {}
        self._on_stack: Set[type] = set()
        self._sccs: List[List[type]] = []

    @classmethod
    def from_container(cls, container: Container) -> "DependencyGraph":
        """Graph of every provider registered in ``container``."""
        graph = cls()
        for provider in container.providers:
            graph.add_provider(provider, list(container.dependencies_of(provider)))
        return graph

    def add_provider(self, provider: type, dependencies: List[type]) -> None:
        self.providers[provider] = None
        self.adj_list[provider] = dependencies

    def missing(self) -> Dict[type, List[type]]:
        """Dependencies that no registered provider satisfies, by dependee."""
        return {
            token: [dep for dep in deps if dep not in self.providers]
            for token, deps in self.adj_list.items()
            if any(dep not in self.providers for dep in deps)
        }

    def detect_cycles(self) -> List[List[type]]:
        """
        Detect cycles using Tarjan's algorithm.

        Returns:
            List of strongly connected components that form cycles
        """
        self._index_counter = 0
        self._stack = []
        self._lowlinks = {}
        self._index = {}
        self._on_stack = set()
        self._sccs = []

        for token in self.providers:
            if token not in self._index:
                self._strongconnect(token)

        # Filter out trivial SCCs (single node with no self-loop)
        return [
            scc for scc in self._sccs
            if len(scc) > 1 or scc[0] in self.adj_list[scc[0]]
        ]

    def _strongconnect(self, token: type) -> None:
        self._index[token] = self._index_counter
        self._lowlinks[token] = self._index_counter
        self._index_counter += 1
        self._stack.append(token)
        self._on_stack.add(token)

        for dep in self.adj_list.get(token, []):
            if dep not in self.providers:
                continue

            if dep not in self._index:
                self._strongconnect(dep)
                self._lowlinks[token] = min(self._lowlinks[token], self._lowlinks[dep])
            elif dep in self._on_stack:
                self._lowlinks[token] = min(self._lowlinks[token], self._index[dep])

        if self._lowlinks[token] == self._index[token]:
            scc = []
            while True:
                w = self._stack.pop()
                self._on_stack.remove(w)
                scc.append(w)
                if w == token:
                    break
            scc.reverse()
            self._sccs.append(scc)

    def get_resolution_order(self) -> List[type]:
        """
        Topological order with every dependency before its dependents.

        Raises:
            CyclicDependencyError: If a cycle is detected
        """
        # Kahn's algorithm over "depends on" edges reversed
        remaining = {
            token: sum(1 for dep in self.adj_list[token] if dep in self.providers)
            for token in self.providers
        }
        dependents: Dict[type, List[type]] = defaultdict(list)
        for token in self.providers:
            for dep in self.adj_list[token]:
                if dep in self.providers:
                    dependents[dep].append(token)

        queue = deque(token for token, count in remaining.items() if count == 0)
        result = []

        while queue:
            token = queue.popleft()
            result.append(token)
            for dependent in dependents[token]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    queue.append(dependent)

        if len(result) != len(self.providers):
            cycles = self.detect_cycles()
            cycle = cycles[0]
            raise CyclicDependencyError(cycle + [cycle[0]])

        return result

    def get_tree_view(self, root: Optional[type] = None) -> str:
        """
        Text tree of dependencies, from ``root`` or from every provider
        nothing else depends on.
        """
        if root is not None:
            return self._tree_view_recursive(root, "", set())

        all_deps = set()
        for deps in self.adj_list.values():
            all_deps.update(deps)

        roots = [t for t in self.providers if t not in all_deps]
        if not roots:
            # Every provider sits on a cycle; start anywhere
            roots = list(self.providers)[:1]

        return "\n".join(self._tree_view_recursive(r, "", set()) for r in roots)

    def _tree_view_recursive(self, token: type, prefix: str, visited: Set[type]) -> str:
        if token in visited:
            return f"{prefix}├── {qualname(token)} (circular)"

        if token not in self.providers:
            return f"{prefix}├── {qualname(token)} (missing)"

        visited.add(token)

        lines = [f"{prefix}├── {qualname(token)}"]

        deps = self.adj_list.get(token, [])
        for i, dep in enumerate(deps):
            is_last = i == len(deps) - 1
            new_prefix = prefix + ("    " if is_last else "│   ")
            lines.append(self._tree_view_recursive(dep, new_prefix, visited.copy()))

        return "\n".join(lines)
