"""Data models for the assembled course dependency graph."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass
class GraphNode:
    """One distinct course (or high-school course) in the graph."""

    id: str
    title: str
    group: str
    size: float = 1.0
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GraphLink:
    """A prerequisite/corequisite edge from ``source`` to ``target``."""

    source: str
    target: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CourseGraph:
    """Pruned and sized nodes plus deduplicated links."""

    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)

    def out_degrees(self) -> Dict[str, int]:
        """Count of links leaving each source node."""
        return dict(Counter(link.source for link in self.links))

    def department_counts(self) -> Dict[str, int]:
        return dict(Counter(node.group for node in self.nodes))

    def depth_distribution(self) -> Dict[int, int]:
        return dict(sorted(Counter(node.depth for node in self.nodes).items()))

    def deepest(self, limit: int = 5) -> List[GraphNode]:
        """Nodes with a positive depth, deepest first."""
        deep = [node for node in self.nodes if node.depth > 0]
        return sorted(deep, key=lambda node: node.depth, reverse=True)[:limit]

    def node(self, node_id: str) -> GraphNode:
        for candidate in self.nodes:
            if candidate.id == node_id:
                return candidate
        raise KeyError(node_id)
