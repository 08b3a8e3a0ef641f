"""
Graph assembly across the whole catalog.

Merges every record's extracted (course, weight) pairs into one node/link
graph, drops nodes that ended up without links and sizes the rest by how many
courses they lead to.
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from ..config.constants import GraphConfig, SchemaConfig
from ..models.course import ParsedCourseRequirements
from ..models.graph import CourseGraph, GraphLink, GraphNode
from .depth import compute_depths
from .extractor import extract_weighted, round_link_value

logger = logging.getLogger(__name__)


def node_size(out_degree: int, max_out_degree: int) -> float:
    """
    Visual size for a node with ``out_degree`` outgoing links.

    Scales logarithmically from 1.00 to 3.00 relative to the catalog maximum
    and rounds up to the next 0.20 step.
    """
    if out_degree == 0:
        return GraphConfig.MIN_NODE_SIZE
    scaled = 1 + (2 * math.log(out_degree + 1) / math.log(max_out_degree + 1))
    clamped = max(GraphConfig.MIN_NODE_SIZE, min(GraphConfig.MAX_NODE_SIZE, scaled))
    rounded_up = math.ceil(clamped / GraphConfig.NODE_SIZE_STEP) * GraphConfig.NODE_SIZE_STEP
    return round_link_value(rounded_up)


def _display_title(record: ParsedCourseRequirements) -> Optional[str]:
    return getattr(record, "original_title", None) or None


class GraphAssembler:
    """Builds a CourseGraph from schema-valid parsed records."""

    def __init__(self, prune: bool = True):
        """
        Args:
            prune: Drop nodes that take part in no link
        """
        self.prune = prune
        self.logger = logging.getLogger(self.__class__.__name__)

    def assemble(self, records: Iterable[ParsedCourseRequirements]) -> CourseGraph:
        records = list(records)

        titles: Dict[str, Optional[str]] = {
            record.course_id: _display_title(record) for record in records
        }
        depths = compute_depths(records)

        nodes: Dict[str, GraphNode] = {}
        links: Dict[Tuple[str, str], GraphLink] = {}

        for record in records:
            target_id = record.course_id
            if target_id not in nodes:
                nodes[target_id] = GraphNode(
                    id=target_id,
                    title=titles.get(target_id) or target_id,
                    group=record.department,
                    depth=depths.get(target_id, 0),
                )

            for name in SchemaConfig.GRAPH_FIELDS:
                tree = getattr(record, name)
                if tree is None:
                    continue
                for source_id, value in extract_weighted(tree, GraphConfig.BASE_LINK_VALUE):
                    if source_id not in nodes:
                        nodes[source_id] = GraphNode(
                            id=source_id,
                            title=titles.get(source_id) or source_id,
                            group=source_id.split(" ")[0] or "UNKNOWN",
                            depth=depths.get(source_id, 0),
                        )
                    self._merge_link(links, source_id, target_id, round_link_value(value))

        link_list = list(links.values())
        node_list = list(nodes.values())
        if self.prune:
            node_list = self._prune(node_list, link_list)
        self._size(node_list, link_list)

        self.logger.info(f"Assembled {len(node_list)} nodes and {len(link_list)} links "
                         f"from {len(records)} records")
        return CourseGraph(nodes=node_list, links=link_list)

    # ========================================
    # ASSEMBLY STEPS
    # ========================================

    @staticmethod
    def _merge_link(links: Dict[Tuple[str, str], GraphLink], source: str, target: str, value: float) -> None:
        """Keep only the highest-valued link per (source, target) pair."""
        key = (source, target)
        existing = links.get(key)
        if existing is None or existing.value < value:
            links[key] = GraphLink(source=source, target=target, value=value)

    def _prune(self, nodes: List[GraphNode], links: List[GraphLink]) -> List[GraphNode]:
        linked = set()
        for link in links:
            linked.add(link.source)
            linked.add(link.target)
        kept = [node for node in nodes if node.id in linked]
        self.logger.debug(f"Pruned {len(nodes) - len(kept)} isolated nodes")
        return kept

    @staticmethod
    def _size(nodes: List[GraphNode], links: List[GraphLink]) -> None:
        out_degrees: Dict[str, int] = {}
        for link in links:
            out_degrees[link.source] = out_degrees.get(link.source, 0) + 1
        max_out_degree = max([*out_degrees.values(), 1])
        for node in nodes:
            node.size = node_size(out_degrees.get(node.id, 0), max_out_degree)


def assemble(records: Iterable[ParsedCourseRequirements]) -> CourseGraph:
    """Assemble the pruned, sized course graph for ``records``."""
    return GraphAssembler().assemble(records)
