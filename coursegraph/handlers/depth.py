"""
Prerequisite depth calculation.

A course's depth is the number of sequential prerequisite layers between
having nothing and being eligible for it. Depths are computed from a map of
already-known depths, so the result depends on the order in which courses are
visited: a prerequisite that has not been computed yet reads as 0.
"""

from typing import Iterable, Mapping, MutableMapping, Optional

from ..config.constants import SchemaConfig
from ..models.course import ParsedCourseRequirements
from ..models.requirements import (
    CourseRequirement,
    GroupLogic,
    HSCourseRequirement,
    RequirementGroup,
    RequirementNode,
)


def depth_of(node: RequirementNode, known_depths: Mapping[str, int]) -> int:
    """
    Compute the depth a requirement tree imposes.

    Args:
        node: Root of a schema-valid requirement tree
        known_depths: Depths of courses computed so far, keyed by course id

    Returns:
        Depth of the tree; 0 when it references no known prerequisite chain
    """
    if isinstance(node, CourseRequirement):
        # Unknown and "no prerequisites" are deliberately the same here
        return known_depths.get(node.course_id, 0) + 1

    if isinstance(node, HSCourseRequirement):
        return 1

    if isinstance(node, RequirementGroup):
        depths = [depth_of(child, known_depths) for child in node.children]
        depths = sorted(depth for depth in depths if depth > 0)
        if not depths:
            return 0
        if node.logic is GroupLogic.ONE_OF:
            return depths[0]
        if node.logic is GroupLogic.TWO_OF:
            return depths[1] if len(depths) >= 2 else depths[0]
        return depths[-1]

    return 0


def record_depth(record: ParsedCourseRequirements, known_depths: Mapping[str, int]) -> int:
    """Depth of a course: the deeper of its prerequisite and corequisite trees."""
    depth = 0
    for name in SchemaConfig.GRAPH_FIELDS:
        tree: Optional[RequirementNode] = getattr(record, name)
        if tree is not None:
            depth = max(depth, depth_of(tree, known_depths))
    return depth


def compute_depths(records: Iterable[ParsedCourseRequirements],
                   known_depths: Optional[MutableMapping[str, int]] = None) -> MutableMapping[str, int]:
    """
    Compute depths for a catalog in listing order.

    Every record starts at depth 0, then each record's depth is computed once
    from the depths assigned to records visited before it.
    """
    records = list(records)
    depths: MutableMapping[str, int] = known_depths if known_depths is not None else {}
    for record in records:
        depths[record.course_id] = 0
    for record in records:
        depths[record.course_id] = record_depth(record, depths)
    return depths
