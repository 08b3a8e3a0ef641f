"""
Weighted course extraction from requirement trees.

Link value logic:
- ALL_OF: each child keeps the parent value (every child is mandatory)
- ONE_OF: the value is split evenly across the alternatives
- TWO_OF: the value is doubled, then split across the alternatives

Only ``course`` and ``HSCourse`` leaves produce graph edges; credit counts,
GPA thresholds, programs and free-text notes are ignored.
"""

import math
from typing import List, NamedTuple

from ..config.constants import GraphConfig
from ..models.requirements import (
    CourseRequirement,
    GroupLogic,
    HSCourseRequirement,
    RequirementGroup,
    RequirementNode,
)


class WeightedCourse(NamedTuple):
    course: str
    value: float


def child_value(group: RequirementGroup, base_value: float) -> float:
    """Value each child of ``group`` inherits from a parent worth ``base_value``."""
    if group.logic is GroupLogic.ONE_OF:
        return base_value / len(group.children)
    if group.logic is GroupLogic.TWO_OF:
        return (base_value * 2) / len(group.children)
    return base_value


def extract_weighted(node: RequirementNode, base_value: float = GraphConfig.BASE_LINK_VALUE) -> List[WeightedCourse]:
    """
    Collect every referenced course with its link weight.

    Values are not rounded here; see ``round_link_value``.

    Args:
        node: Root of a schema-valid requirement tree
        base_value: Weight carried by ``node`` itself

    Returns:
        (course id, weight) pairs in depth-first order
    """
    if isinstance(node, CourseRequirement):
        return [WeightedCourse(node.course_id, base_value)]

    if isinstance(node, HSCourseRequirement):
        return [WeightedCourse(node.course_id, base_value)]

    if isinstance(node, RequirementGroup):
        courses: List[WeightedCourse] = []
        if not node.children:
            return courses
        value = child_value(node, base_value)
        for child in node.children:
            courses.extend(extract_weighted(child, value))
        return courses

    return []


def round_link_value(value: float) -> float:
    """Round half-up to two decimals."""
    return math.floor(value * 100 + 0.5) / 100
