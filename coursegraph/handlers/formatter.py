"""
Human-readable rendering of requirement trees.

``outline`` produces an indented tree for logs and review; ``outline_record``
adds every section and the credit conflicts of a parsed record.
"""

from typing import List, Union

from ..models.course import ParsedCourseRequirements
from ..models.requirements import (
    CGPARequirement,
    ConflictCourse,
    CourseCountRequirement,
    CourseRequirement,
    CreditConflict,
    CreditCountRequirement,
    HSCourseRequirement,
    OtherRequirement,
    PermissionRequirement,
    ProgramRequirement,
    RequirementGroup,
    RequirementNode,
    UDGPARequirement,
)

INDENT = "  "


def _departments(department: Union[str, List[str], None], fallback: str) -> str:
    if not department:
        return fallback
    return ", ".join(department) if isinstance(department, list) else department


def _concurrent(flag: bool) -> str:
    return " (can be taken concurrently)" if flag else ""


# ========================================
# INDENTED OUTLINE
# ========================================

def outline(node: RequirementNode, indent: int = 0) -> str:
    """Render ``node`` as an indented multi-line outline."""
    prefix = INDENT * indent

    if isinstance(node, RequirementGroup):
        lines = [f"{prefix}Group ({node.logic.value}):"]
        lines.extend(outline(child, indent + 1) for child in node.children)
        return "\n".join(lines)
    if isinstance(node, CourseRequirement):
        grade = f' (minimum "{node.min_grade}")' if node.min_grade else ""
        equivalent = " (or equivalent)" if node.or_equivalent else ""
        return f"{prefix}{node.course_id}{grade}{_concurrent(node.can_be_taken_concurrently)}{equivalent}"
    if isinstance(node, HSCourseRequirement):
        grade = f' (minimum "{node.min_grade}")' if node.min_grade else ""
        equivalent = " (or equivalent)" if node.or_equivalent else ""
        return f"{prefix}High School: {node.course}{grade}{equivalent}"
    if isinstance(node, CreditCountRequirement):
        scope = f" in {_departments(node.department, '')}" if node.department else ""
        level = f" level {node.level.value}" if node.level else ""
        return f"{prefix}{node.credits} units{scope}{level}{_concurrent(node.can_be_taken_concurrently)}."
    if isinstance(node, CourseCountRequirement):
        noun = "course" if node.count == 1 else "courses"
        level = f" level {node.level.value}" if node.level else ""
        grade = f' (minimum "{node.min_grade}")' if node.min_grade else ""
        return (f"{prefix}{node.count} {noun} from {_departments(node.department, 'any department')}"
                f"{level}{grade}{_concurrent(node.can_be_taken_concurrently)}")
    if isinstance(node, CGPARequirement):
        return f"{prefix}CGPA of {node.min_cgpa}"
    if isinstance(node, UDGPARequirement):
        return f"{prefix}Upper Division GPA of {node.min_udgpa}"
    if isinstance(node, ProgramRequirement):
        return f"{prefix}Program: {node.program}"
    if isinstance(node, PermissionRequirement):
        return f"{prefix}Permission: {node.note}"
    if isinstance(node, OtherRequirement):
        return f"{prefix}Other: {node.note}"
    return f"{prefix}Unknown requirement type"


def describe_conflict(conflict: CreditConflict) -> str:
    if isinstance(conflict, ConflictCourse):
        title = f' under the title "{conflict.title}"' if conflict.title else ""
        return f"{conflict.department} {conflict.number}{title}"
    return conflict.note


def outline_record(record: ParsedCourseRequirements) -> str:
    """Render every requirement section of a parsed record."""
    sections = [f"{record.course_id} ({record.schema_version})"]
    for name, tree in record.requirement_trees().items():
        sections.append(f"{name.replace('_', ' ').title()}:")
        sections.append(outline(tree, 1))
    if record.credit_conflicts:
        sections.append("Credit Conflicts:")
        sections.extend(f"{INDENT}{describe_conflict(c)}" for c in record.credit_conflicts)
    return "\n".join(sections)
