"""
Requirement tree model.

Every course's enrollment logic is a tree of the node classes below. Each
class carries a fixed ``type`` discriminator that matches the JSON wire
format, so ``requirement_from_dict`` can dispatch on it and ``to_dict``
produces exactly what the oracle emits and the record store persists.

Flags that are encoded as the string ``"true"`` on the wire are plain
booleans here; unset optional fields are omitted from ``to_dict`` output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

from ..config.constants import GraphConfig

TRUE_FLAG = "true"


class GroupLogic(Enum):
    """How the children of a group combine."""
    ALL_OF = "ALL_OF"
    ONE_OF = "ONE_OF"
    TWO_OF = "TWO_OF"


class CourseLevel(Enum):
    """Course-number level scopes for count requirements."""
    LEVEL_1XX = "1XX"
    LEVEL_2XX = "2XX"
    LEVEL_3XX = "3XX"
    LEVEL_4XX = "4XX"
    LOWER_DIVISION = "LD"
    UPPER_DIVISION = "UD"


def _flag(value: Any) -> bool:
    return value == TRUE_FLAG


def _put_flag(result: Dict[str, Any], key: str, value: bool) -> None:
    if value:
        result[key] = TRUE_FLAG


def _put(result: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        result[key] = value


# ========================================
# NODE TYPES
# ========================================

@dataclass
class RequirementGroup:
    """A logical combination of child requirements."""

    type: ClassVar[str] = "group"

    logic: GroupLogic
    children: List["RequirementNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "logic": self.logic.value,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class CourseRequirement:
    """A specific catalog course."""

    type: ClassVar[str] = "course"

    department: str
    number: str
    min_grade: Optional[str] = None
    can_be_taken_concurrently: bool = False
    or_equivalent: bool = False

    @property
    def course_id(self) -> str:
        return f"{self.department} {self.number}"

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": self.type, "department": self.department, "number": self.number}
        _put(result, "minGrade", self.min_grade)
        _put_flag(result, "canBeTakenConcurrently", self.can_be_taken_concurrently)
        _put_flag(result, "orEquivalent", self.or_equivalent)
        return result


@dataclass
class HSCourseRequirement:
    """A secondary-school course; never has prerequisites of its own."""

    type: ClassVar[str] = "HSCourse"

    course: str
    min_grade: Optional[str] = None
    or_equivalent: bool = False

    @property
    def course_id(self) -> str:
        return f"{GraphConfig.HIGH_SCHOOL_PREFIX} {self.course}"

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": self.type, "course": self.course}
        _put(result, "minGrade", self.min_grade)
        _put_flag(result, "orEquivalent", self.or_equivalent)
        return result


@dataclass
class CreditCountRequirement:
    """A number of units, optionally scoped by department and level."""

    type: ClassVar[str] = "creditCount"

    credits: float
    department: Union[str, List[str], None] = None
    level: Optional[CourseLevel] = None
    min_grade: Optional[str] = None
    can_be_taken_concurrently: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": self.type, "credits": self.credits}
        _put(result, "department", self.department)
        if self.level is not None:
            result["level"] = self.level.value
        _put(result, "minGrade", self.min_grade)
        _put_flag(result, "canBeTakenConcurrently", self.can_be_taken_concurrently)
        return result


@dataclass
class CourseCountRequirement:
    """A number of courses, optionally scoped by department and level."""

    type: ClassVar[str] = "courseCount"

    count: float
    department: Union[str, List[str], None] = None
    level: Optional[CourseLevel] = None
    min_grade: Optional[str] = None
    can_be_taken_concurrently: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": self.type, "count": self.count}
        _put(result, "department", self.department)
        if self.level is not None:
            result["level"] = self.level.value
        _put(result, "minGrade", self.min_grade)
        _put_flag(result, "canBeTakenConcurrently", self.can_be_taken_concurrently)
        return result


@dataclass
class CGPARequirement:
    type: ClassVar[str] = "CGPA"

    min_cgpa: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "minCGPA": self.min_cgpa}


@dataclass
class UDGPARequirement:
    type: ClassVar[str] = "UDGPA"

    min_udgpa: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "minUDGPA": self.min_udgpa}


@dataclass
class ProgramRequirement:
    type: ClassVar[str] = "program"

    program: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "program": self.program}


@dataclass
class PermissionRequirement:
    type: ClassVar[str] = "permission"

    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "note": self.note}


@dataclass
class OtherRequirement:
    type: ClassVar[str] = "other"

    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "note": self.note}


RequirementNode = Union[
    RequirementGroup,
    CourseRequirement,
    HSCourseRequirement,
    CreditCountRequirement,
    CourseCountRequirement,
    CGPARequirement,
    UDGPARequirement,
    ProgramRequirement,
    PermissionRequirement,
    OtherRequirement,
]


# ========================================
# CREDIT CONFLICTS
# ========================================

@dataclass
class ConflictCourse:
    """A course that cannot also be taken for credit."""

    type: ClassVar[str] = "conflict_course"

    department: str
    number: str
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"type": self.type, "department": self.department, "number": self.number}
        _put(result, "title", self.title)
        return result


@dataclass
class ConflictOther:
    """A credit restriction that does not name a single course."""

    type: ClassVar[str] = "conflict_other"

    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "note": self.note}


CreditConflict = Union[ConflictCourse, ConflictOther]


# ========================================
# DICT DECODING
# ========================================

def _level(raw: Any) -> Optional[CourseLevel]:
    return CourseLevel(raw) if raw is not None else None


def requirement_from_dict(data: Dict[str, Any]) -> RequirementNode:
    """
    Build a typed requirement tree from its JSON form.

    Args:
        data: A dictionary that has already passed structural validation

    Returns:
        The root requirement node

    Raises:
        ValueError: If the discriminator is not a known requirement type
    """
    node_type = data.get("type")

    if node_type == RequirementGroup.type:
        return RequirementGroup(
            logic=GroupLogic(data["logic"]),
            children=[requirement_from_dict(child) for child in data["children"]],
        )
    if node_type == CourseRequirement.type:
        return CourseRequirement(
            department=data["department"],
            number=data["number"],
            min_grade=data.get("minGrade"),
            can_be_taken_concurrently=_flag(data.get("canBeTakenConcurrently")),
            or_equivalent=_flag(data.get("orEquivalent")),
        )
    if node_type == HSCourseRequirement.type:
        return HSCourseRequirement(
            course=data["course"],
            min_grade=data.get("minGrade"),
            or_equivalent=_flag(data.get("orEquivalent")),
        )
    if node_type == CreditCountRequirement.type:
        return CreditCountRequirement(
            credits=data["credits"],
            department=data.get("department"),
            level=_level(data.get("level")),
            min_grade=data.get("minGrade"),
            can_be_taken_concurrently=_flag(data.get("canBeTakenConcurrently")),
        )
    if node_type == CourseCountRequirement.type:
        return CourseCountRequirement(
            count=data["count"],
            department=data.get("department"),
            level=_level(data.get("level")),
            min_grade=data.get("minGrade"),
            can_be_taken_concurrently=_flag(data.get("canBeTakenConcurrently")),
        )
    if node_type == CGPARequirement.type:
        return CGPARequirement(min_cgpa=data["minCGPA"])
    if node_type == UDGPARequirement.type:
        return UDGPARequirement(min_udgpa=data["minUDGPA"])
    if node_type == ProgramRequirement.type:
        return ProgramRequirement(program=data["program"])
    if node_type == PermissionRequirement.type:
        return PermissionRequirement(note=data["note"])
    if node_type == OtherRequirement.type:
        return OtherRequirement(note=data["note"])

    raise ValueError(f"Unknown requirement type: {node_type!r}")


def credit_conflict_from_dict(data: Dict[str, Any]) -> CreditConflict:
    """Build a typed credit conflict from its JSON form."""
    conflict_type = data.get("type")
    if conflict_type == ConflictCourse.type:
        return ConflictCourse(
            department=data["department"],
            number=data["number"],
            title=data.get("title"),
        )
    if conflict_type == ConflictOther.type:
        return ConflictOther(note=data["note"])
    raise ValueError(f"Unknown credit conflict type: {conflict_type!r}")
