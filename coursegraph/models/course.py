"""Data models for catalog courses and their parsed requirement records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .requirements import (
    CreditConflict,
    RequirementNode,
    credit_conflict_from_dict,
    requirement_from_dict,
)
from ..config.constants import SchemaConfig


def course_key(department: str, number: str) -> str:
    """Canonical "DEPT NUM" identifier used for lookups and graph ids."""
    return f"{department} {number}"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class CourseInfo:
    """Condensed catalog entry: the source text the oracle parses."""

    department: str
    number: str
    title: str = ""
    notes: str = ""
    prerequisites: str = ""
    corequisites: str = ""

    def __post_init__(self):
        """Validate course information after initialization."""
        if not self.department.strip():
            raise ValueError("Course department cannot be empty")
        if not self.number.strip():
            raise ValueError("Course number cannot be empty")

    @property
    def course_id(self) -> str:
        return course_key(self.department, self.number)

    def has_requirements(self) -> bool:
        """Check if there is any requirement text worth parsing."""
        return bool(
            self.prerequisites.strip() or self.corequisites.strip() or self.notes.strip()
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "department": self.department,
            "number": self.number,
            "title": self.title,
            "notes": self.notes,
            "prerequisites": self.prerequisites,
            "corequisites": self.corequisites,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseInfo":
        """Create CourseInfo from a catalog outline or a stored entry."""
        return cls(
            department=str(data.get("department") or data.get("dept") or ""),
            number=str(data.get("number") or ""),
            title=data.get("title") or "",
            notes=data.get("notes") or "",
            prerequisites=data.get("prerequisites") or "",
            corequisites=data.get("corequisites") or "",
        )


@dataclass
class ParsedCourseRequirements:
    """The oracle's structured translation of one course's requirements."""

    department: str
    number: str
    schema_version: str = SchemaConfig.SCHEMA_VERSION
    prerequisite: Optional[RequirementNode] = None
    corequisite: Optional[RequirementNode] = None
    recommended_prerequisite: Optional[RequirementNode] = None
    recommended_corequisite: Optional[RequirementNode] = None
    credit_conflicts: Optional[List[CreditConflict]] = None

    @property
    def course_id(self) -> str:
        return course_key(self.department, self.number)

    def requirement_trees(self) -> Dict[str, RequirementNode]:
        """Return the tree-valued fields that are set, keyed by field name."""
        trees = {}
        for name in SchemaConfig.REQUIREMENT_FIELDS:
            tree = getattr(self, name)
            if tree is not None:
                trees[name] = tree
        return trees

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire representation."""
        result: Dict[str, Any] = {
            "department": self.department,
            "number": self.number,
            "schema_version": self.schema_version,
        }
        for name, tree in self.requirement_trees().items():
            result[name] = tree.to_dict()
        if self.credit_conflicts is not None:
            result["credit_conflicts"] = [c.to_dict() for c in self.credit_conflicts]
        return result

    @staticmethod
    def _decode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "department": data["department"],
            "number": data["number"],
            "schema_version": data["schema_version"],
        }
        for name in SchemaConfig.REQUIREMENT_FIELDS:
            if data.get(name) is not None:
                fields[name] = requirement_from_dict(data[name])
        if data.get("credit_conflicts") is not None:
            fields["credit_conflicts"] = [
                credit_conflict_from_dict(c) for c in data["credit_conflicts"]
            ]
        return fields

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedCourseRequirements":
        """Create from a dictionary that has passed structural validation."""
        return cls(**cls._decode_fields(data))


@dataclass
class CourseRecord(ParsedCourseRequirements):
    """A persisted parse result plus the source text it was parsed from."""

    original_title: str = ""
    original_prerequisites: str = ""
    original_corequisites: str = ""
    original_notes: str = ""
    timestamp: str = field(default_factory=utc_timestamp)

    def needs_reparsing(self, course: CourseInfo, schema_version: str = SchemaConfig.SCHEMA_VERSION) -> bool:
        """
        Decide whether the stored parse is stale.

        Staleness is exact string comparison of the source texts plus the
        schema version; the parsed trees themselves are never inspected.
        """
        return (
            self.original_title != course.title
            or self.original_prerequisites != course.prerequisites
            or self.original_corequisites != course.corequisites
            or self.original_notes != course.notes
            or self.schema_version != schema_version
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update({
            "original_title": self.original_title,
            "original_prerequisites": self.original_prerequisites,
            "original_corequisites": self.original_corequisites,
            "original_notes": self.original_notes,
            "timestamp": self.timestamp,
        })
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseRecord":
        fields = cls._decode_fields(data)
        fields.update(
            original_title=data.get("original_title") or "",
            original_prerequisites=data.get("original_prerequisites") or "",
            original_corequisites=data.get("original_corequisites") or "",
            original_notes=data.get("original_notes") or "",
        )
        if data.get("timestamp"):
            fields["timestamp"] = data["timestamp"]
        return cls(**fields)

    @classmethod
    def from_parse(cls, parsed: ParsedCourseRequirements, course: CourseInfo) -> "CourseRecord":
        """Attach the course's current source text to a fresh parse result."""
        return cls(
            department=parsed.department,
            number=parsed.number,
            schema_version=parsed.schema_version,
            prerequisite=parsed.prerequisite,
            corequisite=parsed.corequisite,
            recommended_prerequisite=parsed.recommended_prerequisite,
            recommended_corequisite=parsed.recommended_corequisite,
            credit_conflicts=parsed.credit_conflicts,
            original_title=course.title,
            original_prerequisites=course.prerequisites,
            original_corequisites=course.corequisites,
            original_notes=course.notes,
        )


@dataclass
class BlacklistedCourse:
    """A course excluded from parsing, with the reason it was excluded."""

    department: str
    number: str
    reason: str
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def course_id(self) -> str:
        return course_key(self.department, self.number)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "department": self.department,
            "number": self.number,
            "reason": self.reason,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlacklistedCourse":
        return cls(
            department=data["department"],
            number=data["number"],
            reason=data.get("reason", ""),
            timestamp=data.get("timestamp") or utc_timestamp(),
        )


@dataclass
class OracleFailure:
    """The oracle declined to (or could not) produce a tree."""

    reason: str
    confidence: Optional[float] = None
