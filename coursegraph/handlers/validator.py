"""
Structural validation of oracle output against the requirement schema.

Validation works on plain JSON-decoded values, never raises, and never stops
at the first problem: every violation found during a full traversal is
reported as ``"<dotted.path>: <message>"`` so a rejected parse can be
explained (or fed back to the oracle) in one go.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..config.constants import SchemaConfig

# Legal property names per requirement type
NODE_PROPERTIES: Dict[str, Sequence[str]] = {
    "group": ("type", "logic", "children"),
    "course": ("type", "department", "number", "minGrade", "canBeTakenConcurrently", "orEquivalent"),
    "HSCourse": ("type", "course", "minGrade", "orEquivalent"),
    "creditCount": ("type", "credits", "department", "level", "minGrade", "canBeTakenConcurrently"),
    "courseCount": ("type", "count", "department", "level", "minGrade", "canBeTakenConcurrently"),
    "CGPA": ("type", "minCGPA"),
    "UDGPA": ("type", "minUDGPA"),
    "program": ("type", "program"),
    "permission": ("type", "note"),
    "other": ("type", "note"),
}

CONFLICT_PROPERTIES: Dict[str, Sequence[str]] = {
    "conflict_course": ("type", "department", "number", "title"),
    "conflict_other": ("type", "note"),
}

RECORD_PROPERTIES = (
    "department", "number", "schema_version",
    *SchemaConfig.REQUIREMENT_FIELDS,
    "credit_conflicts",
)

# Extra fields a persisted record carries on top of the parse result
STORED_RECORD_PROPERTIES = (
    "original_title", "original_prerequisites", "original_corequisites",
    "original_notes", "timestamp",
)


@dataclass
class ValidationResult:
    """Verdict of a structural validation run."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


# ========================================
# PRIMITIVE CHECKS
# ========================================

def _is_string(value: Any) -> bool:
    return isinstance(value, str)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _require_string(obj: Dict[str, Any], key: str, path: str, errors: List[str]) -> None:
    if key not in obj:
        errors.append(f"{path}.{key}: Missing required property")
    elif not _is_string(obj[key]):
        errors.append(f"{path}.{key}: Must be a string")


def _require_number(obj: Dict[str, Any], key: str, path: str, errors: List[str]) -> None:
    if key not in obj:
        errors.append(f"{path}.{key}: Missing required property")
    elif not _is_number(obj[key]):
        errors.append(f"{path}.{key}: Must be a number")


def _optional_string(obj: Dict[str, Any], key: str, path: str, errors: List[str]) -> None:
    if key in obj and not _is_string(obj[key]):
        errors.append(f"{path}.{key}: Must be a string if provided")


def _optional_flag(obj: Dict[str, Any], key: str, path: str, errors: List[str]) -> None:
    if key in obj and obj[key] != "true":
        errors.append(f"{path}.{key}: Must be 'true' if provided")


def _optional_departments(obj: Dict[str, Any], path: str, errors: List[str]) -> None:
    if "department" not in obj:
        return
    department = obj["department"]
    if _is_string(department):
        return
    if not isinstance(department, list):
        errors.append(f"{path}.department: Must be a string or array of strings if provided")
        return
    for index, dept in enumerate(department):
        if not _is_string(dept):
            errors.append(f"{path}.department[{index}]: Must be a string")


def _optional_level(obj: Dict[str, Any], path: str, errors: List[str]) -> None:
    if "level" in obj and obj["level"] not in SchemaConfig.LEVELS:
        allowed = ", ".join(f"'{level}'" for level in SchemaConfig.LEVELS)
        errors.append(f"{path}.level: Must be one of {allowed} if provided")


def _unexpected_properties(obj: Dict[str, Any], allowed: Sequence[str], path: str,
                           kind: str, errors: List[str]) -> None:
    for key in obj:
        if key not in allowed:
            errors.append(f"{path}.{key}: Unexpected property for '{kind}' type")


# ========================================
# REQUIREMENT NODES
# ========================================

def validate_requirement_node(node: Any, path: str = "root") -> List[str]:
    """
    Recursively validate a requirement tree.

    Args:
        node: JSON-decoded candidate node
        path: Dotted path of ``node`` used to prefix error messages

    Returns:
        Every structural violation found; empty when the tree is valid
    """
    errors: List[str] = []

    if not _is_object(node):
        errors.append(f"{path}: Must be an object")
        return errors

    node_type = node.get("type")
    if not _is_string(node_type):
        errors.append(f"{path}.type: Must be a string")
        return errors

    if node_type not in NODE_PROPERTIES:
        # Children of an unknown shape cannot be checked
        errors.append(f"{path}.type: Invalid requirement type '{node_type}'")
        return errors

    if node_type == "group":
        _validate_group(node, path, errors)
    elif node_type == "course":
        _require_string(node, "department", path, errors)
        _require_string(node, "number", path, errors)
        _optional_string(node, "minGrade", path, errors)
        _optional_flag(node, "canBeTakenConcurrently", path, errors)
        _optional_flag(node, "orEquivalent", path, errors)
    elif node_type == "HSCourse":
        _require_string(node, "course", path, errors)
        _optional_string(node, "minGrade", path, errors)
        _optional_flag(node, "orEquivalent", path, errors)
    elif node_type in ("creditCount", "courseCount"):
        _require_number(node, "credits" if node_type == "creditCount" else "count", path, errors)
        _optional_departments(node, path, errors)
        _optional_level(node, path, errors)
        _optional_string(node, "minGrade", path, errors)
        _optional_flag(node, "canBeTakenConcurrently", path, errors)
    elif node_type == "CGPA":
        _require_number(node, "minCGPA", path, errors)
    elif node_type == "UDGPA":
        _require_number(node, "minUDGPA", path, errors)
    elif node_type == "program":
        _require_string(node, "program", path, errors)
    else:
        # permission and other
        _require_string(node, "note", path, errors)

    _unexpected_properties(node, NODE_PROPERTIES[node_type], path, node_type, errors)
    return errors


def _validate_group(node: Dict[str, Any], path: str, errors: List[str]) -> None:
    if "logic" not in node:
        errors.append(f"{path}.logic: Missing required property")
    elif node["logic"] not in SchemaConfig.GROUP_LOGICS:
        errors.append(f"{path}.logic: Must be 'ALL_OF', 'ONE_OF', or 'TWO_OF'")

    if "children" not in node:
        errors.append(f"{path}.children: Missing required property")
        return
    children = node["children"]
    if not isinstance(children, list):
        errors.append(f"{path}.children: Must be an array")
        return
    if not children:
        errors.append(f"{path}.children: Must contain at least one requirement")
        return

    # Local errors above never block checking the children
    for index, child in enumerate(children):
        errors.extend(validate_requirement_node(child, f"{path}.children[{index}]"))


# ========================================
# CREDIT CONFLICTS
# ========================================

def validate_credit_conflict(conflict: Any, path: str) -> List[str]:
    """Validate a single credit conflict entry."""
    errors: List[str] = []

    if not _is_object(conflict):
        errors.append(f"{path}: Must be an object")
        return errors

    conflict_type = conflict.get("type")
    if not _is_string(conflict_type):
        errors.append(f"{path}.type: Must be a string")
        return errors
    if conflict_type not in CONFLICT_PROPERTIES:
        errors.append(f"{path}.type: Must be either 'conflict_course' or 'conflict_other'")
        return errors

    if conflict_type == "conflict_course":
        _require_string(conflict, "department", path, errors)
        _require_string(conflict, "number", path, errors)
        _optional_string(conflict, "title", path, errors)
    else:
        _require_string(conflict, "note", path, errors)

    _unexpected_properties(conflict, CONFLICT_PROPERTIES[conflict_type], path, conflict_type, errors)
    return errors


# ========================================
# RECORD ENVELOPE
# ========================================

def _validate_envelope(parsed: Any, allowed: Sequence[str], string_fields: Sequence[str]) -> ValidationResult:
    if not _is_object(parsed):
        return ValidationResult(is_valid=False, errors=["Root: Must be an object"])

    errors: List[str] = []

    for key in ("department", "number", "schema_version", *string_fields):
        if key not in parsed:
            errors.append(f"{key}: Missing required property")
        elif not _is_string(parsed[key]):
            errors.append(f"{key}: Must be a string")

    for name in SchemaConfig.REQUIREMENT_FIELDS:
        if name in parsed:
            errors.extend(validate_requirement_node(parsed[name], name))

    if "credit_conflicts" in parsed:
        conflicts = parsed["credit_conflicts"]
        if not isinstance(conflicts, list):
            errors.append("credit_conflicts: Must be an array if provided")
        else:
            for index, conflict in enumerate(conflicts):
                errors.extend(validate_credit_conflict(conflict, f"credit_conflicts[{index}]"))

    for key in parsed:
        if key not in allowed:
            errors.append(f"{key}: Unexpected property")

    return ValidationResult.from_errors(errors)


def validate_parsed_course_requirements(parsed: Any) -> ValidationResult:
    """
    Validate an oracle parse result (the ``ParsedCourseRequirements`` shape).

    Args:
        parsed: Untrusted JSON-decoded value

    Returns:
        ValidationResult listing every violation
    """
    return _validate_envelope(parsed, RECORD_PROPERTIES, ())


def validate_course_record(record: Any) -> ValidationResult:
    """Validate a persisted record: a parse result plus its source texts."""
    return _validate_envelope(
        record,
        RECORD_PROPERTIES + STORED_RECORD_PROPERTIES,
        STORED_RECORD_PROPERTIES,
    )


validate = validate_parsed_course_requirements
