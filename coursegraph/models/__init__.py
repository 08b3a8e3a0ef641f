"""Data models for requirement trees, course records and the course graph."""

from .requirements import (
    GroupLogic, CourseLevel, RequirementNode, RequirementGroup, CourseRequirement,
    HSCourseRequirement, CreditCountRequirement, CourseCountRequirement,
    CGPARequirement, UDGPARequirement, ProgramRequirement, PermissionRequirement,
    OtherRequirement, CreditConflict, ConflictCourse, ConflictOther,
    requirement_from_dict, credit_conflict_from_dict
)
from .course import (
    CourseInfo, ParsedCourseRequirements, CourseRecord, BlacklistedCourse,
    OracleFailure, course_key
)
from .graph import GraphNode, GraphLink, CourseGraph

__all__ = [
    # Requirement tree
    'GroupLogic', 'CourseLevel', 'RequirementNode', 'RequirementGroup', 'CourseRequirement',
    'HSCourseRequirement', 'CreditCountRequirement', 'CourseCountRequirement',
    'CGPARequirement', 'UDGPARequirement', 'ProgramRequirement', 'PermissionRequirement',
    'OtherRequirement', 'CreditConflict', 'ConflictCourse', 'ConflictOther',
    'requirement_from_dict', 'credit_conflict_from_dict',

    # Courses and records
    'CourseInfo', 'ParsedCourseRequirements', 'CourseRecord', 'BlacklistedCourse',
    'OracleFailure', 'course_key',

    # Graph
    'GraphNode', 'GraphLink', 'CourseGraph'
]
