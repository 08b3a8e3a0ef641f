"""Requirement-tree handlers: validation, extraction, depth, assembly and rendering."""

from .validator import (
    ValidationResult, validate, validate_parsed_course_requirements,
    validate_course_record, validate_requirement_node, validate_credit_conflict
)
from .extractor import WeightedCourse, extract_weighted, round_link_value
from .depth import depth_of, record_depth, compute_depths
from .assembler import GraphAssembler, assemble, node_size
from .formatter import outline, outline_record

__all__ = [
    'ValidationResult', 'validate', 'validate_parsed_course_requirements',
    'validate_course_record', 'validate_requirement_node', 'validate_credit_conflict',
    'WeightedCourse', 'extract_weighted', 'round_link_value',
    'depth_of', 'record_depth', 'compute_depths',
    'GraphAssembler', 'assemble', 'node_size',
    'outline', 'outline_record'
]
