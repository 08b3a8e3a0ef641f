"""Clients for the course catalog API and the requirement oracle."""

from .catalog_client import CatalogClient
from .examples import EXAMPLES, RequirementExample, examples_for, requirement_text
from .oracle_client import OracleClient, decode_json_object, strip_code_fences

__all__ = [
    'CatalogClient',
    'EXAMPLES', 'RequirementExample', 'examples_for', 'requirement_text',
    'OracleClient', 'decode_json_object', 'strip_code_fences'
]
