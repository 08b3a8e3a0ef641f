"""Configuration package for coursegraph."""

from .constants import SchemaConfig, CatalogConfig, OracleConfig, GraphConfig, FileNames
from .settings import PipelineSettings

__all__ = ['SchemaConfig', 'CatalogConfig', 'OracleConfig', 'GraphConfig', 'FileNames', 'PipelineSettings']
