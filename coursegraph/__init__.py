"""
Course Graph Package

Turns free-text course requirements into validated requirement trees with an
LLM oracle, and assembles the trees into a weighted course dependency graph.
The package follows the same layered layout throughout: config, core,
models, handlers, clients and storage.
"""

from .handlers import GraphAssembler, assemble, validate
from .pipeline import ParsePipeline
from .utils import setup_logging, str_to_bool

__version__ = "1.0.0"
__all__ = ['GraphAssembler', 'assemble', 'validate', 'ParsePipeline', 'setup_logging', 'str_to_bool']
