"""Utility functions package for coursegraph."""

from .helpers import str_to_bool, retry_on_exception, setup_logging

__all__ = ['str_to_bool', 'retry_on_exception', 'setup_logging']
