"""Core components: exceptions, collaborator protocols and progress tracking."""

from .exceptions import (
    CourseGraphError, CatalogFetchError, OracleError, OracleResponseError,
    StorageError, RecordDecodeError, SchemaValidationError, InvalidConfigurationError
)
from .interfaces import RequirementOracleProtocol, RecordStoreProtocol, ProgressTrackerProtocol
from .progress_tracker import ProgressTracker, TaskInfo, TaskStatus, CourseOutcome, SKIPPED_OUTCOMES

__all__ = [
    # Exceptions
    'CourseGraphError', 'CatalogFetchError', 'OracleError', 'OracleResponseError',
    'StorageError', 'RecordDecodeError', 'SchemaValidationError', 'InvalidConfigurationError',

    # Protocols
    'RequirementOracleProtocol', 'RecordStoreProtocol', 'ProgressTrackerProtocol',

    # Progress tracking
    'ProgressTracker', 'TaskInfo', 'TaskStatus', 'CourseOutcome', 'SKIPPED_OUTCOMES'
]
