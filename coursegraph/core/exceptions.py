"""
Custom exceptions for the coursegraph package.
Provides specific exception types for better error handling.
"""

from typing import List, Optional


class CourseGraphError(Exception):
    """Base exception for all coursegraph errors."""
    pass


class CatalogFetchError(CourseGraphError):
    """Raised when the course catalog cannot be downloaded or decoded."""
    pass


class OracleError(CourseGraphError):
    """Raised when the requirement oracle cannot be reached."""
    pass


class OracleResponseError(OracleError):
    """Raised when the oracle answers with something that is not usable."""

    def __init__(self, message: str, content: Optional[str] = None):
        self.content = content
        super().__init__(message)


class StorageError(CourseGraphError):
    """Raised when persisted data cannot be read or written."""
    pass


class RecordDecodeError(StorageError):
    """Raised when a persisted file is not valid JSON of the expected shape."""
    pass


class SchemaValidationError(CourseGraphError):
    """Raised when a value that must be schema-valid is not."""

    def __init__(self, subject: str, errors: List[str]):
        self.subject = subject
        self.errors = list(errors)
        super().__init__(f"{subject} failed schema validation: {', '.join(self.errors)}")


class InvalidConfigurationError(CourseGraphError):
    """Raised when configuration is invalid."""
    pass
