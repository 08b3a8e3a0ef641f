"""
Interface protocols for the pipeline's external collaborators.
These define contracts that components must follow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from ..models.course import (
        BlacklistedCourse, CourseInfo, CourseRecord, OracleFailure, ParsedCourseRequirements
    )
    from .progress_tracker import CourseOutcome, TaskInfo


@runtime_checkable
class RequirementOracleProtocol(Protocol):
    """Protocol for the text-to-tree translation service."""

    def check_ambiguity(self, course: CourseInfo) -> Union[None, str, OracleFailure]:
        """Return a reason if the course text cannot be represented, a failure if the check could not run, else None."""
        ...

    def parse(self, course: CourseInfo) -> Union[Dict[str, Any], OracleFailure]:
        """Return a candidate (unvalidated) parse, or a failure with a reason."""
        ...

    def revise(self, course: CourseInfo, previous: Dict[str, Any], feedback: str,
               attempt: int = 2) -> Union[Dict[str, Any], OracleFailure]:
        """Return a corrected parse given feedback on a previous one."""
        ...

    def review(self, course: CourseInfo, parsed: ParsedCourseRequirements) -> Optional[str]:
        """Return a reason if the parse is not faithful to the text, else None."""
        ...

    def transcript(self) -> List[Dict[str, Any]]:
        """Return and clear the exchanges recorded since the last call."""
        ...


@runtime_checkable
class RecordStoreProtocol(Protocol):
    """Protocol for persistence of parse results and the blacklist."""

    def load_records(self) -> List[CourseRecord]:
        """Load every stored record."""
        ...

    def save_records(self, records: List[CourseRecord]) -> None:
        """Replace the stored records."""
        ...

    def load_blacklist(self) -> List[BlacklistedCourse]:
        """Load every blacklisted course."""
        ...

    def add_to_blacklist(self, department: str, number: str, reason: str) -> bool:
        """Blacklist a course; return False if it already was."""
        ...

    def save_debug_info(self, course_id: str, exchanges: List[Dict[str, Any]]) -> None:
        """Persist the oracle exchanges for one course."""
        ...


@runtime_checkable
class ProgressTrackerProtocol(Protocol):
    """Protocol for progress tracking."""

    def start_task(self, task_name: str, total_items: int = 0) -> None:
        """Start tracking a task."""
        ...

    def update_progress(self, completed: int, message: str = "") -> None:
        """Update progress."""
        ...

    def record_outcome(self, course_id: str, outcome: CourseOutcome, detail: str = "") -> None:
        """Tally how one course was handled."""
        ...

    def complete_task(self, message: str = "") -> None:
        """Mark task as completed."""
        ...

    def fail_task(self, error_message: str) -> None:
        """Mark task as failed."""
        ...

    def get_task_info(self, task_name: str) -> Optional[TaskInfo]:
        """Get information about a task."""
        ...
