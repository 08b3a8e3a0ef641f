"""
Progress tracking for long-running catalog passes.

A task covers one pass over the catalog (parsing, graph building). While it
runs, each course is tallied under an outcome so a summary can be logged and
returned when the pass ends.
"""

import logging
import time
from collections import Counter
from typing import Optional, Dict, Callable, List
from dataclasses import dataclass, field
from enum import Enum


class TaskStatus(Enum):
    """Status of a tracked task."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class CourseOutcome(Enum):
    """What happened to one course during a parse pass."""
    PARSED = "parsed"
    UP_TO_DATE = "up_to_date"
    NO_REQUIREMENTS = "no_requirements"
    NO_EXAMPLES = "no_examples"
    BLACKLISTED = "blacklisted"
    AMBIGUOUS = "ambiguous"
    ORACLE_FAILED = "oracle_failed"
    SCHEMA_INVALID = "schema_invalid"
    REVIEW_REJECTED = "review_rejected"


SKIPPED_OUTCOMES = frozenset({
    CourseOutcome.UP_TO_DATE,
    CourseOutcome.NO_REQUIREMENTS,
    CourseOutcome.NO_EXAMPLES,
    CourseOutcome.BLACKLISTED,
})


@dataclass
class TaskInfo:
    """Information about a tracked task."""
    name: str
    status: TaskStatus = TaskStatus.PENDING
    total_items: int = 0
    completed_items: int = 0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    current_message: str = ""
    outcomes: Counter = field(default_factory=Counter)
    errors: List[str] = field(default_factory=list)

    @property
    def progress_percentage(self) -> float:
        """Get progress as percentage."""
        if self.total_items == 0:
            return 0.0
        return (self.completed_items / self.total_items) * 100

    @property
    def elapsed_time(self) -> Optional[float]:
        """Get elapsed time in seconds."""
        if not self.start_time:
            return None
        end_time = self.end_time or time.time()
        return end_time - self.start_time

    @property
    def successful(self) -> int:
        return self.outcomes[CourseOutcome.PARSED]

    @property
    def skipped(self) -> int:
        return sum(self.outcomes[outcome] for outcome in SKIPPED_OUTCOMES)

    @property
    def failed(self) -> int:
        return sum(self.outcomes.values()) - self.successful - self.skipped

    def summary(self) -> Dict[str, int]:
        """Outcome counts keyed by outcome name, plus the aggregates."""
        result = {outcome.value: self.outcomes[outcome] for outcome in CourseOutcome}
        result.update(
            total=self.total_items,
            processed=self.completed_items,
            successful=self.successful,
            skipped=self.skipped,
            failed=self.failed,
        )
        return result


class ProgressTracker:
    """
    Progress tracking with logging and callback support.
    Implements the ProgressTrackerProtocol.
    """

    def __init__(self,
                 logger: Optional[logging.Logger] = None,
                 progress_callback: Optional[Callable[[TaskInfo], None]] = None):
        """
        Initialize progress tracker.

        Args:
            logger: Logger instance for progress messages
            progress_callback: Callback function called on progress updates
        """
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.progress_callback = progress_callback
        self.tasks: Dict[str, TaskInfo] = {}
        self.current_task: Optional[str] = None

    def _notify(self, task_info: TaskInfo) -> None:
        if self.progress_callback:
            self.progress_callback(task_info)

    def _active(self, action: str) -> Optional[TaskInfo]:
        if not self.current_task or self.current_task not in self.tasks:
            self.logger.warning(f"No active task to {action}")
            return None
        return self.tasks[self.current_task]

    def start_task(self, task_name: str, total_items: int = 0) -> None:
        """Start tracking a new task."""
        task_info = TaskInfo(
            name=task_name,
            status=TaskStatus.RUNNING,
            total_items=total_items,
            start_time=time.time()
        )

        self.tasks[task_name] = task_info
        self.current_task = task_name

        if total_items > 0:
            self.logger.info(f"Started task '{task_name}' (0/{total_items} items)")
        else:
            self.logger.info(f"Started task '{task_name}'")

        self._notify(task_info)

    def update_progress(self, completed: int, message: str = "") -> None:
        """Update progress for the current task."""
        task_info = self._active("update progress")
        if task_info is None:
            return

        task_info.completed_items = completed
        task_info.current_message = message

        if task_info.total_items > 0:
            self.logger.info(
                f"[{completed}/{task_info.total_items}] "
                f"({task_info.progress_percentage:.1f}%) {message}"
            )
        else:
            self.logger.info(f"[{completed}] {message}")

        self._notify(task_info)

    def record_outcome(self, course_id: str, outcome: CourseOutcome, detail: str = "") -> None:
        """Tally one course's outcome in the current task."""
        task_info = self._active("record an outcome for")
        if task_info is None:
            return

        task_info.outcomes[outcome] += 1
        if outcome in SKIPPED_OUTCOMES:
            self.logger.debug(f"{course_id}: skipped ({outcome.value}) {detail}".rstrip())
        elif outcome is CourseOutcome.PARSED:
            self.logger.info(f"{course_id}: parsed and saved")
        else:
            task_info.errors.append(f"{course_id}: {outcome.value}: {detail}")
            self.logger.warning(f"{course_id}: {outcome.value} - {detail}")

    def complete_task(self, message: str = "") -> None:
        """Mark current task as completed."""
        task_info = self._active("complete")
        if task_info is None:
            return

        task_info.status = TaskStatus.COMPLETED
        task_info.end_time = time.time()
        task_info.current_message = message

        elapsed = task_info.elapsed_time
        elapsed_str = f" in {elapsed:.2f}s" if elapsed else ""
        self.logger.info(
            f"Completed task '{task_info.name}'{elapsed_str}: "
            f"{task_info.successful} successful, {task_info.skipped} skipped, "
            f"{task_info.failed} failed - {message}"
        )

        self._notify(task_info)
        self.current_task = None

    def fail_task(self, error_message: str) -> None:
        """Mark current task as failed."""
        task_info = self._active("fail")
        if task_info is None:
            return

        task_info.status = TaskStatus.FAILED
        task_info.end_time = time.time()
        task_info.current_message = error_message

        self.logger.error(f"Task '{task_info.name}' failed: {error_message}")

        self._notify(task_info)
        self.current_task = None

    def get_task_info(self, task_name: str) -> Optional[TaskInfo]:
        """Get information about a specific task."""
        return self.tasks.get(task_name)
