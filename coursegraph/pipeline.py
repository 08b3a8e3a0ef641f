"""
Incremental requirement parsing over the course catalog.

For each catalog course the pipeline decides whether a parse is needed,
asks the oracle for one, checks it structurally and with a second opinion,
and persists accepted records immediately so an interrupted run loses at
most one course.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from .clients.examples import RequirementExample, examples_for
from .config.constants import OracleConfig, SchemaConfig
from .core.interfaces import ProgressTrackerProtocol, RecordStoreProtocol, RequirementOracleProtocol
from .core.progress_tracker import SKIPPED_OUTCOMES, CourseOutcome, ProgressTracker, TaskInfo
from .handlers.formatter import outline_record
from .handlers.validator import validate_parsed_course_requirements
from .models.course import CourseInfo, CourseRecord, OracleFailure, ParsedCourseRequirements

PARSE_TASK = "parse_requirements"

ExampleSelector = Callable[[CourseInfo], List[RequirementExample]]


class ParsePipeline:
    """Runs the oracle over catalog courses and maintains the record store."""

    def __init__(self, oracle: RequirementOracleProtocol, store: RecordStoreProtocol,
                 schema_version: str = SchemaConfig.SCHEMA_VERSION,
                 tracker: Optional[ProgressTrackerProtocol] = None,
                 max_revisions: int = OracleConfig.MAX_REVISIONS,
                 example_selector: ExampleSelector = examples_for):
        """
        Args:
            oracle: Text-to-tree translation service
            store: Persistence for records, blacklist and transcripts
            schema_version: Records stamped with another version are reparsed
            tracker: Progress tracker (a fresh one is created if omitted)
            max_revisions: Corrective re-parses allowed after a rejected parse
            example_selector: Picks the few-shot examples for a course
        """
        self.oracle = oracle
        self.store = store
        self.schema_version = schema_version
        self.tracker = tracker or ProgressTracker()
        self.max_revisions = max_revisions
        self.example_selector = example_selector
        self.logger = logging.getLogger(self.__class__.__name__)

        self._records: List[CourseRecord] = []
        self._positions: Dict[str, int] = {}
        self._blacklisted: Set[str] = set()

    # ========================================
    # MAIN LOOP
    # ========================================

    def run(self, courses: Iterable[CourseInfo], limit: Optional[int] = None) -> TaskInfo:
        """
        Parse every course that needs it.

        Args:
            courses: Catalog entries, processed in order
            limit: Stop after this many oracle-backed attempts (None for no limit)

        Returns:
            The finished task's info, with per-outcome tallies
        """
        courses = list(courses)
        self._load_state()
        self.tracker.start_task(PARSE_TASK, len(courses))

        attempts = 0
        try:
            for index, course in enumerate(courses, start=1):
                if limit is not None and attempts >= limit:
                    self.logger.info(f"Reached limit of {limit} parse attempts")
                    break
                outcome, detail = self.process_course(course)
                if outcome not in SKIPPED_OUTCOMES:
                    attempts += 1
                self.tracker.record_outcome(course.course_id, outcome, detail)
                self.tracker.update_progress(index, course.course_id)
        except Exception as e:
            self.tracker.fail_task(str(e))
            raise

        self.tracker.complete_task(f"{len(self._records)} records stored")
        return self.tracker.get_task_info(PARSE_TASK)

    def _load_state(self) -> None:
        self._records = self.store.load_records()
        self._positions = {record.course_id: i for i, record in enumerate(self._records)}
        self._blacklisted = {entry.course_id for entry in self.store.load_blacklist()}
        self.logger.info(
            f"Starting with {len(self._records)} stored records and "
            f"{len(self._blacklisted)} blacklisted courses"
        )

    # ========================================
    # PER-COURSE PROCESSING
    # ========================================

    def skip_reason(self, course: CourseInfo) -> Optional[CourseOutcome]:
        """Return why a course needs no oracle call, or None if it should be parsed."""
        if course.course_id in self._blacklisted:
            return CourseOutcome.BLACKLISTED
        if not course.has_requirements():
            return CourseOutcome.NO_REQUIREMENTS
        position = self._positions.get(course.course_id)
        if position is not None and not self._records[position].needs_reparsing(course, self.schema_version):
            return CourseOutcome.UP_TO_DATE
        if not self.example_selector(course):
            return CourseOutcome.NO_EXAMPLES
        return None

    def process_course(self, course: CourseInfo) -> Tuple[CourseOutcome, str]:
        """Run one course through ambiguity check, parse, validation and review."""
        skip = self.skip_reason(course)
        if skip is not None:
            return skip, ""

        try:
            return self._parse_course(course)
        finally:
            # transcript() clears the oracle's buffer, so this runs once per course
            self.store.save_debug_info(course.course_id, self.oracle.transcript())

    def _parse_course(self, course: CourseInfo) -> Tuple[CourseOutcome, str]:
        self.logger.info(f"Processing {course.course_id}: {course.title}")

        ambiguity = self.oracle.check_ambiguity(course)
        if isinstance(ambiguity, OracleFailure):
            return CourseOutcome.ORACLE_FAILED, ambiguity.reason
        if ambiguity is not None:
            self.store.add_to_blacklist(course.department, course.number, f"Ambiguity issue: {ambiguity}")
            self._blacklisted.add(course.course_id)
            return CourseOutcome.AMBIGUOUS, ambiguity

        candidate = self.oracle.parse(course)
        revisions = 0
        while True:
            if isinstance(candidate, OracleFailure):
                return CourseOutcome.ORACLE_FAILED, candidate.reason

            outcome, feedback, parsed = self._check_candidate(course, candidate)
            if outcome is CourseOutcome.PARSED:
                self._accept(course, parsed)
                return CourseOutcome.PARSED, ""

            if revisions >= self.max_revisions:
                return outcome, feedback
            revisions += 1
            self.logger.info(f"{course.course_id}: asking for a revision ({feedback})")
            candidate = self.oracle.revise(course, candidate, feedback, attempt=revisions + 1)

    def _check_candidate(self, course: CourseInfo, candidate: Dict[str, Any]
                         ) -> Tuple[CourseOutcome, str, Optional[ParsedCourseRequirements]]:
        result = validate_parsed_course_requirements(candidate)
        if not result.is_valid:
            return CourseOutcome.SCHEMA_INVALID, f"Schema validation failed: {', '.join(result.errors)}", None

        parsed = ParsedCourseRequirements.from_dict(candidate)
        rejection = self.oracle.review(course, parsed)
        if rejection is not None:
            return CourseOutcome.REVIEW_REJECTED, f"LLM validation failed: {rejection}", parsed
        return CourseOutcome.PARSED, "", parsed

    def _accept(self, course: CourseInfo, parsed: ParsedCourseRequirements) -> None:
        """Replace or append the course's record and persist the whole list."""
        record = CourseRecord.from_parse(parsed, course)
        position = self._positions.get(record.course_id)
        if position is None:
            self._positions[record.course_id] = len(self._records)
            self._records.append(record)
        else:
            self._records[position] = record
        self.store.save_records(self._records)
        self.logger.debug(f"Stored record:\n{outline_record(record)}")

    @property
    def records(self) -> List[CourseRecord]:
        return list(self._records)

