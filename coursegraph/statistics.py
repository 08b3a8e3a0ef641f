"""
Parse coverage statistics.

Counts, over catalog courses that have requirement text, how many were
parsed, blacklisted, attempted (have an oracle transcript) or never touched.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Set

import pandas as pd

from .models.course import CourseInfo
from .storage.json_store import JsonRecordStore

logger = logging.getLogger(__name__)

COVERAGE_COLUMNS = ["department", "courses", "parsed", "blacklisted", "attempted", "not_attempted"]


@dataclass
class ParseStatistics:
    total_courses: int = 0
    successfully_parsed: int = 0
    blacklisted: int = 0
    attempted: int = 0
    covered: int = 0
    not_attempted: int = 0

    @property
    def success_percentage(self) -> float:
        if self.total_courses == 0:
            return 0.0
        return self.successfully_parsed / self.total_courses * 100

    @property
    def coverage_percentage(self) -> float:
        if self.total_courses == 0:
            return 0.0
        return self.covered / self.total_courses * 100

    def to_dict(self) -> Dict[str, float]:
        result = asdict(self)
        result["success_percentage"] = self.success_percentage
        result["coverage_percentage"] = self.coverage_percentage
        return result


def coverage_frame(courses: Iterable[CourseInfo], parsed: Set[str],
                   blacklisted: Set[str], attempted: Set[str]) -> pd.DataFrame:
    """One row per course with requirement text, flagged by what happened to it."""
    rows = [
        {
            "course_id": course.course_id,
            "department": course.department,
            "parsed": course.course_id in parsed,
            "blacklisted": course.course_id in blacklisted,
            "attempted": course.course_id in attempted,
        }
        for course in courses
        if course.has_requirements()
    ]
    return pd.DataFrame(rows, columns=["course_id", "department", "parsed", "blacklisted", "attempted"])


def summarize(frame: pd.DataFrame) -> ParseStatistics:
    if frame.empty:
        return ParseStatistics()
    covered = frame["parsed"] | frame["blacklisted"] | frame["attempted"]
    return ParseStatistics(
        total_courses=len(frame),
        successfully_parsed=int(frame["parsed"].sum()),
        blacklisted=int(frame["blacklisted"].sum()),
        attempted=int(frame["attempted"].sum()),
        covered=int(covered.sum()),
        not_attempted=int((~covered).sum()),
    )


def department_breakdown(frame: pd.DataFrame) -> pd.DataFrame:
    """Per-department counts, departments with the most untouched courses first."""
    if frame.empty:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    frame = frame.assign(
        not_attempted=~(frame["parsed"] | frame["blacklisted"] | frame["attempted"])
    )
    grouped = frame.groupby("department").agg(
        courses=("course_id", "count"),
        parsed=("parsed", "sum"),
        blacklisted=("blacklisted", "sum"),
        attempted=("attempted", "sum"),
        not_attempted=("not_attempted", "sum"),
    ).reset_index()
    return grouped.sort_values(["not_attempted", "department"], ascending=[False, True])[COVERAGE_COLUMNS]


def _coverage_from_store(store: JsonRecordStore) -> pd.DataFrame:
    courses = store.load_catalog()
    parsed = {record.course_id for record in store.load_records()}
    blacklisted = {entry.course_id for entry in store.load_blacklist()}
    attempted = set(store.attempted_course_ids())
    logger.debug(f"Found {len(attempted)} oracle transcripts")
    return coverage_frame(courses, parsed, blacklisted, attempted)


def format_statistics(stats: ParseStatistics) -> List[str]:
    """Human-readable report lines."""
    return [
        "=" * 60,
        "COURSE PARSING STATISTICS",
        "=" * 60,
        f"Total courses with requirements: {stats.total_courses}",
        f"Successfully parsed:             {stats.successfully_parsed}",
        f"Blacklisted:                     {stats.blacklisted}",
        f"Attempted (debug files):         {stats.attempted}",
        f"Covered:                         {stats.covered}",
        f"Not attempted:                   {stats.not_attempted}",
        "-" * 60,
        f"Success rate:  {stats.success_percentage:.2f}%",
        f"Coverage rate: {stats.coverage_percentage:.2f}%",
        "=" * 60,
    ]


def report(store: JsonRecordStore, top_departments: int = 10) -> ParseStatistics:
    """Log the coverage report and the departments with the most untouched courses."""
    frame = _coverage_from_store(store)
    stats = summarize(frame)
    for line in format_statistics(stats):
        logger.info(line)

    breakdown = department_breakdown(frame).head(top_departments)
    if not breakdown.empty:
        logger.info("Departments with the most courses not attempted:")
        for row in breakdown.itertuples(index=False):
            logger.info(
                f"  {row.department}: {row.not_attempted} of {row.courses} not attempted "
                f"({row.parsed} parsed, {row.blacklisted} blacklisted)"
            )
    return stats
