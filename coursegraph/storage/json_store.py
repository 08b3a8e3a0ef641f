"""
JSON file persistence for parse results.

Everything lives in one data directory:
- ``vital_data.json``: the condensed catalog the pipeline parses
- ``parsed_requirements.json``: one record per successfully parsed course
- ``blacklisted.json``: courses excluded from parsing, with reasons
- ``llm_debug/<DEPT NUM>_debug.json``: oracle transcripts per course
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config.constants import FileNames
from ..core.exceptions import RecordDecodeError, SchemaValidationError, StorageError
from ..handlers.validator import validate_course_record
from ..models.course import BlacklistedCourse, CourseInfo, CourseRecord, course_key, utc_timestamp


def debug_file_name(course_id: str) -> str:
    """File name of a course's oracle transcript ("CMPT 225" -> "CMPT 225_debug.json")."""
    return f"{course_id.replace('/', '-')}{FileNames.DEBUG_SUFFIX}"


class JsonRecordStore:
    """Reads and writes pipeline data as pretty-printed JSON files."""

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.logger = logging.getLogger(self.__class__.__name__)

    # ========================================
    # PATHS
    # ========================================

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / FileNames.VITAL_DATA

    @property
    def raw_outlines_path(self) -> Path:
        return self.data_dir / FileNames.RAW_OUTLINES

    @property
    def records_path(self) -> Path:
        return self.data_dir / FileNames.PARSED_REQUIREMENTS

    @property
    def blacklist_path(self) -> Path:
        return self.data_dir / FileNames.BLACKLIST

    @property
    def debug_dir(self) -> Path:
        return self.data_dir / FileNames.DEBUG_DIR

    # ========================================
    # LOW-LEVEL JSON I/O
    # ========================================

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            self.logger.info(f"No {path.name} found, starting fresh")
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise RecordDecodeError(f"{path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        """Replace ``path`` atomically; an interrupted dump leaves the previous content in place."""
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _read_list(self, path: Path) -> List[Dict[str, Any]]:
        data = self._read_json(path, [])
        if not isinstance(data, list):
            raise RecordDecodeError(f"{path} must contain a JSON array")
        return data

    # ========================================
    # CATALOG
    # ========================================

    def save_raw_outlines(self, payload: Any) -> None:
        self._write_json(self.raw_outlines_path, payload)

    def save_catalog(self, courses: List[CourseInfo]) -> None:
        self._write_json(self.catalog_path, [course.to_dict() for course in courses])
        self.logger.info(f"Saved {len(courses)} courses to {self.catalog_path}")

    def load_catalog(self) -> List[CourseInfo]:
        courses = [CourseInfo.from_dict(entry) for entry in self._read_list(self.catalog_path)]
        self.logger.info(f"Loaded {len(courses)} catalog courses")
        return courses

    # ========================================
    # PARSED RECORDS
    # ========================================

    def load_raw_records(self) -> List[Any]:
        """Stored record entries exactly as decoded, without validation."""
        return self._read_list(self.records_path)

    def load_records(self) -> List[CourseRecord]:
        """
        Load every stored record, re-validating each one.

        Raises:
            SchemaValidationError: If a stored record no longer validates
        """
        records = []
        for index, entry in enumerate(self.load_raw_records()):
            result = validate_course_record(entry)
            if not result.is_valid:
                subject = f"{self.records_path.name}[{index}]"
                if isinstance(entry, dict):
                    subject = course_key(str(entry.get("department")), str(entry.get("number")))
                raise SchemaValidationError(subject, result.errors)
            records.append(CourseRecord.from_dict(entry))
        self.logger.info(f"Loaded {len(records)} existing results")
        return records

    def save_records(self, records: List[CourseRecord]) -> None:
        self._write_json(self.records_path, [record.to_dict() for record in records])

    # ========================================
    # BLACKLIST
    # ========================================

    def load_blacklist(self) -> List[BlacklistedCourse]:
        return [BlacklistedCourse.from_dict(entry) for entry in self._read_list(self.blacklist_path)]

    def add_to_blacklist(self, department: str, number: str, reason: str) -> bool:
        """
        Add a course to the blacklist.

        Returns:
            False if the course was already blacklisted
        """
        blacklist = self.load_blacklist()
        for entry in blacklist:
            if entry.department == department and entry.number == number:
                self.logger.warning(
                    f"Course {department} {number} is already blacklisted: {entry.reason}"
                )
                return False

        blacklist.append(BlacklistedCourse(department=department, number=number, reason=reason))
        self._write_json(self.blacklist_path, [entry.to_dict() for entry in blacklist])
        self.logger.info(f"Added {department} {number} to blacklist")
        return True

    # ========================================
    # ORACLE TRANSCRIPTS
    # ========================================

    def save_debug_info(self, course_id: str, exchanges: List[Dict[str, Any]]) -> Optional[Path]:
        """Write a course's oracle exchanges; nothing is written for an empty list."""
        if not exchanges:
            return None
        path = self.debug_dir / debug_file_name(course_id)
        self._write_json(path, {
            "courseKey": course_id,
            "timestamp": utc_timestamp(),
            "responses": exchanges,
        })
        self.logger.debug(f"Debug info saved to {path}")
        return path

    def attempted_course_ids(self) -> List[str]:
        """Course ids that have an oracle transcript on disk."""
        if not self.debug_dir.exists():
            return []
        return sorted(
            path.name[: -len(FileNames.DEBUG_SUFFIX)]
            for path in self.debug_dir.iterdir()
            if path.name.endswith(FileNames.DEBUG_SUFFIX)
        )
