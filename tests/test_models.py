"""Tests for the requirement tree and course record models."""

import unittest

from coursegraph.models.course import (
    BlacklistedCourse,
    CourseInfo,
    CourseRecord,
    ParsedCourseRequirements,
)
from coursegraph.models.requirements import (
    ConflictCourse,
    CourseCountRequirement,
    CourseLevel,
    CourseRequirement,
    GroupLogic,
    RequirementGroup,
    credit_conflict_from_dict,
    requirement_from_dict,
)

PARSED = {
    "department": "CMPT",
    "number": "225",
    "schema_version": "SFUv1.1",
    "prerequisite": {
        "type": "group",
        "logic": "ALL_OF",
        "children": [
            {"type": "course", "department": "CMPT", "number": "125", "minGrade": "C-"},
            {"type": "courseCount", "count": 1, "department": ["MACM", "MATH"], "level": "1XX"},
        ],
    },
    "corequisite": {"type": "course", "department": "MACM", "number": "201",
                    "canBeTakenConcurrently": "true"},
    "credit_conflicts": [{"type": "conflict_course", "department": "CMPT", "number": "126"}],
}


class TestRequirementModels(unittest.TestCase):

    def test_decodes_typed_tree(self):
        tree = requirement_from_dict(PARSED["prerequisite"])
        self.assertIsInstance(tree, RequirementGroup)
        self.assertIs(tree.logic, GroupLogic.ALL_OF)
        first, second = tree.children
        self.assertEqual(first, CourseRequirement(department="CMPT", number="125", min_grade="C-"))
        self.assertIsInstance(second, CourseCountRequirement)
        self.assertIs(second.level, CourseLevel.LEVEL_1XX)

    def test_flags_decode_to_booleans_and_encode_back(self):
        node = requirement_from_dict(PARSED["corequisite"])
        self.assertTrue(node.can_be_taken_concurrently)
        self.assertFalse(node.or_equivalent)
        self.assertEqual(node.to_dict(), PARSED["corequisite"])

    def test_unknown_type_raises(self):
        with self.assertRaises(ValueError):
            requirement_from_dict({"type": "lab"})
        with self.assertRaises(ValueError):
            credit_conflict_from_dict({"type": "conflict"})

    def test_conflict_title_is_optional(self):
        conflict = credit_conflict_from_dict(PARSED["credit_conflicts"][0])
        self.assertEqual(conflict, ConflictCourse(department="CMPT", number="126"))
        self.assertNotIn("title", conflict.to_dict())


class TestParsedCourseRequirements(unittest.TestCase):

    def test_dict_form_is_preserved(self):
        parsed = ParsedCourseRequirements.from_dict(PARSED)
        self.assertEqual(parsed.course_id, "CMPT 225")
        self.assertEqual(parsed.to_dict(), PARSED)

    def test_requirement_trees_skips_unset_fields(self):
        parsed = ParsedCourseRequirements.from_dict(PARSED)
        self.assertEqual(list(parsed.requirement_trees()), ["prerequisite", "corequisite"])


class TestCourseInfo(unittest.TestCase):

    def test_from_outline_accepts_dept_key(self):
        course = CourseInfo.from_dict({"dept": "CMPT", "number": "225", "title": "Data Structures",
                                       "prerequisites": None})
        self.assertEqual(course.course_id, "CMPT 225")
        self.assertEqual(course.prerequisites, "")
        self.assertFalse(course.has_requirements())

    def test_identity_is_required(self):
        with self.assertRaises(ValueError):
            CourseInfo(department="", number="225")
        with self.assertRaises(ValueError):
            CourseInfo(department="CMPT", number=" ")


class TestCourseRecord(unittest.TestCase):

    def setUp(self):
        self.course = CourseInfo(
            department="CMPT", number="225", title="Data Structures",
            prerequisites="CMPT 125 with C-.", corequisites="MACM 201.", notes="",
        )
        self.record = CourseRecord.from_parse(ParsedCourseRequirements.from_dict(PARSED), self.course)

    def test_fresh_record_is_up_to_date(self):
        self.assertFalse(self.record.needs_reparsing(self.course))
        self.assertEqual(self.record.original_title, "Data Structures")

    def test_each_source_field_triggers_reparse(self):
        for field_name in ("title", "prerequisites", "corequisites", "notes"):
            with self.subTest(field=field_name):
                changed = CourseInfo(**{**self.course.to_dict(), field_name: "changed"})
                self.assertTrue(self.record.needs_reparsing(changed))

    def test_schema_version_triggers_reparse(self):
        self.assertTrue(self.record.needs_reparsing(self.course, schema_version="SFUv2"))

    def test_stored_form_round_trip(self):
        data = self.record.to_dict()
        self.assertEqual(data["original_prerequisites"], "CMPT 125 with C-.")
        self.assertEqual(CourseRecord.from_dict(data), self.record)


class TestBlacklistedCourse(unittest.TestCase):

    def test_from_dict_fills_timestamp(self):
        entry = BlacklistedCourse.from_dict({"department": "BPK", "number": "105", "reason": "ambiguous"})
        self.assertEqual(entry.course_id, "BPK 105")
        self.assertTrue(entry.timestamp)


if __name__ == '__main__':
    unittest.main()
