"""Tests for structural validation of parse results and stored records."""

import unittest

from coursegraph.handlers.validator import (
    validate,
    validate_course_record,
    validate_credit_conflict,
    validate_requirement_node,
)


def course(department="CMPT", number="120", **extra):
    return {"type": "course", "department": department, "number": number, **extra}


def envelope(**fields):
    data = {"department": "CMPT", "number": "225", "schema_version": "SFUv1.1"}
    data.update(fields)
    return data


class TestRequirementNodes(unittest.TestCase):

    def test_valid_course_has_no_errors(self):
        self.assertEqual(validate_requirement_node(course(minGrade="C-", orEquivalent="true")), [])

    def test_non_object_node(self):
        self.assertEqual(validate_requirement_node("CMPT 120"), ["root: Must be an object"])

    def test_missing_type_stops_checks(self):
        self.assertEqual(validate_requirement_node({"department": 1}), ["root.type: Must be a string"])

    def test_unknown_type(self):
        errors = validate_requirement_node({"type": "lab", "children": [1]})
        self.assertEqual(errors, ["root.type: Invalid requirement type 'lab'"])

    def test_flag_must_be_true_string(self):
        errors = validate_requirement_node(course(canBeTakenConcurrently=True))
        self.assertEqual(errors, ["root.canBeTakenConcurrently: Must be 'true' if provided"])

    def test_explicit_null_optional_is_an_error(self):
        errors = validate_requirement_node(course(minGrade=None))
        self.assertEqual(errors, ["root.minGrade: Must be a string if provided"])

    def test_unexpected_property(self):
        errors = validate_requirement_node(course(title="Intro"))
        self.assertEqual(errors, ["root.title: Unexpected property for 'course' type"])

    def test_missing_required_properties_are_all_reported(self):
        errors = validate_requirement_node({"type": "course"})
        self.assertEqual(errors, [
            "root.department: Missing required property",
            "root.number: Missing required property",
        ])

    def test_number_fields_reject_bool_and_nan(self):
        self.assertEqual(
            validate_requirement_node({"type": "CGPA", "minCGPA": True}),
            ["root.minCGPA: Must be a number"],
        )
        self.assertEqual(
            validate_requirement_node({"type": "UDGPA", "minUDGPA": float("nan")}),
            ["root.minUDGPA: Must be a number"],
        )

    def test_count_department_list_and_level(self):
        node = {"type": "courseCount", "count": 2, "department": ["MATH", 7], "level": "5XX"}
        errors = validate_requirement_node(node)
        self.assertIn("root.department[1]: Must be a string", errors)
        self.assertIn("root.level: Must be one of '1XX', '2XX', '3XX', '4XX', 'LD', 'UD' if provided", errors)

    def test_credit_count_department_wrong_type(self):
        errors = validate_requirement_node({"type": "creditCount", "credits": 60, "department": 5})
        self.assertEqual(errors, ["root.department: Must be a string or array of strings if provided"])

    def test_empty_group(self):
        errors = validate_requirement_node({"type": "group", "logic": "ALL_OF", "children": []})
        self.assertEqual(errors, ["root.children: Must contain at least one requirement"])

    def test_group_errors_do_not_stop_child_checks(self):
        node = {
            "type": "group",
            "logic": "SOME_OF",
            "children": [course(), {"type": "course", "department": "MATH"}, 3],
        }
        self.assertEqual(validate_requirement_node(node), [
            "root.logic: Must be 'ALL_OF', 'ONE_OF', or 'TWO_OF'",
            "root.children[1].number: Missing required property",
            "root.children[2]: Must be an object",
        ])

    def test_children_must_be_array(self):
        errors = validate_requirement_node({"type": "group", "logic": "ONE_OF", "children": course()})
        self.assertEqual(errors, ["root.children: Must be an array"])


class TestCreditConflicts(unittest.TestCase):

    def test_valid_conflicts(self):
        self.assertEqual(validate_credit_conflict(
            {"type": "conflict_course", "department": "ACMA", "number": "210", "title": "Old"}, "c"), [])
        self.assertEqual(validate_credit_conflict({"type": "conflict_other", "note": "x"}, "c"), [])

    def test_unknown_conflict_type(self):
        self.assertEqual(
            validate_credit_conflict({"type": "conflict"}, "credit_conflicts[0]"),
            ["credit_conflicts[0].type: Must be either 'conflict_course' or 'conflict_other'"],
        )


class TestEnvelope(unittest.TestCase):

    def test_minimal_record_is_valid(self):
        result = validate(envelope())
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])

    def test_root_must_be_object(self):
        result = validate([])
        self.assertFalse(result.is_valid)
        self.assertEqual(result.errors, ["Root: Must be an object"])

    def test_errors_are_prefixed_with_field_path(self):
        result = validate(envelope(prerequisite={
            "type": "group", "logic": "ONE_OF",
            "children": [course(), {"type": "course", "department": "MATH", "number": 151}],
        }))
        self.assertEqual(result.errors, ["prerequisite.children[1].number: Must be a string"])

    def test_unexpected_top_level_property(self):
        result = validate(envelope(notes="x"))
        self.assertEqual(result.errors, ["notes: Unexpected property"])

    def test_missing_identity(self):
        result = validate({"prerequisite": course()})
        self.assertEqual(result.errors, [
            "department: Missing required property",
            "number: Missing required property",
            "schema_version: Missing required property",
        ])

    def test_credit_conflicts_must_be_array(self):
        result = validate(envelope(credit_conflicts={}))
        self.assertEqual(result.errors, ["credit_conflicts: Must be an array if provided"])

    def test_parse_result_rejects_stored_fields(self):
        result = validate(envelope(original_title="Data Structures"))
        self.assertEqual(result.errors, ["original_title: Unexpected property"])

    def test_stored_record_requires_source_text(self):
        record = envelope(
            original_title="Data Structures",
            original_prerequisites="CMPT 125",
            original_corequisites="",
            original_notes="",
            timestamp="2024-01-01T00:00:00+00:00",
        )
        self.assertTrue(validate_course_record(record).is_valid)

        del record["timestamp"]
        self.assertEqual(validate_course_record(record).errors, ["timestamp: Missing required property"])


if __name__ == '__main__':
    unittest.main()
