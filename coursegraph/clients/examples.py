"""
Canonical few-shot examples of how requirement text maps onto the schema.

Each example is offered to the oracle only when its keyword occurs in the
course's requirement text, which keeps prompts short.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from ..models.course import CourseInfo


@dataclass(frozen=True)
class RequirementExample:
    keyword: str
    example: str
    output: Dict[str, Any]


def _course(department: str, number: str, **extra: str) -> Dict[str, Any]:
    return {"type": "course", "department": department, "number": number, **extra}


def _group(logic: str, *children: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "group", "logic": logic, "children": list(children)}


EXAMPLES: List[RequirementExample] = [
    # Group logic
    RequirementExample(
        keyword="one of",
        example="any one of ARCH 285, GEOG 251, or PSYC 210",
        output={"prerequisite": _group(
            "ONE_OF", _course("ARCH", "285"), _course("GEOG", "251"), _course("PSYC", "210"),
        )},
    ),
    RequirementExample(
        keyword=",",
        example="STAT 330, ACMA 231.",
        output={"corequisite": _group("ALL_OF", _course("STAT", "330"), _course("ACMA", "231"))},
    ),
    RequirementExample(
        keyword="two of",
        example="two of BPK 201, 205 and 207.",
        output={"prerequisite": _group(
            "TWO_OF", _course("BPK", "201"), _course("BPK", "205"), _course("BPK", "207"),
        )},
    ),
    RequirementExample(
        keyword="and",
        example="MATH 150 and MATH 151.",
        output={"prerequisite": _group("ALL_OF", _course("MATH", "150"), _course("MATH", "151"))},
    ),

    # Grades
    RequirementExample(
        keyword="minimum grade",
        example="CMPT 383 with a minimum grade of C-.",
        output={"prerequisite": _course("CMPT", "383", minGrade="C-")},
    ),
    RequirementExample(
        keyword="grade of at least",
        example="MATH 155 or MATH 158, with a grade of at least B.",
        output={"prerequisite": _group(
            "ONE_OF", _course("MATH", "155", minGrade="B"), _course("MATH", "158", minGrade="B"),
        )},
    ),

    # Corequisites
    RequirementExample(
        keyword="corequisite",
        example="Prerequisite: BPK 491 (minimum grade of B). Corequisite: BPK 499.",
        output={
            "prerequisite": _course("BPK", "491", minGrade="B"),
            "corequisite": _course("BPK", "499"),
        },
    ),
    RequirementExample(
        keyword="concurrent",
        example="MATH 150 (may be taken concurrently).",
        output={"prerequisite": _course("MATH", "150", canBeTakenConcurrently="true")},
    ),

    # Counts
    RequirementExample(
        keyword="units",
        example="60 units of university coursework.",
        output={"prerequisite": {"type": "creditCount", "credits": 60}},
    ),
    RequirementExample(
        keyword="credits",
        example="A minimum of 80 credits.",
        output={"prerequisite": {"type": "creditCount", "credits": 80}},
    ),
    RequirementExample(
        keyword="level",
        example="Two courses from MATH 100-level.",
        output={"prerequisite": {"type": "courseCount", "count": 2, "department": "MATH", "level": "1XX"}},
    ),
    RequirementExample(
        keyword="lower division",
        example="One lower division CMPT course.",
        output={"prerequisite": {"type": "courseCount", "count": 1, "department": "CMPT", "level": "LD"}},
    ),
    RequirementExample(
        keyword="upper division",
        example="15 upper division PHIL units.",
        output={"prerequisite": {"type": "creditCount", "credits": 15, "department": "PHIL", "level": "UD"}},
    ),
    RequirementExample(
        keyword=", including",
        example="60 units, including MATH 150.",
        output={"prerequisite": _group(
            "ALL_OF", {"type": "creditCount", "credits": 60}, _course("MATH", "150"),
        )},
    ),

    # GPA
    RequirementExample(
        keyword="cgpa",
        example="CGPA of 2.50.",
        output={"prerequisite": {"type": "CGPA", "minCGPA": 2.5}},
    ),
    RequirementExample(
        keyword="gpa",
        example="A minimum upper division GPA of 2.00.",
        output={"prerequisite": {"type": "UDGPA", "minUDGPA": 2.0}},
    ),

    # High school, programs, permission
    RequirementExample(
        keyword="equivalent",
        example="BC Mathematics 12 (or equivalent).",
        output={"prerequisite": {"type": "HSCourse", "course": "BC Mathematics 12", "orEquivalent": "true"}},
    ),
    RequirementExample(
        keyword="grade 12",
        example="Pre-Calculus 12 with a grade of at least B.",
        output={"prerequisite": {"type": "HSCourse", "course": "Pre-Calculus 12", "minGrade": "B"}},
    ),
    RequirementExample(
        keyword="admission",
        example="Admission to Faculty of Science.",
        output={"prerequisite": {"type": "program", "program": "Admission to Faculty of Science"}},
    ),
    RequirementExample(
        keyword="permission",
        example="Students must apply and receive permission from the co-op coordinator.",
        output={"prerequisite": {
            "type": "permission",
            "note": "Students must apply and receive permission from the co-op coordinator",
        }},
    ),

    # Credit conflicts
    RequirementExample(
        keyword="further credit",
        example="Students with credit for ACMA 210 cannot take this course for further credit.",
        output={"credit_conflicts": [{"type": "conflict_course", "department": "ACMA", "number": "210"}]},
    ),
    RequirementExample(
        keyword="under the title",
        example="Students who have taken CMPT 419 under the title Deep Learning may not take this course for further credit.",
        output={"credit_conflicts": [
            {"type": "conflict_course", "department": "CMPT", "number": "419", "title": "Deep Learning"},
        ]},
    ),
    RequirementExample(
        keyword="may not",
        example="BPK major and honours students may not receive credit for BPK 105.",
        output={"credit_conflicts": [
            {"type": "conflict_other", "note": "BPK major and honours students may not receive credit for BPK 105"},
        ]},
    ),

    # Not requirements
    RequirementExample(
        keyword="recommended",
        example="Recommended: CMPT 225.",
        output={"recommended_prerequisite": _course("CMPT", "225")},
    ),
]


def requirement_text(course: CourseInfo) -> str:
    """Lower-cased text the example keywords are matched against."""
    return " ".join([
        f"prerequisite: {course.prerequisites}",
        f"corequisites: {course.corequisites}",
        f"notes: {course.notes}",
    ]).lower()


def examples_for(course: CourseInfo, examples: List[RequirementExample] = None) -> List[RequirementExample]:
    """Examples whose keyword appears in the course's requirement text."""
    text = requirement_text(course)
    pool = EXAMPLES if examples is None else examples
    return [example for example in pool if example.keyword.lower() in text]
