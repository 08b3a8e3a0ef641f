"""
Prompt templates for the requirement oracle.

Four conversations are used per course:
1. an ambiguity check that answers CLEAR or AMBIGUOUS,
2. the parse itself, which returns schema JSON or an error object,
3. a review that answers VALID or INVALID with an optional corrected JSON,
4. a revision that repairs a parse using review or validator feedback.
"""

import json
from typing import Any, Dict, List

from ..config.constants import OracleConfig
from ..models.course import CourseInfo
from .examples import RequirementExample

SCHEMA_DESCRIPTION = """\
type ParsedCourseRequirements = {
  prerequisite?: RequirementNode;
  corequisite?: RequirementNode;
  recommended_prerequisite?: RequirementNode;
  recommended_corequisite?: RequirementNode;
  credit_conflicts?: CreditConflict[];
};

type RequirementNode =
  | { type: "group"; logic: "ALL_OF" | "ONE_OF" | "TWO_OF"; children: RequirementNode[] }
  | { type: "course"; department: string; number: string; minGrade?: string;
      canBeTakenConcurrently?: "true"; orEquivalent?: "true" }
  | { type: "HSCourse"; course: string; minGrade?: string; orEquivalent?: "true" }
  | { type: "creditCount"; credits: number; department?: string | string[];
      level?: "1XX" | "2XX" | "3XX" | "4XX" | "LD" | "UD"; minGrade?: string;
      canBeTakenConcurrently?: "true" }
  | { type: "courseCount"; count: number; department?: string | string[];
      level?: "1XX" | "2XX" | "3XX" | "4XX" | "LD" | "UD"; minGrade?: string;
      canBeTakenConcurrently?: "true" }
  | { type: "CGPA"; minCGPA: number }
  | { type: "UDGPA"; minUDGPA: number }
  | { type: "program"; program: string }
  | { type: "permission"; note: string }
  | { type: "other"; note: string };

type CreditConflict =
  | { type: "conflict_course"; department: string; number: string; title?: string }
  | { type: "conflict_other"; note: string };

Error response: { "error": true; "reason": string }
"""

PARSING_RULES = """\
1. Course numbers like "HSCI 200-level" mean department: 'HSCI', level: '2XX'
2. "Upper division" = level: 'UD', "Lower division" = level: 'LD'
3. "60 units" or "60 credits" = creditCount with credits: 60
4. "Two courses" = courseCount with count: 2
5. "may be taken concurrently" = canBeTakenConcurrently: 'true'
6. "or equivalent" = orEquivalent: 'true'
7. Extract minimum grades like "C-", "B+", etc.
8. Parse CGPA requirements like "CGPA of 2.50"
9. Parse program requirements like "Faculty of Science"
10. For permission requirements, use type: "permission" with a note field
11. Credit conflicts in notes go into the credit_conflicts array
12. Group logic types: ALL_OF, ONE_OF, TWO_OF
13. Leave out anything that is not a prerequisite, corequisite, recommended prerequisite/corequisite, or credit conflict
"""

AMBIGUITY_SYSTEM_PROMPT = (
    "You are a requirements analysis expert. Determine if course requirements "
    "can be clearly represented in the given schema."
)

REVIEW_SYSTEM_PROMPT = "You are a strict logical equivalence checker for course requirements."


def format_examples(examples: List[RequirementExample]) -> str:
    if not examples:
        return "No specific examples match this course's requirements."
    return "\n".join(
        f'\nExample: "{example.example}"\nOutput: {json.dumps(example.output, indent=2)}\n'
        for example in examples
    )


def format_course(course: CourseInfo) -> str:
    return (
        f"Department: {course.department}\n"
        f"Number: {course.number}\n"
        f"Title: {course.title}\n"
        f'Prerequisites: "{course.prerequisites}"\n'
        f'Corequisites: "{course.corequisites}"\n'
        f'Notes: "{course.notes}"'
    )


def parse_system_prompt(examples: List[RequirementExample]) -> str:
    return f"""You are an expert at parsing university course prerequisites and corequisites from natural language text into structured data.

Your task is to parse the prerequisites and corequisites for a course into a specific JSON schema.

You must follow the following schema in your output:
{SCHEMA_DESCRIPTION}
PARSING RULES:
{PARSING_RULES}
CONFIDENCE REQUIREMENTS:
- Only return a parsed result if you are confident (>85%) in your parsing
- If confidence is low, return an error with specific reasons

OUTPUT FORMAT:
Return ONLY valid JSON - either a ParsedCourseRequirements object or an error object.

Follow the format given in the correct parsing examples below.
{format_examples(examples)}"""


def parse_user_prompt(course: CourseInfo) -> str:
    return f"""Parse the prerequisites and corequisites for this course:

{format_course(course)}

Return the parsed requirements JSON or an error if not confident enough."""


def ambiguity_prompt(course: CourseInfo, examples: List[RequirementExample]) -> str:
    return f"""You are an expert at analyzing university course prerequisites and corequisites for parsing feasibility.

Typing system:
{SCHEMA_DESCRIPTION}
EXAMPLES OF WHAT THE SCHEMA CAN HANDLE:
{format_examples(examples)}

Given the course information below, determine if the requirements can be clearly and unambiguously represented using the provided schema and examples. Look for any language that is unclear, contradictory, or cannot be represented with the schema.

Course to analyze:
{format_course(course)}

Respond with ONLY one of the following:
1. "{OracleConfig.CLEAR_VERDICT}" - if the requirements can be unambiguously represented with the schema
2. "{OracleConfig.AMBIGUOUS_VERDICT}" - if there is any language that is unclear, contradictory, or cannot be represented with the schema

If {OracleConfig.AMBIGUOUS_VERDICT}, briefly explain why and quote the specific text that causes the ambiguity.

Do not answer {OracleConfig.AMBIGUOUS_VERDICT} for every course. Use the examples provided to decide whether the requirements can be clearly represented.

Known data issues:
- any text that mentions completing a prerequisite during a specific semester is not supported
- Equivalent courses are not supported

Response:"""


def review_prompt(course: CourseInfo, parsed: Dict[str, Any]) -> str:
    return f"""You are validating if a parsed JSON correctly represents course requirements.

TASK: Compare the original text with the parsed JSON. Are they logically equivalent?

ORIGINAL COURSE INFO:
Course: {course.course_id} - {course.title}
Prerequisites: "{course.prerequisites}"
Corequisites: "{course.corequisites}"
Notes: "{course.notes}"

PARSED JSON:
{json.dumps(parsed, indent=2)}

VALIDATION RULES:
1. All courses mentioned in the original text should appear in the JSON
2. All grade requirements should be correctly assigned
3. Logical words like "and" = ALL_OF, "or" = ONE_OF should match
4. Credit conflicts in notes should be in the credit_conflicts array
5. Only flag as {OracleConfig.INVALID_VERDICT} if there are actual logical errors
6. A corequisite written in the prerequisite text should be treated as a corequisite in the JSON

Respond with:
- "{OracleConfig.VALID_VERDICT}" if the JSON correctly represents the original text
- "{OracleConfig.INVALID_VERDICT} [reason]" if there are logical errors, then provide corrected JSON

Some flexibility in interpretation is allowed (synonyms, common sense), but you must be confident the requirements are represented without ambiguity.

Response:"""


def revision_prompt(course: CourseInfo, previous: Dict[str, Any], feedback: str) -> str:
    return f"""You previously parsed course requirements but the validation failed. Please correct the parsing based on this feedback:

VALIDATION FEEDBACK: {feedback}

Original course info:
{format_course(course)}

Previous parsed JSON:
{json.dumps(previous, indent=2)}

Please provide a corrected ParsedCourseRequirements JSON that addresses the validation feedback."""
