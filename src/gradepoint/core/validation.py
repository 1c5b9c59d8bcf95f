"""
Input checks applied before course and semester data reach the calculator.

Validation is advisory: every function returns a ``ValidationResult`` that
lists each failed rule and never raises, so callers can show the messages
next to the offending field while the calculation itself stays total.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from gradepoint.core.gpa import CourseInput
from gradepoint.core.quality_points import VALID_TOTAL_MARKS, is_valid_total_marks

MAX_CREDIT_HOURS = 10
COURSE_NAME_MAX_LENGTH = 100
SEMESTER_NAME_MAX_LENGTH = 50
MAX_ONBOARDING_SEMESTERS = 8

CREDIT_HOURS_NOT_A_NUMBER = "credit_hours_not_a_number"
CREDIT_HOURS_NOT_POSITIVE = "credit_hours_not_positive"
CREDIT_HOURS_TOO_HIGH = "credit_hours_too_high"
INVALID_TOTAL_MARKS = "invalid_total_marks"
OBTAINED_MARKS_NOT_A_NUMBER = "obtained_marks_not_a_number"
NEGATIVE_OBTAINED_MARKS = "negative_obtained_marks"
OBTAINED_MARKS_EXCEED_TOTAL = "obtained_marks_exceed_total"
NAME_REQUIRED = "name_required"
NAME_TOO_LONG = "name_too_long"
NO_SEMESTERS = "no_semesters"
TOO_MANY_SEMESTERS = "too_many_semesters"
NO_COURSES = "no_courses"


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    code: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> List[str]:
        return [issue.message for issue in self.issues]

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]


@dataclass(frozen=True)
class OnboardingSemester:
    name: str
    courses: Sequence[CourseInput]


def _name_issues(name: Optional[str], field_name: str, label: str, max_length: int) -> List[ValidationIssue]:
    text = name.strip() if isinstance(name, str) else ""
    if not text:
        return [ValidationIssue(field_name, NAME_REQUIRED, f"{label} name is required")]
    if len(text) > max_length:
        return [
            ValidationIssue(
                field_name,
                NAME_TOO_LONG,
                f"{label} name too long (max {max_length} characters)",
            )
        ]
    return []


def _finite_number(value: object) -> Optional[float]:
    """NaN, infinities, bools and non-numeric values all count as missing."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _course_issues(course: CourseInput, require_name: bool, prefix: str = "") -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    if require_name:
        issues.extend(_name_issues(course.name, f"{prefix}name", "Course", COURSE_NAME_MAX_LENGTH))

    credit_hours = _finite_number(course.credit_hours)
    if credit_hours is None:
        issues.append(
            ValidationIssue(
                f"{prefix}credit_hours",
                CREDIT_HOURS_NOT_A_NUMBER,
                "Credit hours must be a number",
            )
        )
    elif credit_hours < 0 or (credit_hours == 0 and not course.is_audit):
        issues.append(
            ValidationIssue(
                f"{prefix}credit_hours",
                CREDIT_HOURS_NOT_POSITIVE,
                "Credit hours must be a positive number",
            )
        )
    elif credit_hours > MAX_CREDIT_HOURS:
        issues.append(
            ValidationIssue(
                f"{prefix}credit_hours",
                CREDIT_HOURS_TOO_HIGH,
                f"Credit hours cannot exceed {MAX_CREDIT_HOURS}",
            )
        )

    valid_total = is_valid_total_marks(course.total_marks)
    if not valid_total:
        allowed = ", ".join(str(m) for m in VALID_TOTAL_MARKS[:-1])
        issues.append(
            ValidationIssue(
                f"{prefix}total_marks",
                INVALID_TOTAL_MARKS,
                f"Total marks must be one of: {allowed}, or {VALID_TOTAL_MARKS[-1]}",
            )
        )

    obtained = _finite_number(course.obtained_marks)
    if obtained is None:
        issues.append(
            ValidationIssue(
                f"{prefix}obtained_marks",
                OBTAINED_MARKS_NOT_A_NUMBER,
                "Obtained marks must be a number",
            )
        )
    elif obtained < 0:
        issues.append(
            ValidationIssue(
                f"{prefix}obtained_marks",
                NEGATIVE_OBTAINED_MARKS,
                "Obtained marks cannot be negative",
            )
        )
    elif valid_total and obtained > course.total_marks:
        issues.append(
            ValidationIssue(
                f"{prefix}obtained_marks",
                OBTAINED_MARKS_EXCEED_TOTAL,
                "Obtained marks cannot exceed total marks",
            )
        )

    return issues


def validate_course(course: CourseInput, require_name: bool = True) -> ValidationResult:
    return ValidationResult(tuple(_course_issues(course, require_name)))


def validate_public_course(course: CourseInput) -> ValidationResult:
    """Calculator rows carry no name."""
    return validate_course(course, require_name=False)


def validate_semester_name(name: Optional[str]) -> ValidationResult:
    return ValidationResult(tuple(_name_issues(name, "name", "Semester", SEMESTER_NAME_MAX_LENGTH)))


def validate_onboarding(semesters: Iterable[OnboardingSemester]) -> ValidationResult:
    semesters = list(semesters)
    issues: List[ValidationIssue] = []

    if not semesters:
        issues.append(ValidationIssue("semesters", NO_SEMESTERS, "At least one semester is required"))
    elif len(semesters) > MAX_ONBOARDING_SEMESTERS:
        issues.append(
            ValidationIssue(
                "semesters",
                TOO_MANY_SEMESTERS,
                f"Maximum {MAX_ONBOARDING_SEMESTERS} semesters allowed",
            )
        )

    for i, semester in enumerate(semesters):
        prefix = f"semesters[{i}]."
        for issue in _name_issues(semester.name, f"{prefix}name", "Semester", SEMESTER_NAME_MAX_LENGTH):
            issues.append(ValidationIssue(issue.field, issue.code, f"Semester {i + 1}: {issue.message}"))

        if not semester.courses:
            issues.append(
                ValidationIssue(
                    f"{prefix}courses",
                    NO_COURSES,
                    f"Semester {i + 1}: At least one course is required",
                )
            )

        for j, course in enumerate(semester.courses):
            course_prefix = f"{prefix}courses[{j}]."
            for issue in _course_issues(course, require_name=True, prefix=course_prefix):
                issues.append(
                    ValidationIssue(
                        issue.field,
                        issue.code,
                        f"Semester {i + 1}, Course {j + 1}: {issue.message}",
                    )
                )

    return ValidationResult(tuple(issues))
