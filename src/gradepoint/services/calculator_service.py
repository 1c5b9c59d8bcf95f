"""
Plain-data facade over the grading core.

The storage and UI layers hand over JSON-like dicts (camelCase or
snake_case keys); results come back as dicts ready to serialise, with GPA
figures rounded for display only at this boundary.
"""

import math
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Sequence

from pydantic import ValidationError

from gradepoint.config.logger import get_logger
from gradepoint.config.settings import settings
from gradepoint.core.gpa import (
    CourseResult,
    SemesterResult,
    calculate_gpa,
    cgpa_from_gpas,
    gpa_standing,
    process_dashboard,
    process_semester,
    round_for_display,
)
from gradepoint.core.quality_points import QUALITY_POINT_TABLE_VERSION
from gradepoint.core.validation import validate_onboarding, validate_public_course
from gradepoint.services.schemas import CoursePayload, SemesterGpaPayload, SemesterPayload

logger = get_logger("calculator_service")

MAX_QUICK_CGPA_GPA = 4.0


class CalculatorServiceError(Exception):
    pass


def _display(value: float) -> float:
    return round_for_display(value, settings.display_precision)


def _parse_list(model, payloads: Sequence[Mapping[str, Any]], label: str) -> list:
    if not isinstance(payloads, (list, tuple)):
        raise CalculatorServiceError(f"{label} must be an array")
    parsed = []
    for idx, payload in enumerate(payloads):
        try:
            parsed.append(model.model_validate(payload))
        except ValidationError as exc:
            logger.warning("Rejected %s[%d]: %s", label, idx, exc.errors()[0].get("msg", "invalid"))
            raise CalculatorServiceError(f"Invalid {label}[{idx}]") from exc
    return parsed


def _course_dict(course: CourseResult) -> Dict[str, Any]:
    row = asdict(course)
    row["counts_toward_gpa"] = course.counts_toward_gpa
    return row


def _semester_dict(semester: SemesterResult) -> Dict[str, Any]:
    return {
        "id": semester.id,
        "name": semester.name,
        "gpa": _display(semester.gpa),
        "total_credit_hours": semester.total_credit_hours,
        "total_quality_points": _display(semester.total_quality_points),
        "courses": [_course_dict(c) for c in semester.courses],
    }


def calculate_semester(payload: Mapping[str, Any]) -> Dict[str, Any]:
    try:
        semester = SemesterPayload.model_validate(payload)
    except ValidationError as exc:
        raise CalculatorServiceError("Invalid semester payload") from exc

    record = semester.to_record()
    result = process_semester(record.id, record.name, record.courses)
    logger.info("Semester %r: GPA %.2f over %s credit hours", record.name, result.gpa, result.total_credit_hours)
    return _semester_dict(result)


def calculate_dashboard(semesters: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    parsed = _parse_list(SemesterPayload, semesters, "semesters")
    dashboard = process_dashboard(s.to_record() for s in parsed)
    logger.info("Dashboard: CGPA %.2f across %d semesters", dashboard.cgpa, len(dashboard.semesters))
    return {
        "cgpa": _display(dashboard.cgpa),
        "standing": gpa_standing(dashboard.cgpa),
        "total_credit_hours": dashboard.total_credit_hours,
        "total_quality_points": _display(dashboard.total_quality_points),
        "semester_count": len(dashboard.semesters),
        "table_version": QUALITY_POINT_TABLE_VERSION,
        "semesters": [_semester_dict(s) for s in dashboard.semesters],
    }


def calculate_public_gpa(courses: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Calculator page: rows that fail validation are skipped and reported by index."""
    parsed: List[CoursePayload] = _parse_list(CoursePayload, courses, "courses")

    valid_inputs = []
    errors: Dict[int, List[str]] = {}
    for idx, course in enumerate(parsed):
        course_input = course.to_input()
        check = validate_public_course(course_input)
        if not check.valid:
            errors[idx] = check.errors
            continue
        valid_inputs.append(course_input)

    if errors:
        logger.warning("Skipped %d of %d calculator rows", len(errors), len(parsed))

    result = calculate_gpa(valid_inputs)
    return {
        "gpa": _display(result.gpa),
        "total_credit_hours": result.total_credit_hours,
        "total_quality_points": _display(result.total_quality_points),
        "courses": [_course_dict(c) for c in result.courses],
        "errors": errors,
    }


def calculate_quick_cgpa(rows: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """CGPA from previously known (gpa, credit hours) pairs."""
    parsed: List[SemesterGpaPayload] = _parse_list(SemesterGpaPayload, rows, "semesters")

    pairs = []
    errors: Dict[int, List[str]] = {}
    for idx, row in enumerate(parsed):
        row_errors = []
        if row.credit_hours <= 0:
            row_errors.append("Credit hours must be positive")
        if row.gpa < 0 or row.gpa > MAX_QUICK_CGPA_GPA:
            row_errors.append(f"GPA must be between 0 and {MAX_QUICK_CGPA_GPA:g}")
        if row_errors:
            errors[idx] = row_errors
            continue
        pairs.append((row.gpa, row.credit_hours))

    cgpa = cgpa_from_gpas(pairs)
    if not math.isfinite(cgpa):
        logger.warning("Quick CGPA overflowed across %d rows", len(pairs))
        raise CalculatorServiceError("Credit hours are too large to combine")

    return {
        "cgpa": _display(cgpa),
        "total_credit_hours": sum(credits for _, credits in pairs),
        "errors": errors,
    }


def prepare_onboarding(semesters: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validate an onboarding batch and return it normalised for storage."""
    parsed: List[SemesterPayload] = _parse_list(SemesterPayload, semesters, "semesters")

    check = validate_onboarding(s.to_onboarding() for s in parsed)
    if not check.valid:
        logger.warning("Onboarding batch rejected: %s", "; ".join(check.errors))
        return {"valid": False, "errors": check.errors, "semesters": []}

    normalised = [
        {
            "name": semester.name.strip(),
            "courses": [
                {
                    "name": (course.name or "").strip(),
                    "credit_hours": course.credit_hours,
                    "total_marks": course.total_marks,
                    "obtained_marks": course.obtained_marks,
                    "is_audit": course.is_audit,
                }
                for course in semester.courses
            ],
        }
        for semester in parsed
    ]
    return {"valid": True, "errors": [], "semesters": normalised}
