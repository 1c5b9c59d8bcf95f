from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, Tuple

from gradepoint.config.logger import get_logger
from gradepoint.core.quality_points import AUDIT_GRADE, resolve_quality_point, round_half_up

logger = get_logger("gpa")

GPA_STANDINGS: list[tuple[float, str]] = [
    (3.5, "Excellent"),
    (3.0, "Good"),
    (2.5, "Average"),
]


@dataclass(frozen=True)
class CourseInput:
    credit_hours: float
    total_marks: int
    obtained_marks: float
    is_audit: bool = False
    name: Optional[str] = None


@dataclass(frozen=True)
class CourseResult:
    credit_hours: float
    total_marks: int
    obtained_marks: float
    is_audit: bool
    name: Optional[str]
    quality_point: float
    grade: str
    percentage: float
    weighted_quality_point: float

    @property
    def counts_toward_gpa(self) -> bool:
        return not self.is_audit and self.credit_hours > 0


@dataclass(frozen=True)
class GpaResult:
    gpa: float
    total_quality_points: float
    total_credit_hours: float
    courses: Tuple[CourseResult, ...]


@dataclass(frozen=True)
class SemesterResult:
    id: str
    name: str
    courses: Tuple[CourseResult, ...]
    gpa: float
    total_credit_hours: float
    total_quality_points: float


@dataclass(frozen=True)
class CgpaResult:
    cgpa: float
    total_credit_hours: float
    total_quality_points: float


@dataclass(frozen=True)
class DashboardResult:
    semesters: Tuple[SemesterResult, ...]
    cgpa: float
    total_credit_hours: float
    total_quality_points: float


@dataclass(frozen=True)
class SemesterRecord:
    id: str
    name: str
    courses: Sequence[CourseInput]


class SemesterTotals(Protocol):
    total_credit_hours: float
    total_quality_points: float


def _weighted_average(total_points: float, total_credits: float) -> float:
    if total_credits <= 0:
        return 0.0
    return total_points / total_credits


def evaluate_course(course: CourseInput) -> CourseResult:
    resolution = resolve_quality_point(course.obtained_marks, course.total_marks)
    is_audit = bool(course.is_audit)
    return CourseResult(
        credit_hours=course.credit_hours,
        total_marks=course.total_marks,
        obtained_marks=course.obtained_marks,
        is_audit=is_audit,
        name=course.name,
        quality_point=resolution.quality_point,
        grade=AUDIT_GRADE if is_audit else resolution.grade,
        percentage=resolution.percentage,
        # table values already carry the credit weight
        weighted_quality_point=0.0 if is_audit else resolution.quality_point,
    )


def calculate_gpa(courses: Iterable[CourseInput]) -> GpaResult:
    """
    GPA = Σ(weighted quality point) / Σ(credit hours)

    Audit courses and courses without positive credit hours are listed in
    the result but left out of both sums. Full precision is kept; use
    ``round_for_display`` when presenting.
    """
    results = tuple(evaluate_course(c) for c in courses)

    total_points = 0.0
    total_credits = 0.0
    for r in results:
        if not r.counts_toward_gpa:
            continue
        total_points += r.weighted_quality_point
        total_credits += r.credit_hours

    gpa = _weighted_average(total_points, total_credits)
    logger.debug("GPA %.4f over %s credit hours (%d courses)", gpa, total_credits, len(results))
    return GpaResult(
        gpa=gpa,
        total_quality_points=total_points,
        total_credit_hours=total_credits,
        courses=results,
    )


def process_semester(semester_id: str, name: str, courses: Iterable[CourseInput]) -> SemesterResult:
    result = calculate_gpa(courses)
    return SemesterResult(
        id=semester_id,
        name=name,
        courses=result.courses,
        gpa=result.gpa,
        total_credit_hours=result.total_credit_hours,
        total_quality_points=result.total_quality_points,
    )


def aggregate_cgpa(semesters: Iterable[SemesterTotals]) -> CgpaResult:
    """
    CGPA = Σ(semester quality points) / Σ(semester credit hours)

    Works from each semester's totals, so exclusions made while computing a
    semester GPA carry through unchanged.
    """
    total_points = 0.0
    total_credits = 0.0
    for sem in semesters:
        total_points += sem.total_quality_points
        total_credits += sem.total_credit_hours

    return CgpaResult(
        cgpa=_weighted_average(total_points, total_credits),
        total_credit_hours=total_credits,
        total_quality_points=total_points,
    )


def calculate_cgpa(semesters: Iterable[SemesterTotals]) -> float:
    return aggregate_cgpa(semesters).cgpa


def process_dashboard(semesters: Iterable[SemesterRecord]) -> DashboardResult:
    processed = tuple(process_semester(s.id, s.name, s.courses) for s in semesters)
    totals = aggregate_cgpa(processed)
    logger.debug("CGPA %.4f across %d semesters", totals.cgpa, len(processed))
    return DashboardResult(
        semesters=processed,
        cgpa=totals.cgpa,
        total_credit_hours=totals.total_credit_hours,
        total_quality_points=totals.total_quality_points,
    )


def cgpa_from_gpas(semester_results: Iterable[Tuple[float, float]]) -> float:
    """
    semester_results: iterable of (gpa, credit_hours)
    CGPA = Σ(gpa * credit_hours) / Σ(credit_hours)
    """
    weighted_sum = 0.0
    total_credits = 0.0
    for gpa, credits in semester_results:
        if credits <= 0:
            continue
        weighted_sum += gpa * credits
        total_credits += credits
    return _weighted_average(weighted_sum, total_credits)


def gpa_standing(gpa: float) -> str:
    for threshold, label in GPA_STANDINGS:
        if gpa >= threshold:
            return label
    return "Needs Work"


def round_for_display(value: float, places: int = 2) -> float:
    return round_half_up(value, places)
