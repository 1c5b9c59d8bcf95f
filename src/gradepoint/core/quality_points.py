"""
Per-mark quality point tables for the MNS University grading circular.

Every total-marks scheme (20, 40, 60, 80, 100) has its own table indexed by
the integer mark obtained. Quality points in these tables are already
multiplied by the course's credit weight, so they are summed as-is when a
GPA is computed.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from gradepoint.config.logger import get_logger

logger = get_logger("quality_points")

QUALITY_POINT_TABLE_VERSION = "mnsuam-cgpa-v1"

VALID_TOTAL_MARKS: Tuple[int, ...] = (20, 40, 60, 80, 100)
GRADES: Tuple[str, ...] = ("A", "B", "C", "D", "F")
AUDIT_GRADE = "P"


class InvalidSchemeError(ValueError):
    pass


@dataclass(frozen=True)
class MarkQuality:
    quality_point: float
    grade: str


@dataclass(frozen=True)
class Breakpoint:
    start: int
    end: int
    grade: str
    quality_point: float


@dataclass(frozen=True)
class MarkResolution:
    quality_point: float
    grade: str
    percentage: float


DEFAULT_ENTRY = MarkQuality(0.0, "F")


def mark(value: int, grade: str, qp: float) -> Breakpoint:
    return Breakpoint(value, value, grade, qp)


def span(start: int, end: int, grade: str, qp: float) -> Breakpoint:
    return Breakpoint(start, end, grade, qp)


def round_half_up(value: float, places: int = 0) -> float:
    if not math.isfinite(value):
        return value
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def build_table(scheme: int, breakpoints: Iterable[Breakpoint]) -> Tuple[MarkQuality, ...]:
    """Expand sparse breakpoints into a dense table covering marks 0..scheme.

    Later breakpoints overwrite earlier ones for the same mark. Marks that no
    breakpoint covers resolve to ``DEFAULT_ENTRY``.
    """
    if scheme <= 0:
        raise ValueError(f"Scheme must be positive, got {scheme}")

    table = [DEFAULT_ENTRY] * (scheme + 1)
    for bp in breakpoints:
        if bp.start > bp.end:
            raise ValueError(f"Breakpoint range is reversed: {bp.start}..{bp.end}")
        if bp.start < 0 or bp.end > scheme:
            raise ValueError(f"Breakpoint {bp.start}..{bp.end} is outside 0..{scheme}")
        if bp.grade not in GRADES:
            raise ValueError(f"Unsupported grade in breakpoint: {bp.grade}")
        if bp.quality_point < 0:
            raise ValueError(f"Quality point cannot be negative: {bp.quality_point}")

        entry = MarkQuality(float(bp.quality_point), bp.grade)
        for m in range(bp.start, bp.end + 1):
            table[m] = entry

    return tuple(table)


# Transcribed literally from the published circular. Some letters step down
# while quality points keep rising (e.g. 60 marks: 33 -> B, 34 -> C); keep
# them as published.
BREAKPOINTS_BY_SCHEME: Dict[int, Tuple[Breakpoint, ...]] = {
    20: (
        mark(8, "D", 1.0),
        mark(9, "D", 1.5),
        mark(10, "C", 2.0),
        mark(11, "C", 2.33),
        mark(12, "C", 2.67),
        mark(13, "C", 3.0),
        mark(14, "B", 3.33),
        mark(15, "B", 3.67),
        span(16, 20, "A", 4.0),
    ),
    40: (
        mark(16, "D", 2.0),
        mark(17, "D", 2.5),
        mark(18, "D", 3.0),
        mark(19, "C", 3.5),
        mark(20, "C", 4.0),
        mark(21, "C", 4.33),
        mark(22, "B", 4.67),
        mark(23, "B", 5.0),
        mark(24, "B", 5.33),
        mark(25, "B", 5.67),
        mark(26, "C", 6.0),
        mark(27, "C", 6.33),
        mark(28, "B", 6.67),
        mark(29, "B", 7.0),
        mark(30, "B", 7.33),
        mark(31, "B", 7.67),
        span(32, 40, "A", 8.0),
    ),
    60: (
        mark(24, "D", 3.0),
        mark(25, "D", 3.5),
        mark(26, "D", 4.0),
        mark(27, "C", 4.5),
        mark(28, "C", 5.0),
        mark(29, "C", 5.5),
        mark(30, "B", 6.0),
        mark(31, "B", 6.33),
        mark(32, "B", 6.67),
        mark(33, "B", 7.0),
        mark(34, "C", 7.33),
        mark(35, "C", 7.67),
        mark(36, "B", 8.0),
        mark(37, "B", 8.33),
        mark(38, "C", 8.67),
        mark(39, "B", 9.0),
        mark(40, "A", 9.33),
        mark(41, "A", 9.67),
        mark(42, "A", 10.0),
        mark(43, "B", 10.33),
        mark(44, "B", 10.67),
        mark(45, "A", 11.0),
        mark(46, "A", 11.33),
        mark(47, "A", 11.67),
        span(48, 60, "A", 12.0),
    ),
    80: (
        mark(32, "D", 4.0),
        mark(33, "D", 4.5),
        mark(34, "D", 5.0),
        mark(35, "C", 5.5),
        mark(36, "C", 6.0),
        mark(37, "C", 6.5),
        mark(38, "B", 7.0),
        mark(39, "B", 7.5),
        mark(40, "B", 8.0),
        mark(41, "A", 8.33),
        mark(42, "A", 8.67),
        mark(43, "A", 9.0),
        mark(44, "C", 9.33),
        mark(45, "C", 9.67),
        mark(46, "B", 10.0),
        mark(47, "B", 10.33),
        mark(48, "A", 10.67),
        mark(49, "A", 11.0),
        mark(50, "A", 11.33),
        mark(51, "C", 11.67),
        mark(52, "C", 12.0),
        mark(53, "B", 12.33),
        mark(54, "B", 12.67),
        mark(55, "B", 13.0),
        mark(56, "A", 13.33),
        mark(57, "A", 13.67),
        mark(58, "B", 14.0),
        mark(59, "B", 14.33),
        mark(60, "A", 14.67),
        mark(61, "A", 15.0),
        mark(62, "A", 15.33),
        mark(63, "A", 15.67),
        span(64, 80, "A", 16.0),
    ),
    100: (
        mark(40, "D", 5.0),
        mark(41, "D", 5.5),
        mark(42, "D", 6.0),
        mark(43, "C", 6.5),
        mark(44, "C", 7.0),
        mark(45, "C", 7.5),
        mark(46, "B", 8.0),
        mark(47, "B", 8.5),
        mark(48, "B", 9.0),
        mark(49, "A", 9.5),
        mark(50, "A", 10.0),
        mark(51, "A", 10.33),
        mark(52, "C", 10.67),
        mark(53, "C", 11.0),
        mark(54, "B", 11.33),
        mark(55, "B", 11.67),
        mark(56, "A", 12.0),
        mark(57, "A", 12.33),
        mark(58, "B", 12.67),
        mark(59, "B", 13.0),
        mark(60, "A", 13.33),
        mark(61, "A", 13.67),
        mark(62, "A", 14.0),
        mark(63, "A", 14.33),
        mark(64, "A", 14.67),
        mark(65, "A", 15.0),
        mark(66, "B", 15.33),
        mark(67, "B", 15.67),
        mark(68, "B", 16.0),
        mark(69, "B", 16.33),
        mark(70, "B", 16.67),
        mark(71, "A", 17.0),
        mark(72, "A", 17.33),
        mark(73, "A", 17.67),
        mark(74, "A", 18.0),
        mark(75, "A", 18.33),
        mark(76, "A", 18.67),
        mark(77, "A", 19.0),
        mark(78, "A", 19.33),
        mark(79, "A", 19.67),
        span(80, 100, "A", 20.0),
    ),
}

QUALITY_POINT_TABLES: Mapping[int, Tuple[MarkQuality, ...]] = MappingProxyType(
    {scheme: build_table(scheme, bps) for scheme, bps in BREAKPOINTS_BY_SCHEME.items()}
)


def is_valid_total_marks(value: object) -> bool:
    if isinstance(value, bool):
        return False
    return value in VALID_TOTAL_MARKS


def get_table(scheme: int) -> Tuple[MarkQuality, ...]:
    if not is_valid_total_marks(scheme):
        raise InvalidSchemeError(
            f"Unsupported total marks: {scheme}. Use one of {', '.join(map(str, VALID_TOTAL_MARKS))}."
        )
    return QUALITY_POINT_TABLES[int(scheme)]


def resolve_quality_point(obtained_marks: float, total_marks: int) -> MarkResolution:
    """
    Resolve obtained marks to the published quality point and grade.

    Marks are clamped into 0..total_marks and rounded half-up to a whole
    mark before lookup; out-of-range marks never raise.
    """
    table = get_table(total_marks)
    clamped = max(0.0, min(float(obtained_marks), float(total_marks)))
    rounded = int(round_half_up(clamped))
    entry = table[rounded]
    percentage = round_half_up(rounded / total_marks * 100, 2)

    if clamped != obtained_marks:
        logger.debug("Clamped %s to %s for %s-mark scheme", obtained_marks, clamped, total_marks)

    return MarkResolution(
        quality_point=entry.quality_point,
        grade=entry.grade,
        percentage=percentage,
    )


def credit_to_total_marks(credit_hours: float) -> Optional[int]:
    """Public calculator default: 1..5 credit hours map to 20..100 total marks."""
    try:
        rounded = int(round_half_up(float(credit_hours)))
    except (TypeError, ValueError, ArithmeticError):
        return None
    if rounded < 1 or rounded > 5:
        return None
    total = rounded * 20
    return total if is_valid_total_marks(total) else None


def total_to_credit_hours(total_marks: int) -> Optional[int]:
    if not is_valid_total_marks(total_marks):
        return None
    return int(total_marks) // 20
