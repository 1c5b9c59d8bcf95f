import unittest

from gradepoint.core.quality_points import QUALITY_POINT_TABLE_VERSION
from gradepoint.services.calculator_service import (
    CalculatorServiceError,
    calculate_dashboard,
    calculate_public_gpa,
    calculate_quick_cgpa,
    calculate_semester,
    prepare_onboarding,
)

FALL = {
    "id": "s1",
    "name": "Fall",
    "courses": [
        {"name": "Physics", "creditHours": 3, "totalMarks": 60, "obtainedMarks": 48},
        {"name": "Lab", "credit_hours": 2, "total_marks": 40, "obtained_marks": 30},
    ],
}
SPRING = {
    "id": "s2",
    "name": "Spring",
    "courses": [
        {"name": "Calculus", "creditHours": 4, "totalMarks": 80, "obtainedMarks": 60},
        {"name": "Quran", "creditHours": 3, "totalMarks": 60, "obtainedMarks": 50, "isAudit": True},
    ],
}


class SemesterServiceTests(unittest.TestCase):
    def test_calculate_semester(self):
        result = calculate_semester(FALL)
        self.assertEqual(result["id"], "s1")
        self.assertEqual(result["gpa"], 3.87)
        self.assertEqual(result["total_credit_hours"], 5)
        self.assertEqual(result["total_quality_points"], 19.33)
        self.assertEqual([c["grade"] for c in result["courses"]], ["A", "B"])
        self.assertTrue(result["courses"][0]["counts_toward_gpa"])

    def test_malformed_payload(self):
        payload = {"name": "Fall", "courses": [{"creditHours": "three", "totalMarks": 60, "obtainedMarks": 10}]}
        with self.assertRaises(CalculatorServiceError):
            calculate_semester(payload)

    def test_dashboard(self):
        result = calculate_dashboard([FALL, SPRING])
        self.assertEqual(result["cgpa"], 3.78)
        self.assertEqual(result["standing"], "Excellent")
        self.assertEqual(result["semester_count"], 2)
        self.assertEqual(result["total_credit_hours"], 9)
        self.assertEqual(result["table_version"], QUALITY_POINT_TABLE_VERSION)
        audit = result["semesters"][1]["courses"][1]
        self.assertEqual(audit["grade"], "P")
        self.assertEqual(audit["weighted_quality_point"], 0)

    def test_dashboard_without_semesters(self):
        result = calculate_dashboard([])
        self.assertEqual(result["cgpa"], 0)
        self.assertEqual(result["semesters"], [])

    def test_dashboard_requires_array(self):
        with self.assertRaises(CalculatorServiceError):
            calculate_dashboard({"semesters": []})


class PublicCalculatorTests(unittest.TestCase):
    def test_invalid_rows_are_skipped(self):
        rows = [
            {"creditHours": 3, "totalMarks": 60, "obtainedMarks": 48},
            {"creditHours": 3, "totalMarks": 60, "obtainedMarks": 70},
        ]
        with self.assertLogs("gradepoint.calculator_service", level="WARNING"):
            result = calculate_public_gpa(rows)
        self.assertEqual(result["gpa"], 4.0)
        self.assertEqual(len(result["courses"]), 1)
        self.assertEqual(result["errors"], {1: ["Obtained marks cannot exceed total marks"]})

    def test_no_rows(self):
        result = calculate_public_gpa([])
        self.assertEqual(result["gpa"], 0)
        self.assertEqual(result["errors"], {})

    def test_nan_course_values_are_rejected(self):
        rows = [
            {"creditHours": "nan", "totalMarks": 80, "obtainedMarks": 60},
            {"creditHours": 3, "totalMarks": 60, "obtainedMarks": "nan"},
        ]
        for row in rows:
            with self.subTest(row=row):
                with self.assertRaises(CalculatorServiceError):
                    calculate_public_gpa([row])

    def test_quick_cgpa_rejects_non_finite_gpa(self):
        with self.assertRaises(CalculatorServiceError):
            calculate_quick_cgpa([{"creditHours": 15, "gpa": "nan"}, {"creditHours": 15, "gpa": 3.0}])
        with self.assertRaises(CalculatorServiceError):
            calculate_quick_cgpa([{"creditHours": "inf", "gpa": 3.0}])

    def test_quick_cgpa_overflow_is_reported(self):
        rows = [{"creditHours": 1e308, "gpa": 3.0}, {"creditHours": 1e308, "gpa": 3.5}]
        with self.assertRaises(CalculatorServiceError):
            calculate_quick_cgpa(rows)

    def test_quick_cgpa(self):
        rows = [
            {"name": "S1", "creditHours": 15, "gpa": 3.5},
            {"creditHours": 15, "gpa": 3.0},
            {"creditHours": 15, "gpa": 4.5},
            {"creditHours": 0, "gpa": 3.0},
        ]
        result = calculate_quick_cgpa(rows)
        self.assertEqual(result["cgpa"], 3.25)
        self.assertEqual(result["total_credit_hours"], 30)
        self.assertEqual(sorted(result["errors"]), [2, 3])


class OnboardingServiceTests(unittest.TestCase):
    def test_valid_batch_is_normalised(self):
        batch = [
            {
                "name": "  Semester 1 ",
                "courses": [{"name": " Physics ", "creditHours": 3, "totalMarks": 60, "obtainedMarks": 40}],
            }
        ]
        result = prepare_onboarding(batch)
        self.assertTrue(result["valid"])
        self.assertEqual(result["semesters"][0]["name"], "Semester 1")
        self.assertEqual(result["semesters"][0]["courses"][0]["name"], "Physics")
        self.assertFalse(result["semesters"][0]["courses"][0]["is_audit"])

    def test_invalid_batch_reports_errors(self):
        batch = [{"name": f"Semester {i}", "courses": []} for i in range(1, 10)]
        result = prepare_onboarding(batch)
        self.assertFalse(result["valid"])
        self.assertIn("Maximum 8 semesters allowed", result["errors"])
        self.assertEqual(result["semesters"], [])


if __name__ == "__main__":
    unittest.main()
