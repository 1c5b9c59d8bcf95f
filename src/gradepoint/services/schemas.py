from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gradepoint.core.gpa import CourseInput, SemesterRecord
from gradepoint.core.validation import OnboardingSemester


class CoursePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    name: Optional[str] = None
    credit_hours: float = Field(alias="creditHours")
    total_marks: int = Field(alias="totalMarks")
    obtained_marks: float = Field(alias="obtainedMarks")
    is_audit: bool = Field(default=False, alias="isAudit")

    def to_input(self) -> CourseInput:
        return CourseInput(
            credit_hours=self.credit_hours,
            total_marks=self.total_marks,
            obtained_marks=self.obtained_marks,
            is_audit=self.is_audit,
            name=self.name,
        )


class SemesterPayload(BaseModel):
    id: str = ""
    name: str = ""
    courses: List[CoursePayload] = Field(default_factory=list)

    def to_record(self) -> SemesterRecord:
        return SemesterRecord(
            id=self.id,
            name=self.name,
            courses=[c.to_input() for c in self.courses],
        )

    def to_onboarding(self) -> OnboardingSemester:
        return OnboardingSemester(
            name=self.name,
            courses=[c.to_input() for c in self.courses],
        )


class SemesterGpaPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    name: str = ""
    credit_hours: float = Field(alias="creditHours")
    gpa: float
