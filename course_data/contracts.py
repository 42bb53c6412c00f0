from __future__ import annotations

from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, Field


Role = Literal["professor", "ta"]
ActivityType = Literal["quiz", "exam", "assignment", "monitored", "lecture", "lab"]
DeliverableType = Literal["assignment", "quiz", "exam", "project"]
ImportantDateType = Literal["exam", "deadline", "quiz", "project", "break", "other"]

ROLES = get_args(Role)
ACTIVITY_TYPES = get_args(ActivityType)
DELIVERABLE_TYPES = get_args(DeliverableType)
IMPORTANT_DATE_TYPES = get_args(ImportantDateType)

DEFAULT_TITLE = "Course Title"
DEFAULT_SEMESTER = "Fall 2024"
DEFAULT_INSTRUCTOR_NAME = "Instructor"
DEFAULT_COMPONENT_NAME = "Component"
DEFAULT_COMPONENT_WEIGHT = 0.2


class Course(BaseModel):
    title: str = DEFAULT_TITLE
    code: str = ""
    semester: str = DEFAULT_SEMESTER
    institution: str = ""


class Instructor(BaseModel):
    name: str = DEFAULT_INSTRUCTOR_NAME
    email: str = ""
    office_hours: str = ""
    location: str = ""
    role: Role = "professor"


class GradingComponent(BaseModel):
    component: str
    weight: float
    description: Optional[str] = None
    drop_lowest: Optional[bool] = None
    rubric: Optional[str] = None


class Deliverable(BaseModel):
    name: str = ""
    due: str = ""
    type: DeliverableType = "assignment"


class ScheduleItem(BaseModel):
    """
    One row of the weekly schedule.
    `week` increments but is neither contiguous nor unique.
    """
    date: str = ""
    week: int = 1
    topic: str = ""
    activities: List[ActivityType] = Field(default_factory=lambda: ["lecture"])
    deliverables: List[Deliverable] = Field(default_factory=list)
    readings: List[str] = Field(default_factory=list)


class Policies(BaseModel):
    late_work: str = ""
    attendance: str = ""
    honor_code: str = ""


class ImportantDate(BaseModel):
    name: str = ""
    date: str = ""
    type: ImportantDateType = "deadline"


class CourseData(BaseModel):
    """
    Canonical structured syllabus record.

    Every field is always present once the record has gone through
    course_data.normalize.normalize_course_data; nothing downstream re-validates it.
    """
    course: Course = Field(default_factory=Course)
    instructors: List[Instructor] = Field(default_factory=lambda: [placeholder_instructor()])
    grading: List[GradingComponent] = Field(default_factory=lambda: default_grading())
    schedule: List[ScheduleItem] = Field(default_factory=lambda: default_schedule())
    policies: Policies = Field(default_factory=Policies)
    important_dates: List[ImportantDate] = Field(default_factory=lambda: default_important_dates())


# ----------------------------
# Defaults (fresh objects on every call)
# ----------------------------
def placeholder_instructor() -> Instructor:
    return Instructor(name=DEFAULT_INSTRUCTOR_NAME, email="", office_hours="", location="", role="professor")


def default_grading() -> List[GradingComponent]:
    return [
        GradingComponent(component="Assignments", weight=0.4, description="Regular assignments and homework"),
        GradingComponent(component="Exams", weight=0.4, description="Midterm and final examinations"),
        GradingComponent(component="Participation", weight=0.2, description="Class participation and engagement"),
    ]


def default_schedule() -> List[ScheduleItem]:
    return [
        ScheduleItem(
            date="",
            week=1,
            topic="Course Introduction",
            activities=["lecture"],
            deliverables=[],
            readings=[],
        )
    ]


def default_important_dates() -> List[ImportantDate]:
    return [
        ImportantDate(name="Midterm Exam", date="", type="exam"),
        ImportantDate(name="Final Exam", date="", type="exam"),
    ]
