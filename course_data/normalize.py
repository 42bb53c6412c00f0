from __future__ import annotations

import math
from typing import Any, Dict, Optional

from .contracts import (
    ACTIVITY_TYPES,
    DEFAULT_COMPONENT_NAME,
    DEFAULT_COMPONENT_WEIGHT,
    DEFAULT_INSTRUCTOR_NAME,
    DEFAULT_SEMESTER,
    DEFAULT_TITLE,
    DELIVERABLE_TYPES,
    IMPORTANT_DATE_TYPES,
    Course,
    CourseData,
    Deliverable,
    GradingComponent,
    ImportantDate,
    Instructor,
    Policies,
    ScheduleItem,
    default_grading,
    default_important_dates,
    default_schedule,
    placeholder_instructor,
)

WEIGHT_TOLERANCE = 0.01


def _mapping(val: Any) -> Dict[str, Any]:
    return val if isinstance(val, dict) else {}


def _str(val: Any, default: str = "") -> str:
    return val if isinstance(val, str) else default


def _non_empty_str(val: Any, default: str) -> str:
    if isinstance(val, str) and val.strip():
        return val
    return default


def _optional_str(val: Any) -> Optional[str]:
    return val if isinstance(val, str) else None


def _finite_number(val: Any) -> bool:
    # bool is an int subclass; it is never a weight or a week number
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return False
    try:
        return math.isfinite(float(val))
    except (OverflowError, ValueError):
        return False


def _non_empty_list(val: Any) -> bool:
    return isinstance(val, list) and len(val) > 0


# ----------------------------
# Per-field coercion
# ----------------------------
def _course(val: Any) -> Course:
    c = _mapping(val)
    return Course(
        title=_non_empty_str(c.get("title"), DEFAULT_TITLE),
        code=_str(c.get("code")),
        semester=_non_empty_str(c.get("semester"), DEFAULT_SEMESTER),
        institution=_str(c.get("institution")),
    )


def _instructor(val: Any) -> Instructor:
    i = _mapping(val)
    return Instructor(
        name=_non_empty_str(i.get("name"), DEFAULT_INSTRUCTOR_NAME),
        email=_str(i.get("email")),
        office_hours=_str(i.get("office_hours")),
        location=_str(i.get("location")),
        role="ta" if i.get("role") == "ta" else "professor",
    )


def _grading_component(val: Any) -> GradingComponent:
    g = _mapping(val)
    weight = g.get("weight")
    drop_lowest = g.get("drop_lowest")
    return GradingComponent(
        component=_non_empty_str(g.get("component"), DEFAULT_COMPONENT_NAME),
        weight=float(weight) if _finite_number(weight) else DEFAULT_COMPONENT_WEIGHT,
        description=_optional_str(g.get("description")),
        drop_lowest=drop_lowest if isinstance(drop_lowest, bool) else None,
        rubric=_optional_str(g.get("rubric")),
    )


def _deliverable(d: Dict[str, Any]) -> Deliverable:
    kind = d.get("type")
    return Deliverable(
        name=_str(d.get("name")),
        due=_str(d.get("due")),
        type=kind if kind in DELIVERABLE_TYPES else "assignment",
    )


def _schedule_item(val: Any) -> ScheduleItem:
    s = _mapping(val)

    week = s.get("week")
    activities = s.get("activities")
    deliverables = s.get("deliverables")
    readings = s.get("readings")

    return ScheduleItem(
        date=_str(s.get("date")),
        week=int(week) if _finite_number(week) else 1,
        topic=_str(s.get("topic")),
        activities=(
            [a for a in activities if isinstance(a, str) and a in ACTIVITY_TYPES]
            if isinstance(activities, list)
            else ["lecture"]
        ),
        deliverables=(
            [_deliverable(d) for d in deliverables if isinstance(d, dict)]
            if isinstance(deliverables, list)
            else []
        ),
        readings=[r for r in readings if isinstance(r, str)] if isinstance(readings, list) else [],
    )


def _policies(val: Any) -> Policies:
    p = _mapping(val)
    return Policies(
        late_work=_str(p.get("late_work")),
        attendance=_str(p.get("attendance")),
        honor_code=_str(p.get("honor_code")),
    )


def _important_date(val: Any) -> ImportantDate:
    d = _mapping(val)
    kind = d.get("type")
    return ImportantDate(
        name=_str(d.get("name")),
        date=_str(d.get("date")),
        type=kind if kind in IMPORTANT_DATE_TYPES else "deadline",
    )


# ----------------------------
# Public API
# ----------------------------
def normalize_course_data(candidate: Any) -> CourseData:
    """
    Map any candidate object onto a fully valid CourseData.

    - total: never raises, whatever the input (None, lists, garbage types)
    - idempotent: normalizing an already-normalized record returns an equal record
    - fields are coerced independently; a bad field falls back to its own default
    """
    if isinstance(candidate, CourseData):
        candidate = candidate.model_dump()
    data = _mapping(candidate)

    instructors = data.get("instructors")
    grading = data.get("grading")
    schedule = data.get("schedule")
    important_dates = data.get("important_dates")

    return CourseData(
        course=_course(data.get("course")),
        instructors=(
            [_instructor(i) for i in instructors]
            if _non_empty_list(instructors)
            else [placeholder_instructor()]
        ),
        grading=[_grading_component(g) for g in grading] if _non_empty_list(grading) else default_grading(),
        schedule=[_schedule_item(s) for s in schedule] if _non_empty_list(schedule) else default_schedule(),
        policies=_policies(data.get("policies")),
        important_dates=(
            [_important_date(d) for d in important_dates]
            if _non_empty_list(important_dates)
            else default_important_dates()
        ),
    )


def grading_weight_total(data: CourseData) -> float:
    return sum(c.weight for c in data.grading)


def grading_weights_balanced(data: CourseData, tolerance: float = WEIGHT_TOLERANCE) -> bool:
    """Advisory only: weights should total 1.0; records that don't are still valid."""
    return abs(grading_weight_total(data) - 1.0) <= tolerance
