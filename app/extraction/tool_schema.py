# function-call contract sent to the structured-output backend

# app/extraction/tool_schema.py
from __future__ import annotations

from typing import Any, Dict

from course_data.contracts import ACTIVITY_TYPES, DELIVERABLE_TYPES, IMPORTANT_DATE_TYPES, ROLES

TOOL_NAME = "extract_syllabus_data"

SYSTEM_PROMPT = """You are an experienced university professor who has designed and taught many courses.
You know how syllabi are laid out and how course information is usually phrased.

When reading a syllabus:
- Tell course codes, official titles and catalog descriptions apart.
- Identify every member of the teaching staff and whether they are the primary instructor or a teaching assistant.
- Recognise weighted, point-based and participation grading schemes and express every weight as a decimal.
- Turn weekly schedules into one entry per week or session, with what is due that week.
- Find the dates students must put in a calendar (exams, project deadlines, breaks, drop deadlines).
- Summarise late work, attendance and academic integrity rules in the syllabus's own words.
- List the primary instructor before teaching assistants.

Always answer by calling the extract_syllabus_data function exactly once."""


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


SYLLABUS_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "course": {
            "type": "object",
            "properties": {
                "title": _string(
                    "Official course title as students know it; not the code and not the description "
                    "(e.g. 'Introduction to Data Structures')."
                ),
                "code": _string("Course code exactly as written (e.g. 'CS 2310', 'BIOL-445')."),
                "semester": _string("Academic term with year, matching the syllabus wording (e.g. 'Fall 2024')."),
                "institution": _string("University or college name if stated; empty string otherwise."),
            },
            "required": ["title", "code", "semester"],
        },
        "instructors": {
            "type": "array",
            "description": "All teaching staff, primary instructor first, then teaching assistants.",
            "items": {
                "type": "object",
                "properties": {
                    "name": _string("Full name as written, including a title such as Dr. or Prof. if given."),
                    "email": _string("Contact email address."),
                    "office_hours": _string(
                        "When students can meet this person, with days, times and format "
                        "(e.g. 'Mon/Wed 2-4pm', 'By appointment')."
                    ),
                    "location": _string("Office room, building or virtual location (e.g. 'Science Hall 402')."),
                    "role": {
                        "type": "string",
                        "enum": list(ROLES),
                        "description": (
                            "'professor' for the primary instructor or lecturer, 'ta' for teaching, graduate "
                            "or lab assistants. Use 'professor' when unclear."
                        ),
                    },
                },
                "required": ["name", "email"],
            },
        },
        "grading": {
            "type": "array",
            "description": "Every component that counts toward the final grade.",
            "items": {
                "type": "object",
                "properties": {
                    "component": _string(
                        "Component name in the syllabus's terms (e.g. 'Homework Assignments', 'Midterm Exam'). "
                        "Group repeated items into one entry."
                    ),
                    "weight": {
                        "type": "number",
                        "description": (
                            "Share of the final grade as a decimal between 0 and 1 (35% = 0.35, 12.5% = 0.125). "
                            "Weights should sum to 1.0; convert point totals to fractions."
                        ),
                    },
                    "description": _string(
                        "Extra context: how many, how often, drop policy (e.g. '4 exams, lowest dropped')."
                    ),
                    "drop_lowest": {"type": "boolean", "description": "True when the lowest score is dropped."},
                    "rubric": _string("Grading rubric or criteria if the syllabus gives one."),
                },
                "required": ["component", "weight"],
            },
        },
        "schedule": {
            "type": "array",
            "description": "Week-by-week schedule, one entry per week or session.",
            "items": {
                "type": "object",
                "properties": {
                    "date": _string(
                        "Start date of the week or session as YYYY-MM-DD; for ranges like 'Sept 5-9' use the start."
                    ),
                    "week": {"type": "number", "description": "Sequential week number starting at 1."},
                    "topic": _string("Main subject of the week (e.g. 'Object-Oriented Programming')."),
                    "activities": {
                        "type": "array",
                        "items": {"type": "string", "enum": list(ACTIVITY_TYPES)},
                        "description": (
                            "'lecture' for regular classes, 'lab' for hands-on sessions, 'quiz' for in-class "
                            "quizzes, 'exam' for major tests, 'assignment' when work is assigned, 'monitored' "
                            "for proctored activities."
                        ),
                    },
                    "deliverables": {
                        "type": "array",
                        "description": "Work DUE this week (not work assigned this week).",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": _string("Specific name (e.g. 'Problem Set 3', 'Project Proposal')."),
                                "due": _string("Due date as YYYY-MM-DD, optionally with a time."),
                                "type": {"type": "string", "enum": list(DELIVERABLE_TYPES)},
                            },
                        },
                    },
                    "readings": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Required readings (chapters, pages, articles).",
                    },
                },
                "required": ["week", "topic"],
            },
        },
        "important_dates": {
            "type": "array",
            "description": "Milestones worth a calendar reminder.",
            "items": {
                "type": "object",
                "properties": {
                    "name": _string("Clear name (e.g. 'Midterm Exam 1', 'Final Project Due', 'Spring Break')."),
                    "date": _string("YYYY-MM-DD; for multi-day events use the start date."),
                    "type": {
                        "type": "string",
                        "enum": list(IMPORTANT_DATE_TYPES),
                        "description": (
                            "'exam' for tests, 'quiz' for quizzes, 'project' for project milestones, 'deadline' "
                            "for other due dates, 'break' for holidays and no-class days, 'other' for "
                            "administrative dates such as add/drop."
                        ),
                    },
                },
                "required": ["name", "date", "type"],
            },
        },
        "policies": {
            "type": "object",
            "description": "Course rules students must follow, in the syllabus's wording where possible.",
            "properties": {
                "late_work": _string("Late submission rules: penalties, grace periods, cut-offs."),
                "attendance": _string("Attendance requirements, allowed absences and their effect on the grade."),
                "honor_code": _string("Academic integrity rules: allowed collaboration and plagiarism consequences."),
            },
        },
    },
    "required": ["course", "instructors", "grading", "schedule", "policies"],
    "additionalProperties": False,
}

SYLLABUS_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": TOOL_NAME,
        "description": "Extract structured course data from a syllabus document",
        "parameters": SYLLABUS_PARAMETERS,
    },
}

TOOL_CHOICE: Dict[str, Any] = {"type": "function", "function": {"name": TOOL_NAME}}
