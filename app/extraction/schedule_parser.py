# extract_schedule, extract_important_dates

# app/extraction/schedule_parser.py
from __future__ import annotations

import re
from typing import Any, Dict, List

MAX_TOPIC_CHARS = 100
MIN_TOPIC_CHARS = 5

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
# ISO first so 2024-09-05 is never read as a partial slash date
DATE_TOKEN = (
    r"(?:\b\d{4}-\d{2}-\d{2}\b"
    r"|\b(?:0?[1-9]|1[0-2])/(?:0?[1-9]|[12]\d|3[01])(?:/(?:\d{4}|\d{2}))?\b"
    r"|\b" + MONTHS + r"\.?\s+\d{1,2}(?:st|nd|rd|th)?\b)"
)
DATE_RE = re.compile(DATE_TOKEN)

ACTIVITY_KEYWORDS = [
    ("quiz", re.compile(r"\bquiz", re.I)),
    ("exam", re.compile(r"\bexam(?:s|ination)?\b|\bmidterms?\b", re.I)),
    ("lecture", re.compile(r"\blecture", re.I)),
    ("lab", re.compile(r"\blabs?\b", re.I)),
    ("assignment", re.compile(r"\bassignment|\bhomework|\bhw\b|\bproblem\s+sets?\b", re.I)),
]

IMPORTANT_DATE_RE = re.compile(
    r"(?i:\b(?P<kind>(?:midterm|final)\s+exams?|exam(?:s|ination)?|projects?|assignments?|quiz(?:zes)?)\b"
    r"(?:[ \t]+#?(?P<num>\d{1,2})\b(?![/-]))?)"
    r"[^\n]{0,80}?(?P<date>" + DATE_TOKEN + r")"
)


def _lines(text: str) -> List[str]:
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def activities_from_line(line: str) -> List[str]:
    activities = [name for name, pattern in ACTIVITY_KEYWORDS if pattern.search(line)]
    return activities or ["lecture"]


def extract_schedule(text: str) -> List[Dict[str, Any]]:
    """
    One row per line that carries a date token (slash, ISO or "Month Day").

    - topic: the line minus the date, clipped to MAX_TOPIC_CHARS
    - week: running counter from 1
    - deliverables / readings are never filled here; only the structured-output path does that
    """
    rows: List[Dict[str, Any]] = []
    week = 1

    for line in _lines(text):
        m = DATE_RE.search(line)
        if not m:
            continue

        topic = f"{line[:m.start()]} {line[m.end():]}"
        topic = re.sub(r"\s+", " ", topic).strip(" \t-–—:|,")
        if len(topic) <= MIN_TOPIC_CHARS:
            continue

        rows.append(
            {
                "date": m.group(0),
                "week": week,
                "topic": topic[:MAX_TOPIC_CHARS],
                "activities": activities_from_line(line),
                "deliverables": [],
                "readings": [],
            }
        )
        week += 1

    return rows


def extract_important_dates(text: str) -> List[Dict[str, str]]:
    """Exam / project / assignment / quiz keyword followed by a date on the same line."""
    dates: List[Dict[str, str]] = []
    seen = set()

    for m in IMPORTANT_DATE_RE.finditer(text):
        kind = re.sub(r"\s+", " ", m.group("kind")).strip()
        name = kind.title()
        if m.group("num"):
            name = f"{name} {m.group('num')}"
        date = m.group("date")

        key = (name.lower(), date)
        if key in seen:
            continue
        seen.add(key)

        dates.append(
            {
                "name": name,
                "date": date,
                "type": "exam" if "exam" in kind.lower() else "deadline",
            }
        )

    return dates
