# extract_course_data + course info / instructors / grading / policies facets

# app/extraction/syllabus_parser.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from .schedule_parser import extract_important_dates, extract_schedule

HEADER_LINES = 20
CONTEXT_RADIUS = 300
GRADING_SECTION_CHARS = 800
MAX_POLICY_CHARS = 300
MAX_TITLE_CHARS = 100

# ----------------------------
# Course info patterns
# ----------------------------
COURSE_CODE_RE = re.compile(r"\b([A-Z]{2,6})\s*-?\s*([0-9]{3,4}[A-Z]?)\b")
CODE_TITLE_LINE_RE = re.compile(r"^([A-Z]{2,6}\s*-?\s*\d{3,4}[A-Z]?)\s*[-–—:]\s*(.+)$")
TITLE_LABEL_RE = re.compile(r"(?i:course\s+(?:title|name))\s*:\s*([^\n]{3,100})")
CODE_LABEL_RE = re.compile(r"(?i:course\s+(?:code|number|id))\s*:\s*([A-Z]{2,6}\s*-?\s*\d{3,4}[A-Z]?)")
ALL_CAPS_LINE_RE = re.compile(r"^[A-Z][A-Z0-9&,:'-]*(?:\s+[A-Z0-9&,:'-]+)+$")
LABEL_LINE_RE = re.compile(r"^[A-Za-z][A-Za-z ]{1,30}:\s")

# "FALL 2024" and "ROOM 101" look like course codes
NOT_A_SUBJECT = {"FALL", "SPRING", "SUMMER", "WINTER", "AUTUMN", "ROOM", "RM", "PAGE", "WEEK", "UNIT", "TERM",
                 "YEAR", "SUITE", "HALL", "SECTION", "CHAPTER", "CH", "PHONE", "FAX"}
NOT_A_TITLE = ("university", "college", "institute", "department", "syllabus", "semester", "page ", "school of")

SEASONS = r"fall|spring|summer|winter|autumn"
SEMESTER_PATTERNS = [
    re.compile(rf"\b(?P<season>{SEASONS})\s+(?:semester|term|session|quarter)\s*,?\s+(?P<year>\d{{4}})\b", re.I),
    re.compile(rf"\b(?P<season>{SEASONS})\s*,?\s+(?P<year>\d{{4}})\b", re.I),
    re.compile(rf"\b(?P<year>\d{{4}})\s+(?P<season>{SEASONS})\b", re.I),
]

_CAP_WORD = r"[A-Z][A-Za-z.&'-]*"
INSTITUTION_PATTERNS = [
    re.compile(rf"\b((?:The[ \t]+)?(?:University|College|Institute|School)[ \t]+of[ \t]+{_CAP_WORD}(?:[ \t]+{_CAP_WORD}){{0,3}})"),
    re.compile(rf"\b((?:{_CAP_WORD}[ \t]+){{1,4}}(?:University|College|Institute(?:[ \t]+of[ \t]+Technology)?|School))\b"),
]
MAX_INSTITUTION_CHARS = 80

# ----------------------------
# Instructor patterns
# ----------------------------
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

TITLED_NAME_RE = re.compile(
    r"(?i:\b(?:dr|prof|professor|instructor|lecturer|mr|ms|mrs|ta|teaching\s+assistant))[.:]?\s+"
    r"([A-Z][a-z]+(?:\s+[A-Z]\.)?\s+[A-Z][a-zA-Z'-]+)"
)
NAME_PATTERNS = [
    TITLED_NAME_RE,
    re.compile(r"\b([A-Z][a-z]+\s+[A-Z][a-zA-Z'-]+)\s*,?\s*(?i:ph\.?\s?d|m\.?sc?|m\.?a|ed\.?d)\b"),
    re.compile(r"\b([A-Z][a-z]+\s+[A-Z][a-z]+)\b"),
]
NAME_STOPWORDS = {
    "office", "hours", "hour", "room", "email", "contact", "course", "syllabus", "phone", "teaching", "assistant",
    "professor", "instructor", "department", "university", "college", "school", "hall", "building", "location",
    "information", "class", "lecture", "week", "fall", "spring", "summer", "winter", "monday", "tuesday",
    "wednesday", "thursday", "friday", "saturday", "sunday", "the", "and", "for", "please", "appointment",
}

_FIELD_END = r"\s+(?i:office|e-?mail|phone|tel|location|room|hours)\b|\s*[\n;|]|\.(?:\s|$)|$"
OFFICE_HOURS_PATTERNS = [
    re.compile(r"(?i:office\s+hours?|hours)\s*:?\s*(.{10,80}?)" + "(?=" + _FIELD_END + ")"),
    re.compile(r"(?i:office\s+hours?|hours)\s*:?\s*([^.\n]{10,80})"),
]
LOCATION_PATTERNS = [
    re.compile(r"(?i:office(?:\s+location)?|location)\s*:\s*(.{2,60}?)(?=\s*,|" + _FIELD_END + ")"),
    re.compile(r"\b((?i:room|rm\.?)\s*#?\s*\d+[A-Za-z]?)\b"),
    re.compile(r"\b([A-Z][a-z]+\s+(?i:hall|building|center|bldg\.?)\s+\d+[A-Za-z]?)\b"),
    re.compile(r"\b((?i:building)\s+[A-Z])\b"),
]
TA_RE = re.compile(
    r"(?<![A-Za-z])(?:ta|t\.a\.|teaching\s+assistants?|graduate\s+(?:student|assistant)s?)(?![A-Za-z])",
    re.I,
)

# ----------------------------
# Grading patterns
# ----------------------------
GRADING_SECTION_RE = re.compile(
    r"(?i)\b(?:grading|grade\s+breakdown|grade\s+distribution|assessment|evaluation)\b"
)
_PCT = r"(\d{1,3}(?:\.\d+)?)\s*%"
_SEP = r"[ \t]*[-:–—=(][ \t]*"
_LABEL_WORDS = r"([A-Za-z][A-Za-z&/'-]*(?:[ \t]+(?:[A-Za-z][A-Za-z&/'-]*|#?\d{1,2}(?![\d%.]))){0,3})"
COMPONENT_VOCAB = (
    r"assignments?|homeworks?|hw|exams?|examinations?|tests?|quiz(?:zes)?|projects?|papers?|participation|"
    r"attendance|midterms?(?:\s+exams?)?|finals?(?:\s+exams?)?|lab\s+reports?|labs?"
)
# (pattern, label group, percent group), in priority order; each % token is claimed once
GRADING_PATTERNS: List[Tuple[re.Pattern, int, int]] = [
    (re.compile(r"(?m)(?:^|[;,|\u2022])[ \t]*([A-Za-z][A-Za-z0-9 &/'#-]{1,48}?)" + _SEP + _PCT), 1, 2),
    (re.compile(r"(?i)\b(" + COMPONENT_VOCAB + r")\b" + r"[ \t]*[-:–—=(]?[ \t]*" + _PCT), 1, 2),
    (re.compile(_PCT + r"[ \t]*[-:–—=][ \t]*" + _LABEL_WORDS), 2, 1),
    (re.compile(r"([A-Za-z][A-Za-z0-9 &/'#-]{1,30}?)" + _SEP + _PCT), 1, 2),
]
GRADING_STOPWORDS = {"total", "grade", "grades", "final grade", "course grade", "overall", "grading", "of"}
DROP_LOWEST_RE = re.compile(r"(?i)drop(?:s|ped)?\s+(?:the\s+)?lowest")

# ----------------------------
# Policy patterns
# ----------------------------
POLICY_PATTERNS: Dict[str, List[re.Pattern]] = {
    "late_work": [
        re.compile(r"late\s+work[^.!?]*[.!?]", re.I),
        re.compile(r"late\s+assignments?[^.!?]*[.!?]", re.I),
        re.compile(r"late\s+submissions?[^.!?]*[.!?]", re.I),
        re.compile(r"late\s+policy[^.!?]*[.!?]", re.I),
    ],
    "attendance": [
        re.compile(r"attendance[^.!?]*[.!?]", re.I),
        re.compile(r"absen(?:t|ces?)[^.!?]*[.!?]", re.I),
    ],
    "honor_code": [
        re.compile(r"(?:honor\s+code|academic\s+(?:integrity|honesty|dishonesty)|cheating|plagiarism)[^.!?]*[.!?]", re.I),
    ],
}

DEFAULT_GRADING = [
    {"component": "Assignments", "weight": 0.4, "description": "Regular assignments and homework"},
    {"component": "Exams", "weight": 0.4, "description": "Midterm and final examinations"},
    {"component": "Participation", "weight": 0.2, "description": "Class participation and engagement"},
]


def _lines(text: str) -> List[str]:
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def _clip(s: str, limit: int) -> str:
    s = re.sub(r"\s+", " ", s).strip()
    if len(s) <= limit:
        return s
    cut = s[:limit].rsplit(" ", 1)[0]
    return cut or s[:limit]


def _is_course_code(code: str) -> bool:
    m = COURSE_CODE_RE.match(code)
    return bool(m) and m.group(1) not in NOT_A_SUBJECT


def _normalize_code(code: str) -> str:
    return re.sub(r"\s+", " ", code).strip()


# ----------------------------
# Course info
# ----------------------------
def _title_candidate(line: str) -> bool:
    low = line.lower()
    return (
        15 <= len(line) <= 80
        and line[0].isupper()
        and "@" not in line
        and not LABEL_LINE_RE.match(line)
        and not any(w in low for w in NOT_A_TITLE)
    )


def _all_caps_title(line: str) -> bool:
    low = line.lower()
    return (
        10 <= len(line) <= 80
        and bool(ALL_CAPS_LINE_RE.match(line))
        and sum(ch.isalpha() for ch in line) >= 8
        and not any(w in low for w in NOT_A_TITLE)
    )


def extract_semester(text: str) -> str:
    for pattern in SEMESTER_PATTERNS:
        m = pattern.search(text)
        if m:
            return f"{m.group('season').capitalize()} {m.group('year')}"
    return ""


def extract_institution(text: str) -> str:
    for pattern in INSTITUTION_PATTERNS:
        for m in pattern.finditer(text):
            name = m.group(1).strip()
            if 5 <= len(name) < MAX_INSTITUTION_CHARS:
                return name
    return ""


def extract_course_info(text: str) -> Dict[str, str]:
    """
    Title, code, semester and institution, each resolved independently.

    Title priority: "CODE - Title" line, "Course Title:" label, all-caps header line,
    standalone capitalized line (15-80 chars) within the first HEADER_LINES lines.
    Missing values stay empty; the normalizer fills title/semester defaults.
    """
    head = _lines(text)[:HEADER_LINES]
    title = ""
    code = ""

    for line in head:
        m = CODE_TITLE_LINE_RE.match(line)
        if m and _is_course_code(m.group(1)):
            code = _normalize_code(m.group(1))
            title = _clip(m.group(2), MAX_TITLE_CHARS)
            break

    if not title:
        m = TITLE_LABEL_RE.search(text)
        if m:
            title = _clip(m.group(1), MAX_TITLE_CHARS)

    if not title:
        title = next((ln for ln in head if _all_caps_title(ln)), "")

    if not title:
        title = next((ln for ln in head if _title_candidate(ln)), "")

    if not code:
        m = CODE_LABEL_RE.search(text)
        if m:
            code = _normalize_code(m.group(1))

    if not code:
        for scope in ("\n".join(head), text):
            m = next((c for c in COURSE_CODE_RE.finditer(scope) if c.group(1) not in NOT_A_SUBJECT), None)
            if m:
                code = _normalize_code(m.group(0))
                break

    return {
        "title": title,
        "code": code,
        "semester": extract_semester(text),
        "institution": extract_institution(text),
    }


# ----------------------------
# Instructors
# ----------------------------
def _nearest(pattern: re.Pattern, segment: str, anchor_start: int, anchor_end: int, valid=None) -> Optional[re.Match]:
    """Match of `pattern` in `segment` closest to the anchor span (the email)."""
    best: Optional[re.Match] = None
    best_dist = None
    for m in pattern.finditer(segment):
        if valid is not None and not valid(m.group(1)):
            continue
        if m.end() <= anchor_start:
            dist = anchor_start - m.end()
        elif m.start() >= anchor_end:
            dist = m.start() - anchor_end
        else:
            continue
        if best_dist is None or dist < best_dist:
            best, best_dist = m, dist
    return best


def _valid_name(name: str) -> bool:
    words = name.split()
    if not (5 <= len(name) <= 40) or len(words) < 2:
        return False
    return not any(w.lower().strip(".") in NAME_STOPWORDS for w in words)


def _first_group(patterns: List[re.Pattern], segment: str, start: int, end: int, valid=None) -> Tuple[str, Optional[re.Match]]:
    for pattern in patterns:
        m = _nearest(pattern, segment, start, end, valid)
        if m:
            return m.group(1).strip(" ,;:"), m
    return "", None


def _placeholder_instructor() -> Dict[str, str]:
    return {"name": "Instructor", "email": "", "office_hours": "", "location": "", "role": "professor"}


def extract_instructors(text: str) -> List[Dict[str, str]]:
    """
    Email-anchored instructor extraction.

    For each distinct email, look at a +/-CONTEXT_RADIUS window clipped at the
    neighbouring emails (and starting past the previous instructor's fields)
    and pick the nearest name / office hours / location.
    Never returns an empty list.
    """
    matches = list(EMAIL_RE.finditer(text))
    instructors: List[Dict[str, str]] = []
    seen = set()
    # end of the previous instructor's claimed fields; later windows start past it
    claim_floor = 0

    for idx, em in enumerate(matches):
        email = em.group(0)
        if email.lower() in seen:
            continue
        seen.add(email.lower())

        lo = max(0, em.start() - CONTEXT_RADIUS)
        hi = min(len(text), em.end() + CONTEXT_RADIUS)
        if idx > 0:
            lo = max(lo, matches[idx - 1].end())
        if idx + 1 < len(matches):
            hi = min(hi, matches[idx + 1].start())
        lo = max(lo, claim_floor)

        segment = text[lo:hi]
        start, end = em.start() - lo, em.end() - lo

        name, name_match = _first_group(NAME_PATTERNS, segment, start, end, _valid_name)
        office_hours, hours_match = _first_group(OFFICE_HOURS_PATTERNS, segment, start, end)
        location, location_match = _first_group(LOCATION_PATTERNS, segment, start, end)

        claim_floor = lo + max([end] + [m.end() for m in (name_match, hours_match, location_match) if m is not None])

        # role comes from the lead-in to this email only, not the neighbours' text
        if name_match is not None and name_match.start() < start:
            lead_in = segment[max(0, name_match.start() - 40):end]
        else:
            lead_in = segment[max(0, start - 120):end]
        role = "ta" if TA_RE.search(lead_in) else "professor"

        instructors.append(
            {
                "name": name or "Instructor",
                "email": email,
                "office_hours": office_hours,
                "location": location,
                "role": role,
            }
        )

    if not instructors:
        m = TITLED_NAME_RE.search(text)
        if m:
            instructors.append(
                {"name": m.group(1).strip(), "email": "", "office_hours": "", "location": "", "role": "professor"}
            )

    if not instructors:
        return [_placeholder_instructor()]

    # primary instructor(s) first; sort is stable
    return sorted(instructors, key=lambda i: 0 if i["role"] == "professor" else 1)


# ----------------------------
# Grading
# ----------------------------
def find_grading_section(text: str) -> Optional[str]:
    """First grading/assessment heading whose following window actually has a percentage."""
    for m in GRADING_SECTION_RE.finditer(text):
        window = text[m.start(): m.start() + GRADING_SECTION_CHARS]
        if "%" in window:
            return window
    return None


def _clean_component(label: str) -> str:
    label = re.sub(r"[^\w\s]", " ", label)
    return re.sub(r"\s+", " ", label).strip()


def _scan_grading(search_text: str) -> List[Dict[str, Any]]:
    claimed = set()
    found: List[Tuple[int, Dict[str, Any]]] = []

    for pattern, label_group, pct_group in GRADING_PATTERNS:
        for m in pattern.finditer(search_text):
            pct_pos = m.start(pct_group)
            if pct_pos in claimed:
                continue

            component = _clean_component(m.group(label_group))
            weight = float(m.group(pct_group)) / 100

            if not (0 < weight <= 1):
                continue
            if not (2 <= len(component) <= 50) or component.lower() in GRADING_STOPWORDS:
                continue

            claimed.add(pct_pos)
            tail = re.split(r"[\n;]", search_text[m.end(): m.end() + 120])[0]
            item: Dict[str, Any] = {
                "component": component[0].upper() + component[1:],
                "weight": weight,
                "description": f"{component} assessment component",
            }
            if DROP_LOWEST_RE.search(tail):
                item["drop_lowest"] = True
            found.append((pct_pos, item))

    # document order, first occurrence of each name wins
    out: List[Dict[str, Any]] = []
    seen = set()
    for _, item in sorted(found, key=lambda x: x[0]):
        key = item["component"].lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def extract_grading(text: str) -> List[Dict[str, Any]]:
    """
    Percentage-based grading components, restricted to the grading section when one is found.
    Falls back to the whole text, then to the fixed Assignments/Exams/Participation split.
    """
    components: List[Dict[str, Any]] = []
    section = find_grading_section(text)
    if section is not None:
        components = _scan_grading(section)
    if not components:
        components = _scan_grading(text)
    if not components:
        return [dict(c) for c in DEFAULT_GRADING]
    return components


# ----------------------------
# Policies
# ----------------------------
def extract_policies(text: str) -> Dict[str, str]:
    policies = {"late_work": "", "attendance": "", "honor_code": ""}
    for key, patterns in POLICY_PATTERNS.items():
        for pattern in patterns:
            m = pattern.search(text)
            # runaway matches cross section boundaries
            if m and len(m.group(0)) <= MAX_POLICY_CHARS:
                policies[key] = re.sub(r"\s+", " ", m.group(0)).strip()
                break
    return policies


# ----------------------------
# Public API
# ----------------------------
def extract_course_data(text: str) -> Optional[Dict[str, Any]]:
    """
    Pattern-based candidate CourseData (pre-normalization).

    Facets are independent; each degrades to its own defaults.
    Returns None only when an unexpected error escapes a facet extractor.
    """
    try:
        return {
            "course": extract_course_info(text),
            "instructors": extract_instructors(text),
            "grading": extract_grading(text),
            "schedule": extract_schedule(text),
            "policies": extract_policies(text),
            "important_dates": extract_important_dates(text),
        }
    except Exception as e:
        print(f"[extraction] pattern extraction failed: {e}")
        return None
