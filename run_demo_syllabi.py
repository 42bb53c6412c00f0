#!/usr/bin/env python3
"""
run_demo_syllabi.py

Runs every syllabus in a folder (demo_syllabi/*.pdf, *.docx) end-to-end against the FastAPI backend:

1) POST /api/syllabi/analyze   (multipart: file)
2) POST /api/courses           (optional, --save: stores the extracted record)

Outputs:
- demo_results.json (full responses per syllabus)
- demo_results.csv  (summary: title, code, instructors, grading, confidence)

Assumptions (adjust if your API differs):
- the upload field name is "file"
- the analyze response carries extractedData / confidence / extractionLog / gradingWeightTotal
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

SUMMARY_FIELDS = [
    "file",
    "title",
    "code",
    "semester",
    "instructor_count",
    "grading_components",
    "grading_weight_total",
    "confidence",
    "course_id",
    "source_path",
]


def die(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


def save_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def save_csv(path: Path, rows: List[Dict[str, Any]], fieldnames: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def find_syllabi(folder: Path) -> List[Path]:
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in CONTENT_TYPES)


def post_analyze(base_url: str, path: Path, timeout_s: int) -> Optional[Dict[str, Any]]:
    """Returns None (after printing why) when the service rejects the file."""
    url = f"{base_url}/api/syllabi/analyze"
    files = [("file", (path.name, path.read_bytes(), CONTENT_TYPES[path.suffix.lower()]))]

    r = requests.post(url, files=files, timeout=timeout_s)
    if r.status_code in (413, 415, 422):
        print(f"skipped {path.name} ({r.status_code}): {r.text}")
        return None
    if r.status_code != 200:
        die(f"POST /api/syllabi/analyze failed ({r.status_code}): {r.text}")
    return r.json()


def post_save_course(base_url: str, file_name: str, data: Dict[str, Any], timeout_s: int) -> Dict[str, Any]:
    url = f"{base_url}/api/courses"
    r = requests.post(url, json={"fileName": file_name, "data": data}, timeout=timeout_s)
    if r.status_code not in (200, 201):
        die(f"POST /api/courses failed ({r.status_code}): {r.text}")
    return r.json()


def summarize_syllabus(
    path: Path,
    analysis: Dict[str, Any],
    saved: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    data = analysis.get("extractedData") or {}
    course = data.get("course") or {}

    return {
        "file": path.name,
        "title": course.get("title"),
        "code": course.get("code"),
        "semester": course.get("semester"),
        "instructor_count": len(data.get("instructors") or []),
        "grading_components": "; ".join(
            f"{g.get('component')} {round(float(g.get('weight', 0)) * 100)}%" for g in data.get("grading") or []
        ),
        "grading_weight_total": analysis.get("gradingWeightTotal"),
        "confidence": analysis.get("confidence"),
        "course_id": (saved or {}).get("courseId"),
        "source_path": str(path),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default="http://127.0.0.1:8000", help="FastAPI base URL")
    ap.add_argument("--syllabi-dir", default="demo_syllabi", help="Folder containing *.pdf / *.docx")
    ap.add_argument("--save", action="store_true", help="Also store each result via POST /api/courses")
    ap.add_argument("--timeout", type=int, default=120, help="HTTP timeout seconds")
    ap.add_argument("--sleep", type=float, default=0.0, help="Seconds to sleep between files")
    ap.add_argument("--out-json", default="demo_results/demo_results.json")
    ap.add_argument("--out-csv", default="demo_results/demo_results.csv")
    args = ap.parse_args()

    base_url = args.base_url.rstrip("/")
    folder = Path(args.syllabi_dir)

    if not folder.exists():
        die(f"syllabi dir not found: {folder}")

    paths = find_syllabi(folder)
    if not paths:
        die(f"No syllabi found in {folder} (expected *.pdf or *.docx)")

    all_results: List[Dict[str, Any]] = []
    summary_rows: List[Dict[str, Any]] = []

    for p in paths:
        print(f"\n=== Analyzing {p.name} ===")

        analysis = post_analyze(base_url, p, timeout_s=args.timeout)
        if analysis is None:
            continue
        print(f"confidence = {analysis.get('confidence')} log = {analysis.get('extractionLog')}")

        saved = None
        if args.save:
            saved = post_save_course(base_url, p.name, analysis["extractedData"], timeout_s=args.timeout)
            print(f"courseId = {saved.get('courseId')}")

        all_results.append({"file": p.name, "analysis": analysis, "savedCourse": saved})
        summary_rows.append(summarize_syllabus(p, analysis, saved))

        if args.sleep > 0:
            time.sleep(args.sleep)

    out_json = Path(args.out_json)
    out_csv = Path(args.out_csv)
    save_json(out_json, all_results)
    save_csv(out_csv, summary_rows, fieldnames=SUMMARY_FIELDS)

    print("\n=== DONE ===")
    print(f"Wrote: {out_json}")
    print(f"Wrote: {out_csv}")


if __name__ == "__main__":
    main()
