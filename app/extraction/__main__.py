"""
Package CLI entrypoint for extraction tooling.

Usage:
  python -m app.extraction analyze <file> [--patterns-only] [--out PATH]
  python -m app.extraction check <course_json>


"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from app.extraction.document_text import DocumentReadError, DocumentRejectedError, guess_content_type
from app.extraction.llm_client import StructuredOutputRequestor
from app.extraction.pipeline import CourseDataExtractionError, analyze_file
from course_data.normalize import grading_weight_total, grading_weights_balanced, normalize_course_data


def _analyze(path: str, patterns_only: bool, out: str | None) -> int:
    p = Path(path)
    if not p.exists():
        print(f"[analyze] ❌ File not found: {p}")
        return 2

    requestor = None if patterns_only else StructuredOutputRequestor()
    try:
        result = asyncio.run(
            analyze_file(p.read_bytes(), guess_content_type(str(p)), filename=p.name, requestor=requestor)
        )
    except DocumentRejectedError as e:
        print(f"[analyze] ❌ {e.message}")
        return 2
    except (DocumentReadError, CourseDataExtractionError) as e:
        print(f"[analyze] ❌ {e}")
        return 2

    payload = {"fileName": p.name, **result.to_payload()}
    rendered = json.dumps(payload, indent=2, ensure_ascii=False)

    if out:
        Path(out).write_text(rendered, encoding="utf-8")
        print(f"[analyze] wrote {out} (source={result.source}, confidence={result.confidence})")
    else:
        print(rendered)
    return 0


def _check(path: str) -> bool:
    """
    Normalizes a stored CourseData JSON file and reports the grading total.
    Returns True if weights total 100% (within tolerance).
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    data = normalize_course_data(raw)

    print(json.dumps(data.model_dump(), indent=2, ensure_ascii=False))
    total = grading_weight_total(data)
    print(f"[check] course: {data.course.code} {data.course.title}")
    print(f"[check] instructors: {len(data.instructors)}")
    print(f"[check] grading components: {len(data.grading)} (total={total * 100:.1f}%)")

    if not grading_weights_balanced(data):
        print("[check] ❌ grading weights do not total 100%")
        return False

    print("[check] ✅ PASS: grading weights total 100%")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m app.extraction")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_an = sub.add_parser("analyze", help="Analyze a PDF/DOCX syllabus")
    p_an.add_argument("file", help="Path to the syllabus")
    p_an.add_argument("--patterns-only", action="store_true", help="Skip the structured-output backend")
    p_an.add_argument("--out", default=None, help="Write the result JSON here instead of stdout")

    p_chk = sub.add_parser("check", help="Normalize a CourseData JSON file and check grading weights")
    p_chk.add_argument("file", help="Path to the CourseData JSON")

    args = parser.parse_args(argv)

    if args.cmd == "analyze":
        return _analyze(args.file, args.patterns_only, args.out)

    if args.cmd == "check":
        ok = _check(args.file)
        return 0 if ok else 2

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
