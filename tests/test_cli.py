"""
Tests for the extraction CLI (python -m app.extraction).

Files are written to temporary directories; the analyze command runs with
--patterns-only so no backend is involved.
"""

import json
import tempfile
import unittest
from pathlib import Path

import docx

from app.extraction.__main__ import main
from course_data.samples import sample_course_data


class TestCheckCommand(unittest.TestCase):
    def test_balanced_sample_passes(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "course.json"
            p.write_text(json.dumps(sample_course_data().model_dump()), encoding="utf-8")
            self.assertEqual(main(["check", str(p)]), 0)

    def test_unbalanced_weights_exit_2(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "course.json"
            p.write_text(json.dumps({"grading": [{"component": "Exams", "weight": 0.6}]}), encoding="utf-8")
            self.assertEqual(main(["check", str(p)]), 2)


class TestAnalyzeCommand(unittest.TestCase):
    def test_patterns_only_writes_result(self) -> None:
        document = docx.Document()
        for line in ("HIST 150 - World History", "Spring 2025", "Essays: 60%", "Final Exam: 40%"):
            document.add_paragraph(line)

        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "hist.docx"
            out = Path(d) / "hist.json"
            document.save(str(src))

            self.assertEqual(main(["analyze", str(src), "--patterns-only", "--out", str(out)]), 0)
            payload = json.loads(out.read_text(encoding="utf-8"))

        self.assertEqual(payload["fileName"], "hist.docx")
        self.assertEqual(payload["confidence"], 0.3)
        self.assertEqual(payload["extractedData"]["course"]["code"], "HIST 150")
        self.assertEqual(
            [(g["component"], g["weight"]) for g in payload["extractedData"]["grading"]],
            [("Essays", 0.6), ("Final Exam", 0.4)],
        )

    def test_legacy_doc_exit_2(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = Path(d) / "old.doc"
            src.write_bytes(b"\xd0\xcf\x11\xe0")
            self.assertEqual(main(["analyze", str(src), "--patterns-only"]), 2)

    def test_missing_file_exit_2(self) -> None:
        self.assertEqual(main(["analyze", "/nonexistent/syllabus.pdf"]), 2)

    def test_command_required(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main([])
        self.assertNotEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
