"""
Unit tests for pattern extraction (course info, instructors, grading, policies).

The sample syllabus below is plain text shaped like what pdfplumber / python-docx
hand back: one field per line, labels followed by colons.
"""

import unittest
from unittest import mock

from app.extraction import syllabus_parser
from app.extraction.syllabus_parser import (
    extract_course_data,
    extract_course_info,
    extract_grading,
    extract_instructors,
    extract_policies,
    extract_semester,
)

SYLLABUS = """CS 101 - Introduction to Programming
Fall 2024
State University

Instructor: Dr. Alice Smith
Email: asmith@state.edu
Office Hours: Mon/Wed 2:00-4:00 PM
Office: Science Hall 210

Teaching Assistant: Bob Jones
Email: bjones@state.edu
Office Hours: Fri 10:00-11:00 AM

Grading Breakdown
Homework: 30%
Midterm Exam: 25%
Final Exam: 35%
Participation: 10%

Schedule
09/05 Introduction to Python and course overview
09/12 Variables, expressions and lab setup
09/19 Control flow; Quiz 1
Midterm Exam on 10/17
Final Project due 12/10

Late work will lose 10% per day.
Attendance is required at every lecture.
Academic integrity violations will be reported to the dean.
"""


class TestCourseInfo(unittest.TestCase):
    def test_code_title_line(self) -> None:
        info = extract_course_info(SYLLABUS)
        self.assertEqual(info["code"], "CS 101")
        self.assertEqual(info["title"], "Introduction to Programming")
        self.assertEqual(info["semester"], "Fall 2024")
        self.assertEqual(info["institution"], "State University")

    def test_title_label_and_code_label(self) -> None:
        text = "Syllabus\nCourse Title: Organic Chemistry I\nCourse Code: CHEM 2310\nSpring 2025\n"
        info = extract_course_info(text)
        self.assertEqual(info["title"], "Organic Chemistry I")
        self.assertEqual(info["code"], "CHEM 2310")
        self.assertEqual(info["semester"], "Spring 2025")

    def test_all_caps_header_line(self) -> None:
        info = extract_course_info("DATA STRUCTURES AND ALGORITHMS\nCSCI 2270\n")
        self.assertEqual(info["title"], "DATA STRUCTURES AND ALGORITHMS")
        self.assertEqual(info["code"], "CSCI 2270")

    def test_semester_year_first(self) -> None:
        self.assertEqual(extract_semester("Offered 2025 spring only"), "Spring 2025")

    def test_season_is_not_a_course_code(self) -> None:
        info = extract_course_info("Welcome to the course\nFALL 2024\n")
        self.assertEqual(info["code"], "")

    def test_university_of_pattern(self) -> None:
        info = extract_course_info("University of Michigan\nEECS 281\n")
        self.assertEqual(info["institution"], "University of Michigan")

    def test_nothing_found_leaves_fields_empty(self) -> None:
        info = extract_course_info("hello\nworld\n")
        self.assertEqual(info, {"title": "", "code": "", "semester": "", "institution": ""})


class TestInstructors(unittest.TestCase):
    def test_email_anchored_single_instructor(self) -> None:
        text = "Contact Prof. Jane Doe at jane.doe@uni.edu, office hours Tue 2-4pm, Room 305"
        instructors = extract_instructors(text)
        self.assertEqual(len(instructors), 1)
        jane = instructors[0]
        self.assertEqual(jane["email"], "jane.doe@uni.edu")
        self.assertEqual(jane["role"], "professor")
        self.assertEqual(jane["name"], "Jane Doe")
        self.assertTrue(jane["office_hours"])
        self.assertTrue(jane["location"])

    def test_professor_and_ta(self) -> None:
        instructors = extract_instructors(SYLLABUS)
        self.assertEqual([i["email"] for i in instructors], ["asmith@state.edu", "bjones@state.edu"])

        alice, bob = instructors
        self.assertEqual(alice["name"], "Alice Smith")
        self.assertEqual(alice["role"], "professor")
        self.assertEqual(alice["office_hours"], "Mon/Wed 2:00-4:00 PM")
        self.assertEqual(alice["location"], "Science Hall 210")

        self.assertEqual(bob["name"], "Bob Jones")
        self.assertEqual(bob["role"], "ta")
        self.assertEqual(bob["office_hours"], "Fri 10:00-11:00 AM")

    def test_professor_listed_before_ta(self) -> None:
        text = (
            "TA: Carl Lee, clee@school.edu\n\n\n\n\n\n"
            "Professor Maria Lopez\nmlopez@school.edu\n"
        )
        instructors = extract_instructors(text)
        self.assertEqual([i["role"] for i in instructors], ["professor", "ta"])
        self.assertEqual(instructors[0]["email"], "mlopez@school.edu")

    def test_ta_does_not_inherit_professor_room(self) -> None:
        text = "Prof. Ann Green\nann@uni.edu\nOffice: Room 12\n\nTA: Tom Hardy\ntom@uni.edu\n"
        ann, tom = extract_instructors(text)
        self.assertEqual(ann["email"], "ann@uni.edu")
        self.assertIn("Room 12", ann["location"])
        self.assertEqual(tom["name"], "Tom Hardy")
        self.assertEqual(tom["role"], "ta")
        self.assertEqual(tom["location"], "")

    def test_duplicate_emails_collapse(self) -> None:
        text = "Dr. Ann Lee ann@uni.edu\nQuestions? Write to ann@uni.edu"
        self.assertEqual(len(extract_instructors(text)), 1)

    def test_titled_name_without_email(self) -> None:
        instructors = extract_instructors("Taught by Dr. Robert Brown in the spring.")
        self.assertEqual(instructors, [
            {"name": "Robert Brown", "email": "", "office_hours": "", "location": "", "role": "professor"}
        ])

    def test_placeholder_when_nothing_found(self) -> None:
        instructors = extract_instructors("no people here")
        self.assertEqual(instructors, [
            {"name": "Instructor", "email": "", "office_hours": "", "location": "", "role": "professor"}
        ])


class TestGrading(unittest.TestCase):
    def test_labelled_section(self) -> None:
        grading = extract_grading(SYLLABUS)
        self.assertEqual(
            [(g["component"], g["weight"]) for g in grading],
            [("Homework", 0.3), ("Midterm Exam", 0.25), ("Final Exam", 0.35), ("Participation", 0.1)],
        )

    def test_keyword_vocabulary_inline(self) -> None:
        grading = extract_grading("Grading: Homework 40%, Exams 40%, Participation 20%.")
        self.assertEqual(
            [(g["component"], g["weight"]) for g in grading],
            [("Homework", 0.4), ("Exams", 0.4), ("Participation", 0.2)],
        )

    def test_reverse_percent_first(self) -> None:
        grading = extract_grading("Grading\n40% - Homework\n60% - Final Exam\n")
        self.assertEqual([(g["component"], g["weight"]) for g in grading], [("Homework", 0.4), ("Final Exam", 0.6)])

    def test_drop_lowest_flag(self) -> None:
        grading = extract_grading("Quizzes: 20% (we drop the lowest quiz)\nExams: 80%\n")
        self.assertTrue(grading[0]["drop_lowest"])
        self.assertNotIn("drop_lowest", grading[1])

    def test_duplicate_names_first_wins(self) -> None:
        grading = extract_grading("Homework: 30%\nExams: 70%\nHomework: 10%\n")
        self.assertEqual([(g["component"], g["weight"]) for g in grading], [("Homework", 0.3), ("Exams", 0.7)])

    def test_out_of_range_weight_skipped(self) -> None:
        grading = extract_grading("Exams: 150%\nProject: 100%\n")
        self.assertEqual([(g["component"], g["weight"]) for g in grading], [("Project", 1.0)])

    def test_numbered_components_kept(self) -> None:
        grading = extract_grading(
            "Grading\nMidterm Exam 1: 20%\nMidterm Exam 2: 20%\nFinal Exam: 40%\nHomework: 20%"
        )
        self.assertEqual(
            [(g["component"], g["weight"]) for g in grading],
            [("Midterm Exam 1", 0.2), ("Midterm Exam 2", 0.2), ("Final Exam", 0.4), ("Homework", 0.2)],
        )

    def test_numbered_component_after_percent(self) -> None:
        grading = extract_grading("Grading\n25% - Quiz 1\n25% - Quiz 2\n50% - Final Exam\n")
        self.assertEqual(
            [(g["component"], g["weight"]) for g in grading],
            [("Quiz 1", 0.25), ("Quiz 2", 0.25), ("Final Exam", 0.5)],
        )

    def test_no_percentages_gives_default_triple(self) -> None:
        grading = extract_grading("Grades are based on homework, exams and participation.")
        self.assertEqual(
            [(g["component"], g["weight"]) for g in grading],
            [("Assignments", 0.4), ("Exams", 0.4), ("Participation", 0.2)],
        )


class TestPolicies(unittest.TestCase):
    def test_three_sentences(self) -> None:
        policies = extract_policies(SYLLABUS)
        self.assertEqual(policies["late_work"], "Late work will lose 10% per day.")
        self.assertEqual(policies["attendance"], "Attendance is required at every lecture.")
        self.assertEqual(policies["honor_code"], "Academic integrity violations will be reported to the dean.")

    def test_sentence_at_length_limit_kept(self) -> None:
        sentence = "Late work " + "x" * 289 + "."
        self.assertEqual(len(sentence), 300)
        self.assertEqual(extract_policies(sentence)["late_work"], sentence)
        self.assertEqual(extract_policies("Late work " + "x" * 290 + ".")["late_work"], "")

    def test_runaway_sentence_discarded(self) -> None:
        text = "Attendance " + "matters a great deal " * 20 + "."
        self.assertEqual(extract_policies(text)["attendance"], "")


class TestExtractCourseData(unittest.TestCase):
    def test_all_facets_present(self) -> None:
        data = extract_course_data(SYLLABUS)
        self.assertEqual(
            set(data), {"course", "instructors", "grading", "schedule", "policies", "important_dates"}
        )
        self.assertEqual(len(data["schedule"]), 5)
        self.assertEqual([d["name"] for d in data["important_dates"]], ["Midterm Exam", "Project"])

    def test_escaping_error_returns_none(self) -> None:
        with mock.patch.object(syllabus_parser, "extract_grading", side_effect=RuntimeError("boom")):
            self.assertIsNone(extract_course_data(SYLLABUS))


if __name__ == "__main__":
    unittest.main()
