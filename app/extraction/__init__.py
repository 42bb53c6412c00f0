# app/extraction/__init__.py
"""
Syllabus extraction package.

Public API:
- analyze_document(text, requestor=None) -> AnalyzedDocument
- analyze_file(data, content_type, filename=None, requestor=None) -> AnalyzedDocument
- extract_course_data(text) -> dict | None
"""

from .pipeline import AnalyzedDocument, CourseDataExtractionError, analyze_document, analyze_file
from .syllabus_parser import extract_course_data

__all__ = [
    "AnalyzedDocument",
    "CourseDataExtractionError",
    "analyze_document",
    "analyze_file",
    "extract_course_data",
]
