# app/extraction/pipeline.py
# try structured output, fall back to patterns, normalize either way

# app/extraction/pipeline.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from app.workflow_logger import log_event
from course_data.contracts import CourseData
from course_data.normalize import grading_weight_total, grading_weights_balanced, normalize_course_data

from .document_text import ParsedDocument, extract_document_text, looks_like_image_only, validate_upload
from .llm_client import InvalidResponseError, StructuredOutputError, StructuredOutputRequestor
from .syllabus_parser import extract_course_data

AI_CONFIDENCE = 0.95
FALLBACK_CONFIDENCE = 0.3
UNUSABLE_RESPONSE_CONFIDENCE = 0.2
MIN_DOCUMENT_CHARS = 50


class CourseDataExtractionError(RuntimeError):
    """Neither path produced a candidate record."""


class DocumentTooShortError(ValueError):
    pass


def _log(message: str) -> None:
    print(f"[extraction] {message}")


@dataclass
class AnalyzedDocument:
    extracted_data: CourseData
    confidence: float
    extraction_log: List[str] = field(default_factory=list)
    source: str = "patterns"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "extractedData": self.extracted_data.model_dump(),
            "confidence": self.confidence,
            "extractionLog": list(self.extraction_log),
        }


def _pattern_candidate(text: str) -> Dict[str, Any]:
    candidate = extract_course_data(text)
    if candidate is None:
        raise CourseDataExtractionError("could not extract course data")
    return candidate


async def analyze_document(
    text: str,
    requestor: Optional[StructuredOutputRequestor] = None,
    document: Optional[str] = None,
) -> AnalyzedDocument:
    """
    Structured output first, pattern extraction on any requestor error.

    requestor=None skips the backend entirely (pattern-only runs).
    The result is always normalized; confidence says which path produced it.
    """
    log: List[str] = []

    if requestor is None:
        _log("no structured-output backend configured; using pattern extraction")
        candidate = _pattern_candidate(text)
        confidence = FALLBACK_CONFIDENCE
        source = "patterns"
        log.append("Structured-output backend not configured, using pattern extraction")
    else:
        try:
            candidate = await requestor.request(text)
            confidence = AI_CONFIDENCE
            source = "ai"
            log.append("Successfully analyzed with AI")
            log.append("Extracted course information, instructors, and grading details")
        except StructuredOutputError as e:
            _log(f"structured output failed ({e.kind}): {e.message}")
            log_event(
                event="structured_output_failed",
                status="fallback",
                actor="llm_client",
                document=document,
                extra={"kind": e.kind, "status_code": e.status_code, "message": e.message},
            )
            candidate = _pattern_candidate(text)
            source = "patterns"
            if isinstance(e, InvalidResponseError):
                confidence = UNUSABLE_RESPONSE_CONFIDENCE
                log.append("AI parsing failed, using basic extraction")
                log.append(f"Parse error: {e.message}")
            else:
                confidence = FALLBACK_CONFIDENCE
                log.append("AI analysis failed, using fallback extraction")
                log.append(f"Error: {e.message}")
        except Exception as e:
            # credential providers and substitute requestors raise their own errors
            _log(f"structured output failed ({type(e).__name__}): {e}")
            log_event(
                event="structured_output_failed",
                status="fallback",
                actor="llm_client",
                document=document,
                extra={"kind": "unexpected", "error_type": type(e).__name__, "message": str(e)},
            )
            candidate = _pattern_candidate(text)
            confidence = FALLBACK_CONFIDENCE
            source = "patterns"
            log.append("AI analysis failed, using fallback extraction")
            log.append(f"Error: {e}")

    data = normalize_course_data(candidate)

    if not grading_weights_balanced(data):
        total = grading_weight_total(data)
        log.append(f"Grading weights total {total * 100:.1f}%, expected 100%")

    log_event(
        event="document_analyzed",
        status="completed",
        actor=source,
        document=document,
        extra={
            "confidence": confidence,
            "instructors": len(data.instructors),
            "grading_components": len(data.grading),
            "schedule_rows": len(data.schedule),
        },
    )
    return AnalyzedDocument(extracted_data=data, confidence=confidence, extraction_log=log, source=source)


async def analyze_file(
    data: bytes,
    content_type: Optional[str],
    filename: Optional[str] = None,
    requestor: Optional[StructuredOutputRequestor] = None,
) -> AnalyzedDocument:
    """validate upload -> acquire text -> analyze_document"""
    validate_upload(content_type, len(data))

    log_event(
        event="document_received",
        status="running",
        actor="upload",
        document=filename,
        extra={"content_type": content_type, "size_bytes": len(data)},
    )

    parsed: ParsedDocument = await run_in_threadpool(extract_document_text, data, content_type)
    result = await analyze_document(parsed.content, requestor=requestor, document=filename)

    if len(parsed.pages) > 1 and looks_like_image_only([p.content for p in parsed.pages]):
        result.extraction_log.append("Most pages have little or no text; the document may be scanned")
    return result


async def analyze_text_for_backend(text: str, requestor: StructuredOutputRequestor) -> Dict[str, Any]:
    """
    Backend endpoint body: the raw tool arguments, unnormalized.

    Requestor errors propagate so the HTTP layer can map their kind to a status.
    """
    if not text or len(text.strip()) < MIN_DOCUMENT_CHARS:
        raise DocumentTooShortError("Document text is too short or empty")

    extracted = await requestor.request(text)
    log_event(event="structured_output_completed", status="completed", actor="llm_client")
    return {
        "extractedData": extracted,
        "confidence": AI_CONFIDENCE,
        "extractionLog": ["Successfully analyzed with AI"],
    }
