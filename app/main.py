from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

from fastapi import (
    FastAPI,
    Depends,
    UploadFile,
    File,
    HTTPException,
)
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session

from app.workflow_logger import log_event
from app.models import Base, Course
from app.schemas import AnalysisOut, AnalyzeTextIn, CourseCreateIn, CourseOut, CourseUpdateIn
from app.extraction.document_text import DocumentReadError, DocumentTooLargeError, UnsupportedDocumentError
from app.extraction.llm_client import (
    PaymentRequiredError,
    RateLimitError,
    StructuredOutputError,
    StructuredOutputRequestor,
)
from app.extraction.pipeline import (
    CourseDataExtractionError,
    DocumentTooShortError,
    analyze_file,
    analyze_text_for_backend,
)
from course_data.normalize import grading_weight_total, normalize_course_data
from course_data.samples import sample_course_data


# Database setup
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./syllabi.db")
print("DATABASE_URL =", DATABASE_URL)

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Syllabus Structuring Service")


def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_requestor() -> StructuredOutputRequestor:
    return StructuredOutputRequestor()


@app.get("/health/db")
def health_db(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"ok": True}


def course_to_out(c: Course) -> CourseOut:
    return CourseOut(
        courseId=c.course_id,
        name=c.name,
        code=c.code,
        semester=c.semester,
        fileName=c.file_name,
        data=c.data,
        createdAt=c.created_at,
        lastModified=c.last_modified,
    )


def _raw_title(data: Dict[str, Any]) -> str:
    course = data.get("course")
    if isinstance(course, dict) and isinstance(course.get("title"), str):
        return course["title"].strip()
    return ""


def get_course_or_404(db: Session, course_id: str) -> Course:
    c = db.query(Course).filter(Course.course_id == course_id).first()
    if not c:
        raise HTTPException(status_code=404, detail="Course not found")
    return c


# -------------------------
# Analysis
# -------------------------
@app.post("/api/syllabi/analyze", response_model=AnalysisOut)
async def analyze_syllabus_upload(
    file: UploadFile = File(...),
    requestor: StructuredOutputRequestor = Depends(get_requestor),
):
    raw = await file.read()
    filename = file.filename or "upload"

    try:
        result = await analyze_file(raw, file.content_type, filename=filename, requestor=requestor)
    except DocumentTooLargeError as e:
        raise HTTPException(status_code=413, detail=e.message)
    except UnsupportedDocumentError as e:
        raise HTTPException(status_code=415, detail=e.message)
    except DocumentReadError as e:
        log_event(event="document_unreadable", status="failed", actor="upload", document=filename, extra={"error": str(e)})
        raise HTTPException(status_code=422, detail=str(e))
    except CourseDataExtractionError as e:
        log_event(event="extraction_failed", status="failed", actor="patterns", document=filename, extra={"error": str(e)})
        raise HTTPException(status_code=500, detail=str(e))

    payload = result.to_payload()
    return AnalysisOut(
        fileName=filename,
        extractedData=payload["extractedData"],
        confidence=payload["confidence"],
        extractionLog=payload["extractionLog"],
        gradingWeightTotal=round(grading_weight_total(result.extracted_data), 4),
    )


@app.post("/api/analyze-syllabus")
async def analyze_syllabus_text(
    body: AnalyzeTextIn,
    requestor: StructuredOutputRequestor = Depends(get_requestor),
):
    try:
        return await analyze_text_for_backend(body.documentText, requestor)
    except DocumentTooShortError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except RateLimitError as e:
        return JSONResponse(status_code=429, content={"error": e.message})
    except PaymentRequiredError as e:
        return JSONResponse(status_code=402, content={"error": e.message})
    except StructuredOutputError as e:
        log_event(event="structured_output_failed", status="failed", actor="llm_client", extra={"kind": e.kind, "error": e.message})
        return JSONResponse(status_code=500, content={"error": e.message, "extractedData": None, "confidence": 0})


@app.get("/api/sample-course")
def get_sample_course():
    return sample_course_data().model_dump()


# -------------------------
# Courses
# -------------------------
@app.post("/api/courses", response_model=CourseOut, status_code=201)
def create_course(body: CourseCreateIn, db: Session = Depends(get_db)):
    data = normalize_course_data(body.data)

    c = Course(
        name=_raw_title(body.data) or Path(body.fileName).stem or body.fileName,
        code=data.course.code,
        semester=data.course.semester,
        file_name=body.fileName,
        data=data.model_dump(),
    )
    db.add(c)
    db.commit()
    db.refresh(c)

    log_event(event="course_saved", status="completed", actor="api", document=body.fileName, extra={"course_id": c.course_id})
    return course_to_out(c)


@app.get("/api/courses", response_model=List[CourseOut])
def list_courses(db: Session = Depends(get_db)):
    rows = db.query(Course).order_by(Course.created_at.desc()).all()
    return [course_to_out(c) for c in rows]


@app.get("/api/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: str, db: Session = Depends(get_db)):
    return course_to_out(get_course_or_404(db, course_id))


@app.put("/api/courses/{course_id}", response_model=CourseOut)
def update_course(course_id: str, body: CourseUpdateIn, db: Session = Depends(get_db)):
    c = get_course_or_404(db, course_id)
    data = normalize_course_data(body.data)

    c.name = _raw_title(body.data) or c.name
    c.code = data.course.code or c.code
    c.semester = data.course.semester or c.semester
    c.data = data.model_dump()
    db.commit()
    db.refresh(c)

    log_event(event="course_updated", status="completed", actor="api", document=c.file_name, extra={"course_id": c.course_id})
    return course_to_out(c)


@app.delete("/api/courses/{course_id}")
def delete_course(course_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    c = get_course_or_404(db, course_id)
    file_name = c.file_name
    db.delete(c)
    db.commit()

    log_event(event="course_deleted", status="completed", actor="api", document=file_name, extra={"course_id": course_id})
    return {"ok": True, "courseId": course_id}
