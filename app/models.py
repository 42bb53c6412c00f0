import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Text, String, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Course(Base):
    __tablename__ = "courses"

    # opaque UUID string; String(36) keeps sqlite and Postgres on the same column type
    course_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(Text, nullable=False)
    code = Column(Text)
    semester = Column(Text)
    file_name = Column(Text)

    # normalized CourseData (model_dump)
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)
    last_modified = Column(DateTime(timezone=True), nullable=False, default=_now_utc, onupdate=_now_utc)
