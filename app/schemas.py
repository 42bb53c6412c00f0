from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class AnalyzeTextIn(BaseModel):
    documentText: str = ""


class AnalysisOut(BaseModel):
    fileName: str
    extractedData: Dict[str, Any]
    confidence: float
    extractionLog: List[str]
    gradingWeightTotal: float


class CourseCreateIn(BaseModel):
    fileName: str = Field(min_length=1)
    data: Dict[str, Any]


class CourseUpdateIn(BaseModel):
    data: Dict[str, Any]


class CourseOut(BaseModel):
    courseId: str
    name: str
    code: Optional[str]
    semester: Optional[str]
    fileName: Optional[str]
    data: Dict[str, Any]
    createdAt: datetime
    lastModified: datetime
