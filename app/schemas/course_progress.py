# app/schemas/course_progress.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProgressUpdateRequest(BaseModel):
    course_id: int
    lecture_id: str = Field(..., min_length=1)


class ProgressQueryRequest(BaseModel):
    course_id: int


class CourseProgressResponse(BaseModel):
    user_id: str
    course_id: int
    lecture_completed: List[str] = Field(default_factory=list)
    completed: bool = False
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProgressEnvelope(BaseModel):
    """progress_data is null when no record exists for the pair"""

    success: bool = True
    progress_data: Optional[CourseProgressResponse] = None
