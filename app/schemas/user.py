# app/schemas/user.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.course import CourseResponse


class UserResponse(BaseModel):
    id: str
    name: str
    email: Optional[str]
    image_url: Optional[str]
    enrolled_courses: List[int] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudentSummary(BaseModel):
    """Public part of a student shown to educators"""

    id: str
    name: str
    image_url: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    success: bool = True
    user: UserResponse


class EnrolledCoursesEnvelope(BaseModel):
    success: bool = True
    enrolled_courses: List[CourseResponse]
