# app/schemas/course.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ==================== Content Schemas ====================


class LectureDetails(BaseModel):
    """Lecture fields typed by the educator before ids and order are assigned"""

    title: str = Field(..., min_length=1, max_length=255)
    duration: float = Field(0, ge=0, description="Duration in minutes")
    url: Optional[str] = None
    is_preview_free: bool = False


class Lecture(LectureDetails):
    lecture_id: str = Field(..., min_length=1)
    order: int = Field(..., ge=1)


class Chapter(BaseModel):
    chapter_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=255)
    order: int = Field(..., ge=1)
    lectures: List[Lecture] = Field(default_factory=list)

    @field_validator("lectures")
    def unique_lecture_ids(cls, v):
        ids = [lecture.lecture_id for lecture in v]
        if len(ids) != len(set(ids)):
            raise ValueError("lecture ids must be unique within a chapter")
        return v


class Rating(BaseModel):
    user_id: str
    rating: int = Field(..., ge=1, le=5)


# ==================== Course Schemas ====================


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    discount: int = Field(0, ge=0, le=100)
    thumbnail: str = ""
    notes_url: Optional[str] = None
    content: List[Chapter] = Field(default_factory=list)

    @field_validator("content")
    def unique_chapter_ids(cls, v):
        ids = [chapter.chapter_id for chapter in v]
        if len(ids) != len(set(ids)):
            raise ValueError("chapter ids must be unique within a course")
        return v


class CourseSummary(BaseModel):
    """Storefront listing entry, without content or roster"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    thumbnail: str
    price: Decimal
    discount: int
    is_published: bool
    educator_id: str
    ratings: List[Rating] = Field(default_factory=list)
    created_at: datetime


class CourseDetail(CourseSummary):
    """Public course page: chapter tree included, roster left out"""

    notes_url: Optional[str] = None
    content: List[Chapter] = Field(default_factory=list)
    updated_at: datetime


class CourseResponse(CourseSummary):
    notes_url: Optional[str] = None
    content: List[Chapter] = Field(default_factory=list)
    enrolled_students: List[str] = Field(default_factory=list)
    updated_at: datetime


class CourseEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    course: CourseResponse


class CourseDetailEnvelope(BaseModel):
    success: bool = True
    course: CourseDetail


class CourseListEnvelope(BaseModel):
    success: bool = True
    courses: List[CourseSummary]


class EducatorCourseListEnvelope(BaseModel):
    success: bool = True
    courses: List[CourseResponse]


# ==================== Rating Schemas ====================


class RatingRequest(BaseModel):
    course_id: int
    rating: int = Field(..., ge=1, le=5)


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
