# app/routers/course.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.course import CourseDetail, CourseDetailEnvelope, CourseListEnvelope
from app.services.course import CourseService

router = APIRouter(
    prefix="/api/course",
    tags=["Courses"],
    responses={404: {"description": "Not found"}},
)


@router.get("/all", response_model=CourseListEnvelope)
def list_courses(db: Session = Depends(get_db)):
    """
    Published courses, without chapter content or roster.
    Available to everyone.
    """
    return {"success": True, "courses": CourseService(db).get_published_courses()}


@router.get("/{course_id}", response_model=CourseDetailEnvelope)
def get_course(course_id: int, db: Session = Depends(get_db)):
    """
    Get a course by ID.
    Lecture URLs are only included for free preview lectures.
    """
    service = CourseService(db)
    course = service.get_course(course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    course_dict = CourseDetail.model_validate(course).model_dump()
    course_dict["content"] = service.storefront_content(course)
    return {"success": True, "course": course_dict}
