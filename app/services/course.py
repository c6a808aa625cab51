# app/services/course.py
import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.models.course import Course
from app.models.user import User
from app.schemas.course import CourseCreate

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def create_course(self, course_in: CourseCreate, educator_id: str) -> Course:
        """Persist a complete course document submitted by an educator"""
        if not course_in.thumbnail:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Thumbnail URL is required",
            )

        data = course_in.model_dump(mode="json", exclude={"price"})
        course = Course(
            **data,
            price=course_in.price,
            educator_id=educator_id,
            ratings=[],
            enrolled_students=[],
        )

        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)

        logger.info(f"Course {course.id} created by educator {educator_id}")
        return course

    def get_course(self, course_id: int) -> Optional[Course]:
        """Get a course by ID"""
        return self.db.query(Course).filter(Course.id == course_id).first()

    def get_published_courses(self) -> List[Course]:
        return (
            self.db.query(Course)
            .filter(Course.is_published == True)  # noqa: E712
            .order_by(Course.created_at.desc(), Course.id.desc())
            .all()
        )

    def get_educator_courses(self, educator_id: str) -> List[Course]:
        return (
            self.db.query(Course)
            .filter(Course.educator_id == educator_id)
            .order_by(Course.id)
            .all()
        )

    @staticmethod
    def storefront_content(course: Course) -> list:
        """Chapter tree with lecture URLs hidden unless the lecture is a free preview"""
        content = []
        for chapter in course.content or []:
            lectures = [
                {**lecture, "url": lecture.get("url") if lecture.get("is_preview_free") else ""}
                for lecture in chapter.get("lectures", [])
            ]
            content.append({**chapter, "lectures": lectures})
        return content

    @db_exception
    def add_rating(self, user: User, course_id: int, rating: int) -> Course:
        """
        Store the user's rating, replacing a previous one.
        Only enrolled users may rate.
        """
        course = self.get_course(course_id)
        if not course:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Course not found"
            )

        if not user.is_enrolled_in(course_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User is not enrolled in this course.",
            )

        ratings = [dict(r) for r in course.ratings or []]
        for entry in ratings:
            if entry.get("user_id") == user.id:
                entry["rating"] = rating
                break
        else:
            ratings.append({"user_id": user.id, "rating": rating})

        course.ratings = ratings
        self.db.commit()
        self.db.refresh(course)
        return course
