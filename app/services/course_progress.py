# app/services/course_progress.py
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.decorator import DBException, db_exception
from app.models.course import Course
from app.models.course_progress import CourseProgress


class CourseProgressService:
    def __init__(self, db: Session):
        self.db = db

    def get_progress(self, user_id: str, course_id: int) -> Optional[CourseProgress]:
        """None means no record exists, not zero lectures completed"""
        return (
            self.db.query(CourseProgress)
            .filter(
                CourseProgress.user_id == user_id,
                CourseProgress.course_id == course_id,
            )
            .first()
        )

    @db_exception
    def _create(self, user_id: str, course_id: int, lecture_id: str) -> CourseProgress:
        progress = CourseProgress(
            user_id=user_id, course_id=course_id, lecture_completed=[lecture_id]
        )
        self.db.add(progress)
        self.db.commit()
        self.db.refresh(progress)
        return progress

    @db_exception
    def _append(self, progress: CourseProgress, lecture_id: str) -> CourseProgress:
        if lecture_id not in (progress.lecture_completed or []):
            progress.lecture_completed = [*(progress.lecture_completed or []), lecture_id]
            self.db.commit()
            self.db.refresh(progress)
        return progress

    def mark_complete(
        self, user_id: str, course_id: int, lecture_id: str
    ) -> CourseProgress:
        if not self.db.query(Course.id).filter(Course.id == course_id).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Course not found"
            )

        progress = self.get_progress(user_id, course_id)
        if progress:
            return self._append(progress, lecture_id)

        try:
            return self._create(user_id, course_id, lecture_id)
        except DBException as e:
            # another request created the record first
            if e.status_code != status.HTTP_409_CONFLICT:
                raise
            return self._append(self.get_progress(user_id, course_id), lecture_id)

    def to_response(self, progress: CourseProgress) -> dict:
        course = self.db.query(Course).filter(Course.id == progress.course_id).first()
        lecture_ids = set(course.lecture_ids()) if course else set()
        completed = list(progress.lecture_completed or [])
        return {
            "user_id": progress.user_id,
            "course_id": progress.course_id,
            "lecture_completed": completed,
            "completed": bool(lecture_ids) and lecture_ids.issubset(completed),
            "updated_at": progress.updated_at,
        }
