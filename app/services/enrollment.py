# app/services/enrollment.py
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.decorator import db_exception
from app.models.course import Course
from app.models.user import User

logger = logging.getLogger(__name__)


class EnrollmentService:
    def __init__(self, db: Session):
        self.db = db

    @db_exception
    def enroll(self, user: User, course: Course) -> bool:
        """
        Add the course to the user's list and the user to the course roster.
        Each id is stored at most once, so repeating the call changes nothing.
        Returns True when either list was modified.
        """
        changed = False

        if course.id not in (user.enrolled_courses or []):
            user.enrolled_courses = [*(user.enrolled_courses or []), course.id]
            changed = True

        if user.id not in (course.enrolled_students or []):
            course.enrolled_students = [*(course.enrolled_students or []), user.id]
            changed = True

        if changed:
            self.db.commit()
            logger.info(f"Enrolled user {user.id} in course {course.id}")

        return changed

    def enroll_by_ids(self, user_id: str, course_id: int) -> bool:
        user = self.db.query(User).filter(User.id == user_id).first()
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not user or not course:
            logger.error(
                f"Cannot enroll: user {user_id} or course {course_id} not found"
            )
            return False
        return self.enroll(user, course)

    def is_enrolled(self, user: User, course_id: int) -> bool:
        return user.is_enrolled_in(course_id)

    def get_enrolled_courses(self, user: User) -> List[Course]:
        """Courses of the user, in enrollment order"""
        ids = user.enrolled_courses or []
        if not ids:
            return []
        courses = {c.id: c for c in self.db.query(Course).filter(Course.id.in_(ids))}
        return [courses[i] for i in ids if i in courses]
