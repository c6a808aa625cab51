# app/services/educator.py
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.course import Course
from app.models.purchase import Purchase, PurchaseStatus
from app.models.user import User


class EducatorService:
    def __init__(self, db: Session):
        self.db = db

    def _course_ids(self, educator_id: str) -> List[int]:
        return [
            row.id
            for row in self.db.query(Course.id).filter(Course.educator_id == educator_id)
        ]

    def get_dashboard(self, educator_id: str) -> dict:
        """
        Totals for the educator console:
        - total_earnings: sum of completed purchase amounts
        - enrolled_students_data: one entry per roster member per course
        - total_courses
        """
        courses = (
            self.db.query(Course)
            .filter(Course.educator_id == educator_id)
            .order_by(Course.id)
            .all()
        )
        course_ids = [c.id for c in courses]

        total_earnings = Decimal("0.00")
        if course_ids:
            total_earnings = (
                self.db.query(func.coalesce(func.sum(Purchase.amount), 0))
                .filter(
                    Purchase.course_id.in_(course_ids),
                    Purchase.status == PurchaseStatus.COMPLETED,
                )
                .scalar()
            )

        enrolled_students_data = []
        for course in courses:
            student_ids = course.enrolled_students or []
            if not student_ids:
                continue
            students = {
                s.id: s for s in self.db.query(User).filter(User.id.in_(student_ids))
            }
            for student_id in student_ids:
                if student_id in students:
                    enrolled_students_data.append(
                        {"course_title": course.title, "student": students[student_id]}
                    )

        return {
            "total_earnings": Decimal(str(total_earnings)),
            "enrolled_students_data": enrolled_students_data,
            "total_courses": len(courses),
        }

    def get_enrolled_students(self, educator_id: str) -> List[dict]:
        """Completed purchases of the educator's courses"""
        course_ids = self._course_ids(educator_id)
        if not course_ids:
            return []

        purchases = (
            self.db.query(Purchase)
            .options(joinedload(Purchase.user), joinedload(Purchase.course))
            .filter(
                Purchase.course_id.in_(course_ids),
                Purchase.status == PurchaseStatus.COMPLETED,
            )
            .order_by(Purchase.created_at)
            .all()
        )

        return [
            {
                "student": purchase.user,
                "course_title": purchase.course.title,
                "purchase_date": purchase.created_at,
            }
            for purchase in purchases
        ]
