# app/schemas/educator.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel

from app.schemas.user import StudentSummary


class EnrolledStudentEntry(BaseModel):
    course_title: str
    student: StudentSummary


class DashboardData(BaseModel):
    total_earnings: Decimal
    enrolled_students_data: List[EnrolledStudentEntry]
    total_courses: int


class DashboardEnvelope(BaseModel):
    success: bool = True
    dashboard_data: DashboardData


class StudentPurchaseEntry(BaseModel):
    student: StudentSummary
    course_title: str
    purchase_date: datetime


class EnrolledStudentsEnvelope(BaseModel):
    success: bool = True
    enrolled_students: List[StudentPurchaseEntry]
