"""
Models package initialization
"""

from .course import Course
from .course_progress import CourseProgress
from .purchase import Purchase, PurchaseStatus
from .user import User

__all__ = [
    "Course",
    "CourseProgress",
    "Purchase",
    "PurchaseStatus",
    "User",
]
