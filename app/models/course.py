# app/models/course.py
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from app.core.database import Base


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_course_discount"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Basic Info
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    thumbnail = Column(Text, nullable=False)
    notes_url = Column(Text, nullable=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False, default=0.00)
    discount = Column(Integer, nullable=False, default=0)  # percent

    is_published = Column(Boolean, default=True, nullable=False)

    # Embedded documents: chapters -> lectures, and {user_id, rating} entries
    content = Column(JSON, nullable=False, default=list)
    ratings = Column(JSON, nullable=False, default=list)

    educator_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    # User ids, each at most once
    enrolled_students = Column(JSON, nullable=False, default=list)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def lecture_ids(self):
        return [
            lecture["lecture_id"]
            for chapter in self.content or []
            for lecture in chapter.get("lectures", [])
        ]

    def __repr__(self):
        return f"<Course(id={self.id}, title='{self.title}', price={self.price})>"
