from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.sql import func

from app.core.database import Base


class User(Base):
    __tablename__ = "users"

    # Identity-provider user id, never generated locally
    id = Column(String(64), primary_key=True, index=True)

    # Profile information (mirrored from the identity provider)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=True, index=True)
    image_url = Column(Text, nullable=True)

    # Course ids, each at most once
    enrolled_courses = Column(JSON, nullable=False, default=list)

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

    def is_enrolled_in(self, course_id: int) -> bool:
        return course_id in (self.enrolled_courses or [])

    def __repr__(self):
        return f"<User(id='{self.id}', name='{self.name}')>"
