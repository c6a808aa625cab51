# app/models/purchase.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class PurchaseStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class Purchase(Base):
    """
    One course-buy attempt.
    Amount is fixed when the row is created and never recomputed.
    """

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)

    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(
            PurchaseStatus,
            name="purchase_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=PurchaseStatus.PENDING,
    )

    # Checkout session id from the payment processor
    payment_reference = Column(String(255), nullable=True)

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

    # Relationships
    user = relationship("User", backref="purchases")
    course = relationship("Course", backref="purchases")

    def __repr__(self):
        return f"<Purchase(id={self.id}, user_id='{self.user_id}', course_id={self.course_id}, status={self.status})>"
