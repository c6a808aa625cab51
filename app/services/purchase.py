# app/services/purchase.py
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.decorator import db_exception
from app.models.course import Course
from app.models.purchase import Purchase, PurchaseStatus
from app.models.user import User
from app.services.enrollment import EnrollmentService
from app.utils.payment_gateway import CheckoutSession, PaymentGatewayError, StripeGateway

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def compute_amount(price, discount) -> Decimal:
    """price * (1 - discount/100), rounded half-up to cents"""
    price = Decimal(str(price))
    discount = Decimal(str(discount))
    amount = price - price * discount / Decimal(100)
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PurchaseService:
    def __init__(self, db: Session, gateway: StripeGateway):
        self.db = db
        self.gateway = gateway

    @db_exception
    def _create_pending(self, user: User, course: Course) -> Purchase:
        purchase = Purchase(
            course_id=course.id,
            user_id=user.id,
            amount=compute_amount(course.price, course.discount),
            status=PurchaseStatus.PENDING,
        )
        self.db.add(purchase)
        self.db.commit()
        self.db.refresh(purchase)
        return purchase

    def start_purchase(
        self, user: User, course_id: int, origin: str
    ) -> Tuple[Purchase, CheckoutSession]:
        """
        Create a pending purchase and a checkout session for it.
        The purchase id travels to the payment processor as correlation metadata.
        """
        course = self.db.query(Course).filter(Course.id == course_id).first()
        if not course:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User or Course not found",
            )

        already_paid = (
            self.db.query(Purchase)
            .filter(
                Purchase.user_id == user.id,
                Purchase.course_id == course.id,
                Purchase.status == PurchaseStatus.COMPLETED,
            )
            .first()
        )
        if already_paid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Course already purchased",
            )

        purchase = self._create_pending(user, course)
        logger.info(
            f"Purchase {purchase.id} created: user {user.id}, course {course.id}, amount {purchase.amount}"
        )

        if settings.optimistic_enrollment:
            EnrollmentService(self.db).enroll(user, course)

        try:
            session = self.gateway.create_checkout_session(
                product_name=course.title,
                unit_amount=to_minor_units(purchase.amount),
                success_url=f"{origin}/loading/my-enrollments",
                cancel_url=f"{origin}/course/{course.id}",
                metadata={"purchaseId": str(purchase.id)},
            )
        except PaymentGatewayError:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Payment session could not be created",
            )

        purchase.payment_reference = session.id
        self.db.commit()
        return purchase, session

    def confirm_purchase(self, purchase_id: Optional[str]) -> Optional[Purchase]:
        """
        Webhook path: enroll and mark the purchase completed.
        Unknown or missing ids are logged and dropped.
        """
        if not purchase_id:
            logger.error("Webhook Error: purchaseId missing from session metadata.")
            return None

        try:
            pk = int(purchase_id)
        except (TypeError, ValueError):
            logger.error(f"Webhook Error: malformed purchaseId {purchase_id!r}.")
            return None

        purchase = self.db.query(Purchase).filter(Purchase.id == pk).first()
        if not purchase:
            logger.error(f"Webhook Error: Purchase with ID {purchase_id} not found.")
            return None

        EnrollmentService(self.db).enroll_by_ids(purchase.user_id, purchase.course_id)

        if purchase.status != PurchaseStatus.COMPLETED:
            purchase.status = PurchaseStatus.COMPLETED
            self.db.commit()

        logger.info(
            f"Purchase {purchase.id} completed: user {purchase.user_id} in course {purchase.course_id}"
        )
        return purchase

    def handle_event(self, event: Dict[str, Any]) -> Optional[Purchase]:
        event_type = event.get("type")
        if event_type != CHECKOUT_COMPLETED:
            logger.info(f"Unhandled event type {event_type}")
            return None

        session = (event.get("data") or {}).get("object") or {}
        logger.info(f"Checkout session completed event received for: {session.get('id')}")
        metadata = session.get("metadata") or {}
        return self.confirm_purchase(metadata.get("purchaseId"))

    def get_purchase(self, user: User, purchase_id: int) -> Purchase:
        purchase = (
            self.db.query(Purchase)
            .filter(Purchase.id == purchase_id, Purchase.user_id == user.id)
            .first()
        )
        if not purchase:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Purchase not found"
            )
        return purchase
