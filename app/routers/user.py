# app/routers/user.py

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_current_user, get_payment_gateway
from app.core.limiter import limiter
from app.models.user import User
from app.schemas.course import MessageEnvelope, RatingRequest
from app.schemas.course_progress import (
    ProgressEnvelope,
    ProgressQueryRequest,
    ProgressUpdateRequest,
)
from app.schemas.purchase import CheckoutEnvelope, PurchaseEnvelope, PurchaseRequest
from app.schemas.user import EnrolledCoursesEnvelope, UserEnvelope
from app.services.course import CourseService
from app.services.course_progress import CourseProgressService
from app.services.enrollment import EnrollmentService
from app.services.purchase import PurchaseService
from app.utils.payment_gateway import StripeGateway

router = APIRouter(
    prefix="/api/user",
    tags=["Users"],
    responses={404: {"description": "Not found"}},
)


@router.get("/data", response_model=UserEnvelope)
def get_user_data(current_user: User = Depends(get_current_user)):
    """
    Current user's profile; created from the identity provider on first access.
    """
    return {"success": True, "user": current_user}


@router.get("/enrolled-courses", response_model=EnrolledCoursesEnvelope)
def user_enrolled_courses(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    courses = EnrollmentService(db).get_enrolled_courses(current_user)
    return {"success": True, "enrolled_courses": courses}


@router.post("/purchase", response_model=CheckoutEnvelope)
@limiter.limit(settings.rate_limit_purchase)
def purchase_course(
    body: PurchaseRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    gateway: StripeGateway = Depends(get_payment_gateway),
    db: Session = Depends(get_db),
):
    """
    Start a purchase: a pending purchase plus a checkout session.
    Enrollment is granted when the payment processor confirms the session.
    """
    origin = request.headers.get("origin") or settings.frontend_url
    purchase, session = PurchaseService(db, gateway).start_purchase(
        current_user, body.course_id, origin
    )
    return {
        "success": True,
        "session_url": session.url,
        "purchase_id": purchase.id,
        "status": purchase.status,
    }


@router.get("/purchase/{purchase_id}", response_model=PurchaseEnvelope)
def get_purchase_status(
    purchase_id: int,
    current_user: User = Depends(get_current_user),
    gateway: StripeGateway = Depends(get_payment_gateway),
    db: Session = Depends(get_db),
):
    """Poll a purchase until the webhook marks it completed."""
    purchase = PurchaseService(db, gateway).get_purchase(current_user, purchase_id)
    return {"success": True, "purchase": purchase}


@router.post("/update-course-progress", response_model=MessageEnvelope)
def update_user_course_progress(
    body: ProgressUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CourseProgressService(db).mark_complete(
        current_user.id, body.course_id, body.lecture_id
    )
    return {"success": True, "message": "Progress Updated"}


@router.post("/get-course-progress", response_model=ProgressEnvelope)
def get_user_course_progress(
    body: ProgressQueryRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = CourseProgressService(db)
    progress = service.get_progress(current_user.id, body.course_id)
    return {
        "success": True,
        "progress_data": service.to_response(progress) if progress else None,
    }


@router.post("/add-rating", response_model=MessageEnvelope)
def add_user_rating(
    body: RatingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    CourseService(db).add_rating(current_user, body.course_id, body.rating)
    return {"success": True, "message": "Rating added"}
