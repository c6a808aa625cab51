# app/routers/educator.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import (
    EDUCATOR_ROLE,
    get_current_claims,
    get_current_educator,
    get_identity_provider,
)
from app.models.user import User
from app.schemas.course import (
    CourseCreate,
    CourseEnvelope,
    CourseResponse,
    EducatorCourseListEnvelope,
    MessageEnvelope,
)
from app.schemas.educator import DashboardEnvelope, EnrolledStudentsEnvelope
from app.services.course import CourseService
from app.services.educator import EducatorService
from app.utils.identity_provider import (
    IdentityClaims,
    IdentityProviderError,
    IdentityProviderService,
)

router = APIRouter(
    prefix="/api/educator",
    tags=["Educator"],
    responses={404: {"description": "Not found"}},
)


@router.get("/update-role", response_model=MessageEnvelope)
async def update_role_to_educator(
    claims: IdentityClaims = Depends(get_current_claims),
    identity: IdentityProviderService = Depends(get_identity_provider),
):
    """
    Grant the educator role to the caller in the identity provider.
    The new role shows up in session tokens issued afterwards.
    """
    try:
        await identity.set_role(claims.user_id, EDUCATOR_ROLE)
    except IdentityProviderError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not update role",
        )
    return {"success": True, "message": "You can publish a course now"}


@router.post("/add-course", response_model=CourseEnvelope)
def add_course(
    course_in: CourseCreate,
    db: Session = Depends(get_db),
    educator: User = Depends(get_current_educator),
):
    """
    Create a course from one complete document (chapters and lectures embedded).
    """
    course = CourseService(db).create_course(course_in, educator.id)
    return {
        "success": True,
        "message": "Course added successfully",
        "course": CourseResponse.model_validate(course),
    }


@router.get("/courses", response_model=EducatorCourseListEnvelope)
def get_educator_courses(
    db: Session = Depends(get_db),
    educator: User = Depends(get_current_educator),
):
    courses = CourseService(db).get_educator_courses(educator.id)
    return {"success": True, "courses": courses}


@router.get("/dashboard", response_model=DashboardEnvelope)
def educator_dashboard(
    db: Session = Depends(get_db),
    educator: User = Depends(get_current_educator),
):
    return {
        "success": True,
        "dashboard_data": EducatorService(db).get_dashboard(educator.id),
    }


@router.get("/enrolled-students", response_model=EnrolledStudentsEnvelope)
def get_enrolled_students(
    db: Session = Depends(get_db),
    educator: User = Depends(get_current_educator),
):
    return {
        "success": True,
        "enrolled_students": EducatorService(db).get_enrolled_students(educator.id),
    }
