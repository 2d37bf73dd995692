from fastapi import APIRouter, Depends
from typing import List
from app.schemas.course import EnrollmentWithCourse
from app.core.policy import Principal
from app.api.dependencies import get_enrollment_service, require_login
from app.services.enrollment_service import EnrollmentService

router = APIRouter()

@router.get("", response_model=List[EnrollmentWithCourse])
async def read_my_enrollments(
    enrollments: EnrollmentService = Depends(get_enrollment_service),
    principal: Principal = Depends(require_login)
):
    """Курсы, на которые записан текущий пользователь"""
    return enrollments.list_for_user(principal.user_id)
