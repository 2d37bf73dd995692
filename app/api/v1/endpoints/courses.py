from fastapi import APIRouter, Depends, UploadFile, File, Form, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.course import CourseResponse, CourseStudent, CourseStudentsResponse, EnrollmentResponse
from app.crud import course as crud_course
from app.core.exceptions import CourseNotFoundException
from app.core.policy import Principal
from app.api.dependencies import get_enrollment_service, require_admin, require_login
from app.services.enrollment_service import EnrollmentService
from app.services.file_service import FileService

router = APIRouter()
file_service = FileService()

def _to_response(course) -> CourseResponse:
    course_dict = CourseResponse.model_validate(course)
    course_dict.lesson_count = len(course.lessons)
    course_dict.owner_name = course.owner.username if course.owner else None
    return course_dict

def _get_course_or_404(db: Session, course_id: int):
    course = crud_course.get_course(db, course_id=course_id)
    if not course:
        raise CourseNotFoundException(course_id)
    return course

@router.get("", response_model=List[CourseResponse])
async def read_courses(
    skip: int = 0,
    limit: int = 100,
    owner_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    """Публичный каталог курсов"""
    courses = crud_course.get_courses(db, skip=skip, limit=limit, owner_id=owner_id)
    return [_to_response(course) for course in courses]

@router.get("/{course_id}", response_model=CourseResponse)
async def read_course(
    course_id: int,
    db: Session = Depends(get_db)
):
    return _to_response(_get_course_or_404(db, course_id))

@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    name: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    price: float = Form(0, ge=0),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Создать новый курс (только для администраторов)"""
    data = {"name": name, "description": description, "price": price}
    if file_service.is_provided(image):
        data["image"] = await file_service.save_media(image, field="image", mime_prefix="image/", subdir="courses")

    with file_service.cleanup_on_error(data.get("image")):
        course = crud_course.create_course(db, data=data, owner_id=principal.user_id)
    return _to_response(course)

@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: int,
    name: Optional[str] = Form(None, min_length=1),
    description: Optional[str] = Form(None, min_length=1),
    price: Optional[float] = Form(None, ge=0),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Обновить курс; незаполненные поля остаются прежними"""
    course = _get_course_or_404(db, course_id)

    data = {
        field: value
        for field, value in (("name", name), ("description", description), ("price", price))
        if value is not None
    }
    old_image = course.image
    if file_service.is_provided(image):
        data["image"] = await file_service.save_media(image, field="image", mime_prefix="image/", subdir="courses")

    with file_service.cleanup_on_error(data.get("image")):
        course = crud_course.update_course(db, course, data)
    if "image" in data and old_image:
        file_service.delete_file(old_image)

    return _to_response(course)

@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Удалить курс вместе с уроками, тестами и записями"""
    course = _get_course_or_404(db, course_id)
    image = course.image

    crud_course.delete_course(db, course)
    if image:
        file_service.delete_file(image)
    return {"message": "Course deleted successfully"}

@router.post("/{course_id}/enroll", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    course_id: int,
    db: Session = Depends(get_db),
    enrollments: EnrollmentService = Depends(get_enrollment_service),
    principal: Principal = Depends(require_login)
):
    """Записаться на курс"""
    _get_course_or_404(db, course_id)
    return enrollments.create(user_id=principal.user_id, course_id=course_id)

@router.delete("/{course_id}/enroll")
async def unenroll_from_course(
    course_id: int,
    enrollments: EnrollmentService = Depends(get_enrollment_service),
    principal: Principal = Depends(require_login)
):
    """Отменить запись на курс; курс и пользователь не затрагиваются"""
    enrollments.delete(user_id=principal.user_id, course_id=course_id)
    return {"message": "Successfully unenrolled"}

@router.get("/{course_id}/students", response_model=CourseStudentsResponse)
async def read_course_students(
    course_id: int,
    db: Session = Depends(get_db),
    enrollments: EnrollmentService = Depends(get_enrollment_service),
    principal: Principal = Depends(require_admin)
):
    """Список записанных на курс (только для администраторов)"""
    course = _get_course_or_404(db, course_id)
    students = [
        CourseStudent(user_id=e.user_id, username=e.user.username, email=e.user.email)
        for e in enrollments.list_for_course(course_id)
    ]
    return CourseStudentsResponse(course_id=course.id, course=course.name, students=students)
