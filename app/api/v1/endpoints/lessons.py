from fastapi import APIRouter, Depends, UploadFile, File, Form, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.lesson import LessonResponse
from app.crud import lesson as crud_lesson
from app.crud import course as crud_course
from app.core.exceptions import CourseNotFoundException, LessonNotFoundException
from app.core.policy import Principal
from app.api.dependencies import require_admin, require_course_access
from app.services.file_service import FileService
from app.services.markdown_service import MarkdownService

router = APIRouter()
file_service = FileService()
markdown_service = MarkdownService()

def _to_response(lesson) -> LessonResponse:
    lesson_dict = LessonResponse.model_validate(lesson)
    lesson_dict.description_html = markdown_service.convert_to_html(lesson.description)
    return lesson_dict

def _ensure_course(db: Session, course_id: int):
    if not crud_course.get_course(db, course_id=course_id):
        raise CourseNotFoundException(course_id)

def _get_lesson_or_404(db: Session, course_id: int, lesson_id: int):
    _ensure_course(db, course_id)
    lesson = crud_lesson.get_course_lesson(db, course_id=course_id, lesson_id=lesson_id)
    if not lesson:
        raise LessonNotFoundException(lesson_id)
    return lesson

@router.get("", response_model=List[LessonResponse])
async def read_lessons(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    """Получить все уроки курса (записанным и администраторам)"""
    _ensure_course(db, course_id)
    lessons = crud_lesson.get_lessons_by_course(db, course_id=course_id)
    return [_to_response(lesson) for lesson in lessons]

@router.get("/{lesson_id}", response_model=LessonResponse)
async def read_lesson(
    course_id: int,
    lesson_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    return _to_response(_get_lesson_or_404(db, course_id, lesson_id))

@router.post("", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
async def create_lesson(
    course_id: int,
    name: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    video: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Создать новый урок"""
    _ensure_course(db, course_id)
    
    data = {"name": name, "description": description}
    if file_service.is_provided(video):
        data["video"] = await file_service.save_media(video, field="video", mime_prefix="video/", subdir="lessons")
    
    with file_service.cleanup_on_error(data.get("video")):
        lesson = crud_lesson.create_lesson(db, course_id=course_id, data=data)
    return _to_response(lesson)

@router.put("/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    course_id: int,
    lesson_id: int,
    name: Optional[str] = Form(None, min_length=1),
    description: Optional[str] = Form(None, min_length=1),
    video: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Обновить урок"""
    lesson = _get_lesson_or_404(db, course_id, lesson_id)
    
    data = {
        field: value
        for field, value in (("name", name), ("description", description))
        if value is not None
    }
    old_video = lesson.video
    if file_service.is_provided(video):
        data["video"] = await file_service.save_media(video, field="video", mime_prefix="video/", subdir="lessons")
    
    with file_service.cleanup_on_error(data.get("video")):
        lesson = crud_lesson.update_lesson(db, lesson, data)
    if "video" in data and old_video:
        file_service.delete_file(old_video)
    
    return _to_response(lesson)

@router.delete("/{lesson_id}")
async def delete_lesson(
    course_id: int,
    lesson_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Удалить урок"""
    lesson = _get_lesson_or_404(db, course_id, lesson_id)
    video = lesson.video
    
    crud_lesson.delete_lesson(db, lesson)
    if video:
        file_service.delete_file(video)
    return {"message": "Lesson deleted successfully"}
