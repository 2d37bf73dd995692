from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.schemas.quiz import (
    QuizCreate, QuizUpdate,
    QuizResponse, QuizDeleteResponse,
    QuizSubmit, QuizResult, QuizAttemptResponse
)
from app.crud import course as crud_course
from app.core.exceptions import CourseNotFoundException
from app.core.policy import Principal
from app.services.quiz_service import QuizService
from app.api.dependencies import require_admin, require_course_access

router = APIRouter()

def _quiz_service(db: Session, course_id: int) -> QuizService:
    if not crud_course.get_course(db, course_id=course_id):
        raise CourseNotFoundException(course_id)
    return QuizService(db)

# === Получение ===
@router.get("", response_model=List[QuizResponse])
def read_quizzes(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    return _quiz_service(db, course_id).list_quizzes(course_id)

@router.get("/{quiz_id}", response_model=QuizResponse)
def read_quiz(
    course_id: int,
    quiz_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    return _quiz_service(db, course_id).get_course_quiz(course_id, quiz_id)

# === Создание ===
@router.post("", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
def create_quiz(
    course_id: int,
    quiz_data: QuizCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Создание теста для курса"""
    return _quiz_service(db, course_id).create_quiz(course_id, quiz_data)

# === Обновление ===
@router.put("/{quiz_id}", response_model=QuizResponse)
def update_quiz(
    course_id: int,
    quiz_id: int,
    update_data: QuizUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    return _quiz_service(db, course_id).update_quiz(course_id, quiz_id, update_data)

# === Удаление теста ===
@router.delete("/{quiz_id}", response_model=QuizDeleteResponse)
def delete_quiz(
    course_id: int,
    quiz_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Удаление теста (удалит все ответы и попытки каскадно)"""
    _quiz_service(db, course_id).delete_quiz(course_id, quiz_id)
    return QuizDeleteResponse(message="Quiz deleted")

# === Проверка ответов ===
@router.post("/{quiz_id}/submit", response_model=QuizResult)
def submit_quiz_answers(
    course_id: int,
    quiz_id: int,
    submit_data: QuizSubmit,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    """Отправка ответов на тест"""
    return _quiz_service(db, course_id).submit_quiz(course_id, quiz_id, submit_data, principal.user_id)

@router.get("/{quiz_id}/result", response_model=QuizAttemptResponse)
def get_quiz_result(
    course_id: int,
    quiz_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    """Последний результат текущего пользователя"""
    return _quiz_service(db, course_id).get_user_result(course_id, quiz_id, principal.user_id)
