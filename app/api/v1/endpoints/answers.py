from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.schemas.quiz import AnswerCreate, AnswerUpdate, AnswerResponse, QuizDeleteResponse
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

def _to_response(answer, principal: Principal) -> AnswerResponse:
    answer_dict = AnswerResponse.model_validate(answer)
    # Для студентов скрываем правильные ответы
    if not principal.is_admin:
        answer_dict.is_correct = None
    return answer_dict

@router.get("", response_model=List[AnswerResponse])
def read_answers(
    course_id: int,
    quiz_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    answers = _quiz_service(db, course_id).list_answers(course_id, quiz_id)
    return [_to_response(answer, principal) for answer in answers]

@router.get("/{answer_id}", response_model=AnswerResponse)
def read_answer(
    course_id: int,
    quiz_id: int,
    answer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_course_access)
):
    answer = _quiz_service(db, course_id).get_answer(course_id, quiz_id, answer_id)
    return _to_response(answer, principal)

@router.post("", response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
def create_answer(
    course_id: int,
    quiz_id: int,
    answer_data: AnswerCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    answer = _quiz_service(db, course_id).create_answer(course_id, quiz_id, answer_data)
    return _to_response(answer, principal)

@router.put("/{answer_id}", response_model=AnswerResponse)
def update_answer(
    course_id: int,
    quiz_id: int,
    answer_id: int,
    update_data: AnswerUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    answer = _quiz_service(db, course_id).update_answer(course_id, quiz_id, answer_id, update_data)
    return _to_response(answer, principal)

@router.delete("/{answer_id}", response_model=QuizDeleteResponse)
def delete_answer(
    course_id: int,
    quiz_id: int,
    answer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Удаление конкретного ответа"""
    _quiz_service(db, course_id).delete_answer(course_id, quiz_id, answer_id)
    return QuizDeleteResponse(message="Answer deleted")
