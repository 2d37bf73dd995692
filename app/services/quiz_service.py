from sqlalchemy.orm import Session, joinedload
from typing import Dict, List

from app.core.exceptions import AnswerNotFoundException, NotFoundException, QuizNotFoundException
from app.models.quiz import Quiz, Answer, QuizAttempt
from app.schemas.quiz import AnswerCreate, AnswerUpdate, QuizCreate, QuizSubmit, QuizUpdate

PASS_THRESHOLD = 0.7

class QuizService:
    def __init__(self, db: Session):
        self.db = db

    # === Тесты ===
    def get_course_quiz(self, course_id: int, quiz_id: int, include_answers: bool = False) -> Quiz:
        """Тест курса; чужой для курса тест считается отсутствующим"""
        query = self.db.query(Quiz).filter(Quiz.id == quiz_id, Quiz.course_id == course_id)

        if include_answers:
            query = query.options(joinedload(Quiz.answers))

        quiz = query.first()
        if not quiz:
            raise QuizNotFoundException(quiz_id)
        return quiz

    def list_quizzes(self, course_id: int) -> List[Quiz]:
        return self.db.query(Quiz).filter(Quiz.course_id == course_id).order_by(Quiz.id).all()

    def create_quiz(self, course_id: int, quiz_data: QuizCreate) -> Quiz:
        quiz = Quiz(
            name=quiz_data.name,
            description=quiz_data.description,
            course_id=course_id
        )
        self.db.add(quiz)
        self.db.commit()
        self.db.refresh(quiz)
        return quiz

    def update_quiz(self, course_id: int, quiz_id: int, update_data: QuizUpdate) -> Quiz:
        quiz = self.get_course_quiz(course_id, quiz_id)

        for field, value in update_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(quiz, field, value)

        self.db.commit()
        self.db.refresh(quiz)
        return quiz

    def delete_quiz(self, course_id: int, quiz_id: int) -> bool:
        """Удаление теста - ответы и попытки удалятся каскадно"""
        quiz = self.get_course_quiz(course_id, quiz_id)
        self.db.delete(quiz)
        self.db.commit()
        return True

    # === Ответы ===
    def list_answers(self, course_id: int, quiz_id: int) -> List[Answer]:
        quiz = self.get_course_quiz(course_id, quiz_id, include_answers=True)
        return list(quiz.answers)

    def get_answer(self, course_id: int, quiz_id: int, answer_id: int) -> Answer:
        self.get_course_quiz(course_id, quiz_id)
        answer = self.db.query(Answer).filter(
            Answer.id == answer_id,
            Answer.quiz_id == quiz_id
        ).first()
        if not answer:
            raise AnswerNotFoundException(answer_id)
        return answer

    def create_answer(self, course_id: int, quiz_id: int, answer_data: AnswerCreate) -> Answer:
        quiz = self.get_course_quiz(course_id, quiz_id)
        answer = Answer(
            quiz_id=quiz.id,
            content=answer_data.content,
            is_correct=answer_data.is_correct
        )
        self.db.add(answer)
        self.db.commit()
        self.db.refresh(answer)
        return answer

    def update_answer(self, course_id: int, quiz_id: int, answer_id: int, update_data: AnswerUpdate) -> Answer:
        answer = self.get_answer(course_id, quiz_id, answer_id)

        for field, value in update_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(answer, field, value)

        self.db.commit()
        self.db.refresh(answer)
        return answer

    def delete_answer(self, course_id: int, quiz_id: int, answer_id: int) -> bool:
        answer = self.get_answer(course_id, quiz_id, answer_id)
        self.db.delete(answer)
        self.db.commit()
        return True

    # === Проверка ответов ===
    def submit_quiz(self, course_id: int, quiz_id: int, submit_data: QuizSubmit, user_id: int) -> Dict:
        """Проверка ответов пользователя"""
        quiz = self.get_course_quiz(course_id, quiz_id, include_answers=True)

        correct_ids = {answer.id for answer in quiz.answers if answer.is_correct}
        known_ids = {answer.id for answer in quiz.answers}
        selected_ids = set(submit_data.selected_answer_ids) & known_ids

        correct_selected = len(selected_ids & correct_ids)
        wrong_selected = len(selected_ids - correct_ids)

        # Неверный выбор снимает балл за верный
        if correct_ids:
            score = max(correct_selected - wrong_selected, 0) / len(correct_ids)
        else:
            score = 0.0
        is_passed = score >= PASS_THRESHOLD

        # Сохраняем попытку
        attempt = QuizAttempt(
            quiz_id=quiz.id,
            user_id=user_id,
            score=score,
            is_passed=is_passed
        )
        self.db.add(attempt)
        self.db.commit()

        return {
            "score": score,
            "is_passed": is_passed,
            "total_correct": len(correct_ids),
            "correct_selected": correct_selected,
            "wrong_selected": wrong_selected
        }

    def get_user_result(self, course_id: int, quiz_id: int, user_id: int) -> Dict:
        """Последняя попытка пользователя"""
        quiz = self.get_course_quiz(course_id, quiz_id)
        attempt = self.db.query(QuizAttempt).filter(
            QuizAttempt.quiz_id == quiz.id,
            QuizAttempt.user_id == user_id
        ).order_by(QuizAttempt.created_at.desc(), QuizAttempt.id.desc()).first()

        if not attempt:
            raise NotFoundException(detail="No attempts found")

        return {
            "score": attempt.score,
            "is_passed": attempt.is_passed,
            "attempted_at": attempt.created_at
        }
