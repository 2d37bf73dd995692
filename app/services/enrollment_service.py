import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    AlreadyEnrolledException,
    EnrollmentNotFoundException,
    StorageUnavailableException,
)
from app.models.course import Enrollment

logger = logging.getLogger(__name__)

class EnrollmentService:
    """Связь пользователь-курс. Каждое решение о доступе читает базу заново."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, user_id: int, course_id: int):
        return self.db.query(Enrollment).filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id
        ).first()

    def exists(self, user_id: int, course_id: int) -> bool:
        try:
            return self._find(user_id, course_id) is not None
        except SQLAlchemyError as e:
            logger.exception(f"Не удалось проверить запись user_id={user_id} course_id={course_id}")
            raise StorageUnavailableException(detail="Failed to check enrollment") from e

    def create(self, user_id: int, course_id: int) -> Enrollment:
        if self.exists(user_id, course_id):
            raise AlreadyEnrolledException()

        enrollment = Enrollment(user_id=user_id, course_id=course_id)
        self.db.add(enrollment)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Параллельный запрос успел вставить ту же пару раньше нас
            self.db.rollback()
            if self.exists(user_id, course_id):
                raise AlreadyEnrolledException()
            logger.exception(f"Ошибка целостности при записи user_id={user_id} course_id={course_id}")
            raise StorageUnavailableException(detail="Failed to enroll in course") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Не удалось записать user_id={user_id} course_id={course_id}")
            raise StorageUnavailableException(detail="Failed to enroll in course") from e

        self.db.refresh(enrollment)
        logger.info(f"Пользователь {user_id} записан на курс {course_id}")
        return enrollment

    def delete(self, user_id: int, course_id: int) -> None:
        try:
            enrollment = self._find(user_id, course_id)
            if enrollment is None:
                raise EnrollmentNotFoundException()
            self.db.delete(enrollment)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"Не удалось отписать user_id={user_id} course_id={course_id}")
            raise StorageUnavailableException(detail="Failed to unenroll") from e
        logger.info(f"Пользователь {user_id} отписан от курса {course_id}")

    def list_for_user(self, user_id: int) -> List[Enrollment]:
        return self.db.query(Enrollment).filter(
            Enrollment.user_id == user_id
        ).options(joinedload(Enrollment.course)).order_by(Enrollment.id).all()

    def list_for_course(self, course_id: int) -> List[Enrollment]:
        return self.db.query(Enrollment).filter(
            Enrollment.course_id == course_id
        ).options(joinedload(Enrollment.user)).order_by(Enrollment.id).all()
