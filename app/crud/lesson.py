from typing import Any, Dict

from sqlalchemy.orm import Session

from app.models.lesson import Lesson

def get_course_lesson(db: Session, course_id: int, lesson_id: int):
    """Урок, только если он принадлежит указанному курсу"""
    return db.query(Lesson).filter(
        Lesson.id == lesson_id,
        Lesson.course_id == course_id
    ).first()

def get_lessons_by_course(db: Session, course_id: int):
    return db.query(Lesson).filter(
        Lesson.course_id == course_id
    ).order_by(Lesson.id).all()

def create_lesson(db: Session, course_id: int, data: Dict[str, Any]):
    db_lesson = Lesson(course_id=course_id, **data)
    db.add(db_lesson)
    db.commit()
    db.refresh(db_lesson)
    return db_lesson

def update_lesson(db: Session, db_lesson: Lesson, data: Dict[str, Any]):
    for field, value in data.items():
        setattr(db_lesson, field, value)
    
    db.commit()
    db.refresh(db_lesson)
    return db_lesson

def delete_lesson(db: Session, db_lesson: Lesson):
    db.delete(db_lesson)
    db.commit()
    return db_lesson
