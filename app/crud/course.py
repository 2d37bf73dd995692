from typing import Any, Dict

from sqlalchemy.orm import Session, joinedload

from app.models.course import Course

def get_course(db: Session, course_id: int):
    return db.query(Course).filter(Course.id == course_id).first()

def get_courses(
    db: Session, 
    skip: int = 0, 
    limit: int = 100,
    owner_id: int = None
):
    query = db.query(Course).options(joinedload(Course.owner))
    
    if owner_id:
        query = query.filter(Course.owner_id == owner_id)
    
    return query.order_by(Course.id).offset(skip).limit(limit).all()

def create_course(db: Session, data: Dict[str, Any], owner_id: int):
    db_course = Course(**data, owner_id=owner_id)
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course

def update_course(db: Session, db_course: Course, data: Dict[str, Any]):
    for field, value in data.items():
        setattr(db_course, field, value)
    
    db.commit()
    db.refresh(db_course)
    return db_course

def delete_course(db: Session, db_course: Course):
    db.delete(db_course)
    db.commit()
    return db_course
