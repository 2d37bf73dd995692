from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.models.user import Profile

def get_profile_by_user(db: Session, user_id: int):
    return db.query(Profile).filter(Profile.user_id == user_id).first()

def create_profile(db: Session, user_id: int, data: Dict[str, Any]):
    db_profile = Profile(user_id=user_id, **data)
    db.add(db_profile)
    try:
        db.commit()
    except IntegrityError:
        # user_id уникален: второй параллельный профиль отклоняется базой
        db.rollback()
        raise ConflictException(detail="Profile already exists", reason="profile_exists")
    db.refresh(db_profile)
    return db_profile

def update_profile(db: Session, db_profile: Profile, data: Dict[str, Any]):
    for field, value in data.items():
        setattr(db_profile, field, value)
    
    db.commit()
    db.refresh(db_profile)
    return db_profile

def delete_profile(db: Session, db_profile: Profile):
    db.delete(db_profile)
    db.commit()
    return db_profile
