import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException
from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)

def get_user(db: Session, user_id: int):
    """Активный (не удаленный) пользователь по ID"""
    return db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()

def get_users(db: Session, skip: int = 0, limit: int = 100):
    return db.query(User).filter(User.deleted_at.is_(None)).order_by(User.id).offset(skip).limit(limit).all()

# Поиск по email/username учитывает и удаленных: их данные остаются занятыми
def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()

def get_user_by_username(db: Session, username: str):
    return db.query(User).filter(User.username == username).first()

def authenticate_user(db: Session, email: str, password: str):
    user = get_user_by_email(db, email=email)
    if not user or not user.is_active or user.deleted_at is not None:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user

def create_user(db: Session, user: UserCreate):
    if get_user_by_email(db, email=user.email):
        raise ConflictException(detail="Email already registered", reason="email_taken")
    if get_user_by_username(db, username=user.username):
        raise ConflictException(detail="Username already taken", reason="username_taken")

    db_user = User(
        email=user.email,
        username=user.username,
        hashed_password=get_password_hash(user.password),
        role=user.role,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Гонка двух регистраций: уникальные колонки отклонили вторую
        db.rollback()
        raise ConflictException(detail="Email or username already registered")
    db.refresh(db_user)
    return db_user

def soft_delete_user(db: Session, user_id: int):
    db_user = get_user(db, user_id)
    if not db_user:
        return None
    db_user.is_active = False
    db_user.deleted_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(db_user)
    return db_user
