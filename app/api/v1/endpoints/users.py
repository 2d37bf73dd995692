from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.user import UserResponse
from app.crud import user as crud_user
from app.core.exceptions import CustomHTTPException, ForbiddenException, UserNotFoundException
from app.core.policy import Principal
from app.api.dependencies import require_admin, require_login

router = APIRouter()

@router.get("", response_model=List[UserResponse])
async def read_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Получить список пользователей (только для администраторов)"""
    return crud_user.get_users(db, skip=skip, limit=limit)

@router.get("/{user_id}", response_model=UserResponse)
async def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    """Получить пользователя по ID"""
    # Пользователь может получить только свою информацию, админ - любую
    if principal.user_id != user_id and not principal.is_admin:
        raise ForbiddenException(detail="Not authorized to view this user", reason="not_owner")
    
    user = crud_user.get_user(db, user_id=user_id)
    if not user:
        raise UserNotFoundException(user_id)
    
    return user

@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin)
):
    """Мягко удалить пользователя (только для администраторов)"""
    # Админ не может удалить себя
    if principal.user_id == user_id:
        raise CustomHTTPException(detail="Cannot delete yourself")
    
    user = crud_user.soft_delete_user(db, user_id=user_id)
    if not user:
        raise UserNotFoundException(user_id)
    
    return {"message": "User deleted successfully"}
