import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.user import LoginRequest, Token, UserCreate, UserResponse
from app.crud import user as crud_user
from app.core.exceptions import InvalidCredentialsException, UserNotFoundException
from app.core.policy import Principal
from app.core.security import TokenCodec
from app.api.dependencies import get_token_codec, require_login

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: Session = Depends(get_db)):
    # Дубликаты email/username отклоняются внутри create_user
    db_user = crud_user.create_user(db=db, user=user)
    logger.info(f"Зарегистрирован пользователь {db_user.id} с ролью {db_user.role.value}")
    return db_user

@router.post("/login", response_model=Token)
async def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec)
):
    user = crud_user.authenticate_user(db, email=payload.email, password=payload.password)
    
    if not user:
        logger.warning(f"Неудачная попытка входа для {payload.email}")
        raise InvalidCredentialsException()
    
    access_token = codec.issue(user.id, user.role)
    logger.info(f"Пользователь {user.id} вошел в систему")
    return Token(access_token=access_token)

@router.get("/me", response_model=UserResponse)
async def read_users_me(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_login)
):
    user = crud_user.get_user(db, user_id=principal.user_id)
    if not user:
        raise UserNotFoundException(principal.user_id)
    return user
