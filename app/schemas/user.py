from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional
from datetime import datetime
from app.models.user import UserRole
from app.utils.validators import password_error, username_error

class UserBase(BaseModel):
    email: EmailStr
    username: str
    role: UserRole = UserRole.USER

class UserCreate(UserBase):
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        # Адреса сравниваются без учета регистра
        return v.lower()

    @field_validator('role', mode='before')
    @classmethod
    def normalize_role(cls, v):
        # Роль без учета регистра; неизвестные значения отклоняет сам enum
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('username')
    @classmethod
    def username_format(cls, v):
        error = username_error(v)
        if error:
            raise ValueError(error)
        return v

    @field_validator('password')
    @classmethod
    def password_strength(cls, v):
        error = password_error(v)
        if error:
            raise ValueError(error)
        return v

class UserResponse(UserBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
