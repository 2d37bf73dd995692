from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.core.policy import (
    AccessContext,
    AccessPolicy,
    Guard,
    Principal,
    RequireAuthenticated,
    RequireEnrollment,
    RequireRole,
)
from app.core.security import TokenCodec, resolve_principal
from app.database import get_db
from app.models.user import UserRole
from app.services.enrollment_service import EnrollmentService

# Секрет читается один раз при старте процесса
token_codec = TokenCodec(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
)


def get_token_codec() -> TokenCodec:
    return token_codec


def get_enrollment_service(db: Session = Depends(get_db)) -> EnrollmentService:
    return EnrollmentService(db)


def get_current_principal(
    authorization: Optional[str] = Header(default=None),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal:
    """Проверяет Bearer токен; база данных здесь не используется"""
    return resolve_principal(authorization, codec)


def require(*guards: Guard):
    """Зависимость FastAPI, которая выполняет guards по порядку и отдает Principal"""
    policy = AccessPolicy(guards)

    def dependency(
        request: Request,
        principal: Principal = Depends(get_current_principal),
        enrollments: EnrollmentService = Depends(get_enrollment_service),
    ) -> Principal:
        ctx = AccessContext(
            principal=principal,
            params=request.path_params,
            enrollments=enrollments,
        )
        return policy.enforce(ctx)

    dependency.policy = policy
    return dependency


require_login = require(RequireAuthenticated())


def require_role(role: UserRole):
    return require(RequireAuthenticated(), RequireRole(role))


def require_enrollment(param: str = "course_id"):
    return require(RequireAuthenticated(), RequireEnrollment(param))


require_admin = require_role(UserRole.ADMIN)
require_course_access = require_enrollment("course_id")
