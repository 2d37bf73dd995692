"""Политики доступа.

Principal - проверенная личность текущего запроса. Guard - предикат над
(Principal, адресуемый ресурс), который либо молча пропускает запрос, либо
бросает исключение. AccessPolicy выполняет guards строго по порядку, первый
отказ прерывает цепочку.
"""
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from app.core.exceptions import (
    ForbiddenException,
    MalformedResourceReferenceException,
    MissingCredentialException,
    NotEnrolledException,
)
from app.models.user import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@runtime_checkable
class EnrollmentLookup(Protocol):
    """То, что guard'у нужно от хранилища записей"""

    def exists(self, user_id: int, course_id: int) -> bool:
        ...


@dataclass(frozen=True)
class AccessContext:
    """Все, что guard может прочитать о запросе"""
    principal: Optional[Principal]
    params: Mapping[str, str] = field(default_factory=dict)
    enrollments: Optional[EnrollmentLookup] = None


class Guard:
    name = "guard"

    def __call__(self, ctx: AccessContext) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RequireAuthenticated(Guard):
    name = "authenticated"

    def __call__(self, ctx: AccessContext) -> None:
        if ctx.principal is None:
            raise MissingCredentialException()


class RequireRole(Guard):
    name = "role"

    def __init__(self, role: UserRole):
        self.role = role

    def __call__(self, ctx: AccessContext) -> None:
        if ctx.principal is None:
            raise MissingCredentialException()
        if ctx.principal.role != self.role:
            raise ForbiddenException(
                detail=f"Role '{self.role.value}' is required",
                reason="role_mismatch",
            )

    def __repr__(self) -> str:
        return f"RequireRole({self.role.value!r})"


class RequireEnrollment(Guard):
    """Пропускает записанных на курс и администраторов"""
    name = "enrollment"

    def __init__(self, param: str = "course_id"):
        self.param = param

    def parse_course_id(self, params: Mapping[str, str]) -> int:
        raw = params.get(self.param)
        value = "" if raw is None else str(raw).strip()
        if not value:
            raise MalformedResourceReferenceException(detail="Course ID is required")
        # Только ASCII-цифры: int() понимает еще "1_0" и цифры других алфавитов
        if not (value.isascii() and value.isdigit()):
            raise MalformedResourceReferenceException(detail=f"Invalid Course ID format: {raw!r}")
        return int(value)

    def __call__(self, ctx: AccessContext) -> None:
        if ctx.principal is None:
            raise MissingCredentialException()
        course_id = self.parse_course_id(ctx.params)
        if ctx.principal.is_admin:
            return
        # Ошибки хранилища пробрасываются как есть и не превращаются в отказ
        if not ctx.enrollments.exists(ctx.principal.user_id, course_id):
            raise NotEnrolledException()

    def __repr__(self) -> str:
        return f"RequireEnrollment({self.param!r})"


class AccessPolicy:
    def __init__(self, guards: Sequence[Guard]):
        self.guards: Tuple[Guard, ...] = tuple(guards)

    def enforce(self, ctx: AccessContext) -> Optional[Principal]:
        for guard in self.guards:
            try:
                guard(ctx)
            except (ForbiddenException, MissingCredentialException, MalformedResourceReferenceException) as e:
                user_id = ctx.principal.user_id if ctx.principal else None
                logger.info(f"Доступ запрещен guard={guard!r} user_id={user_id} reason={e.reason or e.error_code}")
                raise
        return ctx.principal

    def __repr__(self) -> str:
        return f"AccessPolicy({list(self.guards)!r})"
