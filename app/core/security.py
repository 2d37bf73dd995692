import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from jose import JWTError, jws, jwt
from jose.exceptions import JWSError
from passlib.context import CryptContext

from app.config import settings
from app.core.exceptions import (
    InvalidSignatureException,
    MalformedTokenException,
    MissingCredentialException,
    TokenExpiredException,
)
from app.core.policy import Principal
from app.models.user import UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

BEARER_PREFIX = "Bearer "
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """Выпуск и проверка подписанных токенов с user_id и ролью"""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=72),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret_key:
            raise ValueError("SECRET_KEY must be configured to sign tokens")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or _utcnow

    def issue(self, user_id: int, role: UserRole) -> str:
        issued_at = self._clock()
        claims = {
            "user_id": user_id,
            "role": UserRole(role).value,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Tuple[int, UserRole]:
        # Заголовок разбираем отдельно, чтобы отличить мусор от чужой подписи
        try:
            jwt.get_unverified_header(token)
        except JWTError:
            raise MalformedTokenException(detail="Token could not be decoded")

        # Сначала только подпись; содержимое разбираем сами и только после нее
        try:
            payload = jws.verify(token, self._secret_key, algorithms=[self.algorithm])
        except JWSError:
            raise InvalidSignatureException()

        try:
            claims = json.loads(payload)
        except ValueError:
            raise MalformedTokenException(detail="Token payload is not valid JSON")
        if not isinstance(claims, dict):
            raise MalformedTokenException(detail="Token payload must be a JSON object")

        user_id = claims.get("user_id")
        role = claims.get("role")
        expires_at = claims.get("exp")

        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise MalformedTokenException(detail="Token claim 'user_id' is missing or invalid")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise MalformedTokenException(detail="Token claim 'exp' is missing or invalid")
        if not isinstance(role, str):
            raise MalformedTokenException(detail="Token claim 'role' is missing or invalid")
        try:
            role = UserRole(role)
        except ValueError:
            raise MalformedTokenException(detail=f"Invalid role claim: {role!r}")

        if self._clock().timestamp() >= expires_at:
            raise TokenExpiredException()

        return user_id, role


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Достает токен из заголовка Authorization: Bearer <token>"""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingCredentialException()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingCredentialException()
    return token


def resolve_principal(authorization: Optional[str], codec: TokenCodec) -> Principal:
    token = extract_bearer_token(authorization)
    user_id, role = codec.verify(token)
    return Principal(user_id=user_id, role=role)
