from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

class CustomHTTPException(HTTPException):
    """Базовая ошибка API: категория для машины, сообщение для человека"""
    error_code = "bad_request"
    reason: Optional[str] = None
    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail or self.default_detail,
            headers=headers,
        )
        if reason is not None:
            self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.error_code, "message": self.detail}
        if self.reason:
            body["reason"] = self.reason
        return body

# === Уровень учетных данных ===

class MissingCredentialException(CustomHTTPException):
    error_code = "missing_credential"
    default_detail = "Authorization header with a Bearer token is required"

class MalformedTokenException(CustomHTTPException):
    error_code = "malformed_token"
    default_detail = "Token is malformed"

class InvalidSignatureException(CustomHTTPException):
    error_code = "invalid_signature"
    default_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token signature is invalid"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail=detail, headers={"WWW-Authenticate": "Bearer"})

class TokenExpiredException(CustomHTTPException):
    error_code = "token_expired"
    default_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token has expired"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail=detail, headers={"WWW-Authenticate": "Bearer"})

class InvalidCredentialsException(CustomHTTPException):
    error_code = "invalid_credentials"
    default_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail=detail, headers={"WWW-Authenticate": "Bearer"})

# === Политики доступа ===

class ForbiddenException(CustomHTTPException):
    error_code = "forbidden"
    default_status = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"

class NotEnrolledException(ForbiddenException):
    reason = "not_enrolled"
    default_detail = "You are not enrolled in this course"

class MalformedResourceReferenceException(CustomHTTPException):
    error_code = "malformed_resource_reference"
    default_detail = "Course ID is missing or invalid"

# === Данные ===

class NotFoundException(CustomHTTPException):
    error_code = "not_found"
    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"

class UserNotFoundException(NotFoundException):
    def __init__(self, user_id: int = None):
        detail = f"User with id {user_id} not found" if user_id else "User not found"
        super().__init__(detail=detail)

class CourseNotFoundException(NotFoundException):
    def __init__(self, course_id: int = None):
        detail = f"Course with id {course_id} not found" if course_id else "Course not found"
        super().__init__(detail=detail)

class LessonNotFoundException(NotFoundException):
    def __init__(self, lesson_id: int = None):
        detail = f"Lesson with id {lesson_id} not found" if lesson_id else "Lesson not found"
        super().__init__(detail=detail)

class QuizNotFoundException(NotFoundException):
    def __init__(self, quiz_id: int = None):
        detail = f"Quiz with id {quiz_id} not found" if quiz_id else "Quiz not found"
        super().__init__(detail=detail)

class AnswerNotFoundException(NotFoundException):
    def __init__(self, answer_id: int = None):
        detail = f"Answer with id {answer_id} not found" if answer_id else "Answer not found"
        super().__init__(detail=detail)

class ProfileNotFoundException(NotFoundException):
    default_detail = "Profile not found"

class EnrollmentNotFoundException(NotFoundException):
    reason = "not_enrolled"
    default_detail = "Enrollment not found"

class ConflictException(CustomHTTPException):
    error_code = "conflict"
    default_status = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"

class AlreadyEnrolledException(ConflictException):
    reason = "already_enrolled"
    default_detail = "Already enrolled in this course"

class ValidationFailedException(CustomHTTPException):
    error_code = "validation_failed"
    default_status = 422
    default_detail = "Validation failed"

    def __init__(self, details: List[Dict[str, Any]], detail: Optional[str] = None):
        super().__init__(detail=detail)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["details"] = self.details
        return body

class StorageUnavailableException(CustomHTTPException):
    error_code = "storage_unavailable"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage is unavailable"
