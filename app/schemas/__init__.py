from .user import (
    UserBase,
    UserCreate,
    UserResponse,
    LoginRequest,
    Token
)

from .profile import ProfileResponse

from .course import (
    CourseBase,
    CourseInDB,
    CourseResponse,
    EnrollmentResponse,
    EnrollmentWithCourse,
    CourseStudent,
    CourseStudentsResponse
)

from .lesson import LessonResponse

from .quiz import (
    QuizCreate,
    QuizUpdate,
    AnswerCreate,
    AnswerUpdate,
    AnswerResponse,
    QuizResponse,
    QuizDeleteResponse,
    QuizSubmit,
    QuizResult,
    QuizAttemptResponse
)
