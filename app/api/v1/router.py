from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, profile, courses, enrollments, lessons, quiz, answers

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
api_router.include_router(lessons.router, prefix="/courses/{course_id}/lessons", tags=["Lessons"])
api_router.include_router(quiz.router, prefix="/courses/{course_id}/quizzes", tags=["Quizzes"])
api_router.include_router(answers.router, prefix="/courses/{course_id}/quizzes/{quiz_id}/answers", tags=["Answers"])
