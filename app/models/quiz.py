from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Float, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

class Quiz(Base):
    __tablename__ = "quizzes"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Отношения с каскадным удалением
    course = relationship("Course", back_populates="quizzes")
    answers = relationship("Answer", back_populates="quiz", cascade="all, delete-orphan", order_by="Answer.id")
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")

class Answer(Base):
    __tablename__ = "answers"
    
    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    
    # Отношение
    quiz = relationship("Quiz", back_populates="answers")

class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"
    
    id = Column(Integer, primary_key=True, index=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    score = Column(Float, default=0)
    is_passed = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Отношения
    quiz = relationship("Quiz", back_populates="attempts")
    user = relationship("User")
