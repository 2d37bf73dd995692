from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

# Создание
class QuizCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)

class AnswerCreate(BaseModel):
    content: str = Field(..., min_length=1)
    is_correct: bool = False

# Обновление
class QuizUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)

class AnswerUpdate(BaseModel):
    content: Optional[str] = Field(None, min_length=1)
    is_correct: Optional[bool] = None

# Получение
class AnswerResponse(BaseModel):
    id: int
    quiz_id: int
    content: str
    is_correct: Optional[bool] = None  # Скрыто для студентов
    
    model_config = ConfigDict(from_attributes=True)

class QuizResponse(BaseModel):
    id: int
    name: str
    description: str
    course_id: int
    created_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)

class QuizDeleteResponse(BaseModel):
    message: str

# Для отправки ответов
class QuizSubmit(BaseModel):
    selected_answer_ids: List[int]

class QuizResult(BaseModel):
    score: float
    is_passed: bool
    total_correct: int
    correct_selected: int
    wrong_selected: int

class QuizAttemptResponse(BaseModel):
    score: float
    is_passed: bool
    attempted_at: Optional[datetime] = None
