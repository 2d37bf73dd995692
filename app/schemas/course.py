from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime

class CourseBase(BaseModel):
    name: str
    description: str
    price: float = 0
    image: Optional[str] = None

class CourseInDB(CourseBase):
    id: int
    owner_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)

class CourseResponse(CourseInDB):
    lesson_count: int = 0
    owner_name: Optional[str] = None

class EnrollmentResponse(BaseModel):
    id: int
    user_id: int
    course_id: int
    enrolled_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)

class EnrollmentWithCourse(EnrollmentResponse):
    course: CourseInDB

class CourseStudent(BaseModel):
    user_id: int
    username: str
    email: str

class CourseStudentsResponse(BaseModel):
    course_id: int
    course: str
    students: List[CourseStudent]
