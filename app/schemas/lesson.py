from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class LessonResponse(BaseModel):
    id: int
    name: str
    description: str
    description_html: Optional[str] = None
    video: Optional[str] = None
    course_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    model_config = ConfigDict(from_attributes=True)
