from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from jlpt_tryout.core.constants import SectionTypeEnum

class UserAnswerIn(BaseModel):
    question_id: str
    selected_answer: Optional[str] = None

class UserAnswer(BaseModel):
    question_id: str
    section_type: SectionTypeEnum
    subsection_number: int
    selected_answer: Optional[str] = None
    answered_at: Optional[datetime] = None
    is_correct: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)
