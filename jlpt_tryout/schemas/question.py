from pydantic import BaseModel, ConfigDict
from typing import Optional

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum

class PoolQuestion(BaseModel):
    """A usable question as the question bank hands it to the snapshot builder."""
    id: str
    mondai_number: int
    question_number: int
    correct_answer: str

    model_config = ConfigDict(from_attributes=True)

class QuestionCreate(BaseModel):
    id: str
    level: JLPTLevelEnum
    section_type: SectionTypeEnum
    mondai_number: int
    question_number: int
    correct_answer: str
    is_active: bool = True

class QuestionUpdate(BaseModel):
    correct_answer: Optional[str] = None
    is_active: Optional[bool] = None
