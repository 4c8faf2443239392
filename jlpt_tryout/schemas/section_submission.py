from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from jlpt_tryout.core.constants import SectionTypeEnum

class SectionSubmitIn(BaseModel):
    time_spent_seconds: int = Field(0, ge=0)
    triggered_by_timer: bool = False

class SectionSubmission(BaseModel):
    section_type: SectionTypeEnum
    submitted_at: Optional[datetime] = None
    time_spent_seconds: int
    triggered_by_timer: bool = False

    model_config = ConfigDict(from_attributes=True)
