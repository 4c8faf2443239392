from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum
from jlpt_tryout.schemas.scoring import FailureReason, SectionScore

class OfflineScoreTuple(BaseModel):
    section_type: SectionTypeEnum
    subsection_number: int
    correct: int
    total: int

class OfflineResultCreate(BaseModel):
    level: JLPTLevelEnum
    scores: List[OfflineScoreTuple]
    source: Optional[str] = Field(None, max_length=100)
    user_note: Optional[str] = Field(None, max_length=2000)

class OfflineResult(BaseModel):
    id: int
    owner_id: str
    level: JLPTLevelEnum
    source: Optional[str] = None
    user_note: Optional[str] = None
    scoring_config_version: str
    total_score: int
    is_passed: bool
    raw_inputs: List[OfflineScoreTuple]
    failure_reasons: List[FailureReason]
    section_scores: List[SectionScore] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
