from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from jlpt_tryout.core.constants import (
    FailureKindEnum,
    JLPTLevelEnum,
    ReferenceGradeEnum,
    SectionTypeEnum,
)

class SubsectionInput(BaseModel):
    subsection_number: int
    correct: int
    total: int

class SectionInput(BaseModel):
    section_type: SectionTypeEnum
    subsections: List[SubsectionInput]

class MondaiScore(BaseModel):
    subsection_number: int
    weight: float
    correct: int
    total: int
    weighted_score: float
    max_score: float

class SectionScore(BaseModel):
    section_type: SectionTypeEnum
    raw_score: float = Field(..., description="Sum of correct answers times mondai weight.")
    weighted_score: float = Field(..., description="Unrounded score on the section scale, kept for audit.")
    raw_max_score: float
    normalized_score: int
    is_passed: bool
    reference_grade: ReferenceGradeEnum
    mondai_breakdown: List[MondaiScore]

    model_config = ConfigDict(from_attributes=True)

class FailureReason(BaseModel):
    kind: FailureKindEnum
    section_type: Optional[SectionTypeEnum] = None
    score: int
    minimum: int
    message: str

class PassFailResult(BaseModel):
    is_passed: bool
    total_score: int
    sections_passed: Dict[SectionTypeEnum, bool]
    failure_reasons: List[FailureReason]

class SubsectionBlueprint(BaseModel):
    subsection_number: int
    weight: float
    questions_count: int

class SectionBlueprint(BaseModel):
    section_type: SectionTypeEnum
    display_name: str
    duration_minutes: int
    scale_max: int
    pass_mark: int
    grade_a_min: int
    grade_b_min: int
    total_questions: int
    max_raw_score: float
    subsections: List[SubsectionBlueprint]

class LevelBlueprint(BaseModel):
    level: JLPTLevelEnum
    scoring_config_version: str
    total_pass_mark: int
    total_scale_max: int
    sections: List[SectionBlueprint]
