from pydantic import BaseModel
from typing import Dict, List, Optional, Tuple

from jlpt_tryout.core.constants import SectionTypeEnum

class SnapshotQuestion(BaseModel):
    question_id: str
    correct_answer: str

class SnapshotSubsection(BaseModel):
    subsection_number: int
    questions: List[SnapshotQuestion]

class PublicSnapshotSubsection(BaseModel):
    subsection_number: int
    question_ids: List[str]

class PublicQuestionSnapshot(BaseModel):
    sections: Dict[SectionTypeEnum, List[PublicSnapshotSubsection]]

class SubsectionSummary(BaseModel):
    subsection_number: int
    question_count: int

class SectionSummary(BaseModel):
    section_type: SectionTypeEnum
    question_count: int
    duration_minutes: Optional[int] = None
    subsections: List[SubsectionSummary]

class QuestionSnapshot(BaseModel):
    """The frozen question set of one attempt.

    Sections keep exam order and subsections keep selection order. Correct
    answers are stored next to the ids so scoring never reads the live bank.
    """
    sections: Dict[SectionTypeEnum, List[SnapshotSubsection]]

    @property
    def section_types(self) -> List[SectionTypeEnum]:
        return list(self.sections)

    def question_ids(self) -> List[str]:
        return [
            question.question_id
            for subsections in self.sections.values()
            for subsection in subsections
            for question in subsection.questions
        ]

    def locate(self, question_id: str) -> Optional[Tuple[SectionTypeEnum, int]]:
        for section_type, subsections in self.sections.items():
            for subsection in subsections:
                if any(q.question_id == question_id for q in subsection.questions):
                    return section_type, subsection.subsection_number
        return None

    def to_public(self) -> PublicQuestionSnapshot:
        return PublicQuestionSnapshot(
            sections={
                section_type: [
                    PublicSnapshotSubsection(
                        subsection_number=subsection.subsection_number,
                        question_ids=[q.question_id for q in subsection.questions],
                    )
                    for subsection in subsections
                ]
                for section_type, subsections in self.sections.items()
            }
        )

    def summary(self, durations: Optional[Dict[SectionTypeEnum, int]] = None) -> List[SectionSummary]:
        durations = durations or {}
        return [
            SectionSummary(
                section_type=section_type,
                question_count=sum(len(s.questions) for s in subsections),
                duration_minutes=durations.get(section_type),
                subsections=[
                    SubsectionSummary(subsection_number=s.subsection_number, question_count=len(s.questions))
                    for s in subsections
                ],
            )
            for section_type, subsections in self.sections.items()
        ]
