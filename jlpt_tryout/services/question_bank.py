from typing import Dict, Iterable, List, Tuple
from sqlalchemy.orm import Session

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum
from jlpt_tryout.crud.question import question as crud_question
from jlpt_tryout.schemas.question import PoolQuestion


class QuestionBank:
    """Read-only source of usable questions for one (level, section, mondai)."""

    def fetch_pool(self, level: JLPTLevelEnum, section_type: SectionTypeEnum,
                   subsection_number: int) -> List[PoolQuestion]:
        raise NotImplementedError


class SQLQuestionBank(QuestionBank):

    def __init__(self, db: Session):
        self.db = db

    def fetch_pool(self, level: JLPTLevelEnum, section_type: SectionTypeEnum,
                   subsection_number: int) -> List[PoolQuestion]:
        questions = crud_question.get_pool(
            self.db, level=level, section_type=section_type, mondai_number=subsection_number
        )
        return [PoolQuestion.model_validate(q) for q in questions]


class InMemoryQuestionBank(QuestionBank):

    def __init__(self, pools: Dict[Tuple[JLPTLevelEnum, SectionTypeEnum, int], Iterable[PoolQuestion]] = None):
        self._pools = {key: list(questions) for key, questions in (pools or {}).items()}

    def fetch_pool(self, level: JLPTLevelEnum, section_type: SectionTypeEnum,
                   subsection_number: int) -> List[PoolQuestion]:
        return list(self._pools.get((JLPTLevelEnum(level), SectionTypeEnum(section_type), subsection_number), []))
