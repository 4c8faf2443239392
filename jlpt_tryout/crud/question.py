from sqlalchemy.orm import Session
from typing import List

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum
from jlpt_tryout.crud.base import CRUDBase
from jlpt_tryout.models.question import Question
from jlpt_tryout.schemas.question import QuestionCreate, QuestionUpdate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):

    def get_pool(self, db: Session, level: JLPTLevelEnum, section_type: SectionTypeEnum,
                 mondai_number: int) -> List[Question]:
        return (
            db.query(Question)
            .filter(Question.level == level)
            .filter(Question.section_type == section_type)
            .filter(Question.mondai_number == mondai_number)
            .filter(Question.is_active == True)
            .order_by(Question.question_number.asc(), Question.id.asc())
            .all()
        )


question = CRUDQuestion(Question)
