from sqlalchemy.orm import Session
from typing import List, Optional

from jlpt_tryout.crud.base import CRUDBase
from jlpt_tryout.models.section_score import SectionScore
from jlpt_tryout.schemas.scoring import SectionScore as SectionScoreSchema

class CRUDSectionScore(CRUDBase[SectionScore, SectionScoreSchema, SectionScoreSchema]):

    def create_many(self, db: Session, *, scores: List[SectionScoreSchema], attempt_id: Optional[int] = None,
                    offline_result_id: Optional[int] = None) -> List[SectionScore]:
        db_objs = [
            SectionScore(
                attempt_id=attempt_id,
                offline_result_id=offline_result_id,
                **score.model_dump(mode="json", exclude={"section_type", "reference_grade"}),
                section_type=score.section_type,
                reference_grade=score.reference_grade,
            )
            for score in scores
        ]
        db.add_all(db_objs)
        db.flush()
        return db_objs


section_score = CRUDSectionScore(SectionScore)
