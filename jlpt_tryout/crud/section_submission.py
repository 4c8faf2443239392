import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from jlpt_tryout.core.constants import SectionTypeEnum
from jlpt_tryout.crud.base import CRUDBase
from jlpt_tryout.models.section_submission import SectionSubmission
from jlpt_tryout.schemas.section_submission import SectionSubmitIn

logger = logging.getLogger(__name__)

class CRUDSectionSubmission(CRUDBase[SectionSubmission, SectionSubmitIn, SectionSubmitIn]):

    def get_by_attempt_and_section(self, db: Session, attempt_id: int,
                                   section_type: SectionTypeEnum) -> Optional[SectionSubmission]:
        return (
            db.query(SectionSubmission)
            .filter(SectionSubmission.attempt_id == attempt_id)
            .filter(SectionSubmission.section_type == section_type)
            .first()
        )

    def get_all_by_attempt(self, db: Session, attempt_id: int) -> List[SectionSubmission]:
        return (
            db.query(SectionSubmission)
            .filter(SectionSubmission.attempt_id == attempt_id)
            .order_by(SectionSubmission.id.asc())
            .all()
        )

    def create_if_absent(self, db: Session, *, attempt_id: int, section_type: SectionTypeEnum,
                         time_spent_seconds: int, triggered_by_timer: bool = False) -> Optional[SectionSubmission]:
        """Insert the lock row and commit. Returns None when the row already exists."""
        db_obj = SectionSubmission(
            attempt_id=attempt_id,
            section_type=section_type,
            time_spent_seconds=time_spent_seconds,
            triggered_by_timer=triggered_by_timer,
        )
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                f"Section {section_type.value} of attempt {attempt_id} was already submitted",
                extra={"attempt_id": attempt_id, "section_type": section_type.value}
            )
            return None
        db.refresh(db_obj)
        return db_obj


section_submission = CRUDSectionSubmission(SectionSubmission)
