from datetime import datetime, timezone
from sqlalchemy import exists, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Optional

from jlpt_tryout.core.constants import SectionTypeEnum
from jlpt_tryout.crud.base import CRUDBase
from jlpt_tryout.models.section_submission import SectionSubmission
from jlpt_tryout.models.user_answer import UserAnswer
from jlpt_tryout.schemas.user_answer import UserAnswerIn

class CRUDUserAnswer(CRUDBase[UserAnswer, UserAnswerIn, UserAnswerIn]):

    def get_by_attempt_and_question(self, db: Session, attempt_id: int,
                                    question_id: str) -> Optional[UserAnswer]:
        return (
            db.query(UserAnswer)
            .filter(UserAnswer.attempt_id == attempt_id)
            .filter(UserAnswer.question_id == question_id)
            .first()
        )

    def get_all_by_attempt(self, db: Session, attempt_id: int) -> List[UserAnswer]:
        return (
            db.query(UserAnswer)
            .filter(UserAnswer.attempt_id == attempt_id)
            .order_by(UserAnswer.id.asc())
            .all()
        )

    def _section_locked(self, attempt_id: int, section_type: SectionTypeEnum):
        return (
            exists()
            .where(SectionSubmission.attempt_id == attempt_id)
            .where(SectionSubmission.section_type == section_type)
        )

    def upsert_unless_locked(self, db: Session, *, attempt_id: int, question_id: str,
                             section_type: SectionTypeEnum, subsection_number: int,
                             selected_answer: Optional[str]) -> bool:
        """Write the answer unless the section's submission row exists.

        Both the UPDATE and the INSERT carry the NOT EXISTS guard in the same
        statement, so a concurrently committed submission is always observed.
        Commits on success and returns False when the section is locked.
        An IntegrityError that survives one retry is raised.
        """
        locked = self._section_locked(attempt_id, section_type)
        columns = UserAnswer.__table__.c
        insert_error = None

        while True:
            answered_at = datetime.now(timezone.utc)
            result = db.execute(
                update(UserAnswer)
                .where(UserAnswer.attempt_id == attempt_id)
                .where(UserAnswer.question_id == question_id)
                .where(~locked)
                .values(selected_answer=selected_answer, answered_at=answered_at)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                db.commit()
                return True

            if db.execute(select(locked)).scalar():
                db.rollback()
                return False
            if insert_error is not None:
                # Retried once and the row is still missing, so the insert failed for another reason.
                db.rollback()
                raise insert_error

            insert_values = select(
                literal(attempt_id, type_=columns.attempt_id.type),
                literal(question_id, type_=columns.question_id.type),
                literal(section_type, type_=columns.section_type.type),
                literal(subsection_number, type_=columns.subsection_number.type),
                literal(selected_answer, type_=columns.selected_answer.type),
                literal(answered_at, type_=columns.answered_at.type),
            ).where(~locked)
            try:
                result = db.execute(
                    insert(UserAnswer).from_select(
                        ["attempt_id", "question_id", "section_type", "subsection_number",
                         "selected_answer", "answered_at"],
                        insert_values,
                    )
                )
                db.commit()
            except IntegrityError as exc:
                # Usually another request inserted the same answer first; retry once as an update.
                db.rollback()
                insert_error = exc
                continue
            return bool(result.rowcount)

    def mark_correctness(self, db: Session, *, attempt_id: int, correct_question_ids: List[str]) -> None:
        db.execute(
            update(UserAnswer)
            .where(UserAnswer.attempt_id == attempt_id)
            .values(is_correct=UserAnswer.question_id.in_(correct_question_ids) if correct_question_ids else False)
            .execution_options(synchronize_session=False)
        )


user_answer = CRUDUserAnswer(UserAnswer)
