from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jlpt_tryout.core.database import Base
from jlpt_tryout.core.constants import SectionTypeEnum

class UserAnswer(Base):
    __tablename__ = "user_answers"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_user_answers_attempt_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("test_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String, nullable=False)
    section_type = Column(Enum(SectionTypeEnum), nullable=False)
    subsection_number = Column(Integer, nullable=False)
    selected_answer = Column(String, nullable=True)  # None means left blank
    answered_at = Column(DateTime(timezone=True), server_default=func.now())
    is_correct = Column(Boolean, nullable=True)  # set on completion

    attempt = relationship("TestAttempt", back_populates="user_answers")
