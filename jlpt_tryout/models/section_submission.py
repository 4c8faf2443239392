from sqlalchemy import Column, Integer, DateTime, ForeignKey, Boolean, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jlpt_tryout.core.database import Base
from jlpt_tryout.core.constants import SectionTypeEnum

class SectionSubmission(Base):
    __tablename__ = "section_submissions"
    __table_args__ = (
        # The row's existence is the section lock.
        UniqueConstraint("attempt_id", "section_type", name="uq_section_submissions_attempt_section"),
    )

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("test_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    section_type = Column(Enum(SectionTypeEnum), nullable=False)
    submitted_at = Column(DateTime(timezone=True), server_default=func.now())
    time_spent_seconds = Column(Integer, nullable=False, default=0)
    triggered_by_timer = Column(Boolean, nullable=False, default=False)

    attempt = relationship("TestAttempt", back_populates="section_submissions")
