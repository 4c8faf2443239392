from sqlalchemy import Column, Integer, Float, Boolean, Enum, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from jlpt_tryout.core.database import Base
from jlpt_tryout.core.constants import ReferenceGradeEnum, SectionTypeEnum

class SectionScore(Base):
    __tablename__ = "section_scores"
    __table_args__ = (
        UniqueConstraint("attempt_id", "section_type", name="uq_section_scores_attempt_section"),
        UniqueConstraint("offline_result_id", "section_type", name="uq_section_scores_offline_section"),
    )

    id = Column(Integer, primary_key=True, index=True)
    attempt_id = Column(Integer, ForeignKey("test_attempts.id", ondelete="CASCADE"), nullable=True, index=True)
    offline_result_id = Column(Integer, ForeignKey("offline_test_results.id", ondelete="CASCADE"), nullable=True, index=True)
    section_type = Column(Enum(SectionTypeEnum), nullable=False)
    raw_score = Column(Float, nullable=False)
    weighted_score = Column(Float, nullable=False)
    raw_max_score = Column(Float, nullable=False)
    normalized_score = Column(Integer, nullable=False)
    is_passed = Column(Boolean, nullable=False)
    reference_grade = Column(Enum(ReferenceGradeEnum), nullable=False)
    mondai_breakdown = Column(JSON, nullable=False)

    attempt = relationship("TestAttempt", back_populates="section_scores")
    offline_result = relationship("OfflineTestResult", back_populates="section_scores")
