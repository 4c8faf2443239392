from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jlpt_tryout.core.database import Base
from jlpt_tryout.core.constants import JLPTLevelEnum

class OfflineTestResult(Base):
    __tablename__ = "offline_test_results"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String, nullable=False, index=True)
    level = Column(Enum(JLPTLevelEnum), nullable=False)
    source = Column(String, nullable=True)
    user_note = Column(Text, nullable=True)
    raw_inputs = Column(JSON, nullable=False)
    scoring_config_version = Column(String, nullable=False)
    total_score = Column(Integer, nullable=False)
    is_passed = Column(Boolean, nullable=False)
    failure_reasons = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    section_scores = relationship(
        "SectionScore",
        back_populates="offline_result",
        cascade="all, delete-orphan",
        order_by="SectionScore.id",
    )
