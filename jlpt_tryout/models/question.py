from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum
from sqlalchemy.sql import func
from jlpt_tryout.core.database import Base
from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum

class Question(Base):
    """Read model of the external question bank."""
    __tablename__ = "jlpt_questions"

    id = Column(String, primary_key=True, index=True)
    level = Column(Enum(JLPTLevelEnum), nullable=False, index=True)
    section_type = Column(Enum(SectionTypeEnum), nullable=False)
    mondai_number = Column(Integer, nullable=False)
    question_number = Column(Integer, nullable=False)
    correct_answer = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
