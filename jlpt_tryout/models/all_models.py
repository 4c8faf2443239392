# Importing this module registers every table on Base.metadata.
from jlpt_tryout.core.database import Base
from jlpt_tryout.models.offline_test_result import OfflineTestResult
from jlpt_tryout.models.question import Question
from jlpt_tryout.models.section_score import SectionScore
from jlpt_tryout.models.section_submission import SectionSubmission
from jlpt_tryout.models.test_attempt import TestAttempt
from jlpt_tryout.models.user_answer import UserAnswer

__all__ = [
    "Base",
    "OfflineTestResult",
    "Question",
    "SectionScore",
    "SectionSubmission",
    "TestAttempt",
    "UserAnswer",
]
