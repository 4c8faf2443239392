import pytest

from jlpt_tryout.core import constants
from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum
from jlpt_tryout.core.exceptions import SectionNotInAttempt
from jlpt_tryout.models.section_submission import SectionSubmission
from jlpt_tryout.services.section_timer import TimedSectionSubmitter
from jlpt_tryout.services.test_attempt import test_attempt_service
from tests.helpers.attempts import CORRECT, answer_all, questions_in

VOCAB = SectionTypeEnum.VOCABULARY
LISTENING = SectionTypeEnum.LISTENING
SECTION_PRACTICE = constants.TestModeEnum.SECTION_PRACTICE
COMPLETED = constants.TestAttemptStatusEnum.COMPLETED


@pytest.fixture
def vocabulary_practice(db_session, seed_questions, owner_id):
    seed_questions(JLPTLevelEnum.N5, sections=[VOCAB])
    return test_attempt_service.create_attempt(
        db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, mode=SECTION_PRACTICE, section=VOCAB
    )


@pytest.mark.asyncio
async def test_expiry_submits_and_completes(db_session, session_factory, vocabulary_practice, owner_id):
    answer_all(db_session, vocabulary_practice.id, owner_id, questions_in(db_session, vocabulary_practice.id, VOCAB), CORRECT)
    submitter = TimedSectionSubmitter(
        vocabulary_practice.id, VOCAB, owner_id, duration_seconds=0.05, session_factory=session_factory
    )

    submitter.start()
    result = await submitter.wait()

    assert result.already_submitted is False
    assert result.submission.triggered_by_timer is True
    assert result.attempt.status == COMPLETED
    assert result.attempt.total_score == 60
    stored = db_session.query(SectionSubmission).filter(SectionSubmission.attempt_id == vocabulary_practice.id).one()
    assert stored.triggered_by_timer is True


@pytest.mark.asyncio
async def test_expiry_after_manual_submission_is_not_an_error(db_session, session_factory, seed_questions, owner_id):
    seed_questions(JLPTLevelEnum.N5)
    attempt = test_attempt_service.create_attempt(db_session, owner_id=owner_id, level=JLPTLevelEnum.N5)
    test_attempt_service.submit_section(
        db_session, attempt_id=attempt.id, section_type=VOCAB, time_spent_seconds=900, requester_id=owner_id
    )
    submitter = TimedSectionSubmitter(attempt.id, VOCAB, owner_id, duration_seconds=0.05, session_factory=session_factory)

    submitter.start()
    result = await submitter.wait()

    assert result.already_submitted is True
    assert result.submission.time_spent_seconds == 900
    assert result.submission.triggered_by_timer is False
    assert result.attempt.status == constants.TestAttemptStatusEnum.IN_PROGRESS


@pytest.mark.asyncio
async def test_expiry_after_completion_is_not_an_error(db_session, session_factory, vocabulary_practice, owner_id):
    test_attempt_service.submit_and_try_complete(
        db_session, attempt_id=vocabulary_practice.id, section_type=VOCAB, time_spent_seconds=30, requester_id=owner_id
    )
    submitter = TimedSectionSubmitter(
        vocabulary_practice.id, VOCAB, owner_id, duration_seconds=0.05, session_factory=session_factory
    )

    submitter.start()
    result = await submitter.wait()

    assert result.already_submitted is True
    assert result.attempt.status == COMPLETED


def test_timer_is_sized_from_section_duration(db_session, session_factory, vocabulary_practice, owner_id):
    submitter = TimedSectionSubmitter.for_attempt(
        db_session, vocabulary_practice.id, VOCAB, owner_id, session_factory=session_factory
    )

    assert submitter.timer.duration_seconds == 20 * 60
    assert submitter.timer.format_remaining() == "20:00"


def test_timer_rejects_section_outside_attempt(db_session, vocabulary_practice, owner_id):
    with pytest.raises(SectionNotInAttempt):
        TimedSectionSubmitter.for_attempt(db_session, vocabulary_practice.id, LISTENING, owner_id)
