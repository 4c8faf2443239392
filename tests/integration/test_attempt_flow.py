import pytest

from jlpt_tryout.core import constants
from jlpt_tryout.core.constants import JLPTLevelEnum, ReferenceGradeEnum, SectionTypeEnum, SelectionPolicyEnum
from jlpt_tryout.core.exceptions import (
    AlreadySubmitted,
    AttemptClosed,
    AttemptForbidden,
    AttemptNotFound,
    InsufficientQuestions,
    InvalidModeSelection,
    QuestionNotInAttempt,
    ResultsNotAvailable,
    SectionLocked,
    SectionNotInAttempt,
)
from jlpt_tryout.crud.question import question as crud_question
from jlpt_tryout.models.question import Question
from jlpt_tryout.models.test_attempt import TestAttempt
from jlpt_tryout.models.user_answer import UserAnswer
from jlpt_tryout.schemas.question import QuestionUpdate
from jlpt_tryout.services.test_attempt import test_attempt_service
from tests.helpers.attempts import CORRECT, WRONG, answer_all, questions_in, snapshot_of

VOCAB = SectionTypeEnum.VOCABULARY
GRAMMAR = SectionTypeEnum.GRAMMAR_READING
LISTENING = SectionTypeEnum.LISTENING
SECTION_PRACTICE = constants.TestModeEnum.SECTION_PRACTICE
COMPLETED = constants.TestAttemptStatusEnum.COMPLETED
IN_PROGRESS = constants.TestAttemptStatusEnum.IN_PROGRESS


@pytest.fixture
def n5_attempt(db_session, seed_questions, owner_id):
    seed_questions(JLPTLevelEnum.N5)
    return test_attempt_service.create_attempt(db_session, owner_id=owner_id, level=JLPTLevelEnum.N5)


def _submit(db, attempt_id, section_type, owner_id, time_spent=60):
    return test_attempt_service.submit_and_try_complete(
        db, attempt_id=attempt_id, section_type=section_type, time_spent_seconds=time_spent, requester_id=owner_id
    )


class TestCreateAttempt:
    def test_full_test_snapshot_covers_every_section(self, db_session, n5_attempt, owner_id):
        assert n5_attempt.status == IN_PROGRESS
        assert n5_attempt.owner_id == owner_id
        assert n5_attempt.scoring_config_version == "jlpt-2024.1"
        assert [s.section_type for s in n5_attempt.sections] == [VOCAB, GRAMMAR, LISTENING]
        assert [s.question_count for s in n5_attempt.sections] == [35, 32, 24]
        assert [s.duration_minutes for s in n5_attempt.sections] == [20, 40, 30]

        snapshot = snapshot_of(db_session, n5_attempt.id)
        assert len(snapshot.question_ids()) == 91
        assert snapshot.sections[VOCAB][0].questions[0].question_id == "q-N5-vocabulary-1-1"

    def test_section_practice_snapshot_has_one_section(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N4, sections=[LISTENING])

        attempt = test_attempt_service.create_attempt(
            db_session, owner_id=owner_id, level=JLPTLevelEnum.N4, mode=SECTION_PRACTICE, section=LISTENING
        )

        assert attempt.practice_section == LISTENING
        assert [s.section_type for s in attempt.sections] == [LISTENING]

    def test_insufficient_questions_writes_nothing(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5, skip={(GRAMMAR, 4): 1})

        with pytest.raises(InsufficientQuestions) as exc_info:
            test_attempt_service.create_attempt(db_session, owner_id=owner_id, level=JLPTLevelEnum.N5)

        assert exc_info.value.details["section_type"] == "grammar_reading"
        assert exc_info.value.details["subsection_number"] == 4
        assert exc_info.value.details["required"] == 3
        assert exc_info.value.details["available"] == 2
        assert db_session.query(TestAttempt).count() == 0

    def test_inactive_questions_are_not_usable(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5, sections=[VOCAB])
        db_session.get(Question, "q-N5-vocabulary-4-5").is_active = False
        db_session.commit()

        with pytest.raises(InsufficientQuestions):
            test_attempt_service.create_attempt(
                db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, mode=SECTION_PRACTICE, section=VOCAB
            )

    def test_practice_without_section_is_rejected(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5)

        with pytest.raises(InvalidModeSelection):
            test_attempt_service.create_attempt(
                db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, mode=SECTION_PRACTICE
            )

    def test_shuffled_policy_records_its_seed(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5, extra=5)

        attempt = test_attempt_service.create_attempt(
            db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, selection_policy=SelectionPolicyEnum.SHUFFLED
        )

        stored = db_session.get(TestAttempt, attempt.id)
        assert stored.selection_policy == SelectionPolicyEnum.SHUFFLED
        assert stored.shuffle_seed is not None
        snapshot = snapshot_of(db_session, attempt.id)
        assert len(snapshot.question_ids()) == len(set(snapshot.question_ids())) == 91


class TestAnswersAndLocks:
    def test_answer_is_upserted(self, db_session, n5_attempt, owner_id):
        question_id = questions_in(db_session, n5_attempt.id, VOCAB)[0]

        test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, WRONG, owner_id)
        answer = test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, CORRECT, owner_id)

        assert answer.selected_answer == CORRECT
        assert answer.section_type == VOCAB
        assert answer.subsection_number == 1
        assert db_session.query(UserAnswer).filter(UserAnswer.attempt_id == n5_attempt.id).count() == 1

    def test_answer_can_be_cleared(self, db_session, n5_attempt, owner_id):
        question_id = questions_in(db_session, n5_attempt.id, VOCAB)[0]
        test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, CORRECT, owner_id)

        answer = test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, None, owner_id)

        assert answer.selected_answer is None

    def test_question_outside_snapshot_is_rejected(self, db_session, n5_attempt, owner_id):
        with pytest.raises(QuestionNotInAttempt):
            test_attempt_service.record_answer(db_session, n5_attempt.id, "q-N4-vocabulary-1-1", CORRECT, owner_id)

    def test_submitted_section_rejects_answers(self, db_session, n5_attempt, owner_id):
        vocab_ids = questions_in(db_session, n5_attempt.id, VOCAB)
        test_attempt_service.record_answer(db_session, n5_attempt.id, vocab_ids[0], CORRECT, owner_id)
        _submit(db_session, n5_attempt.id, VOCAB, owner_id)

        with pytest.raises(SectionLocked):
            test_attempt_service.record_answer(db_session, n5_attempt.id, vocab_ids[0], WRONG, owner_id)
        with pytest.raises(SectionLocked):
            test_attempt_service.record_answer(db_session, n5_attempt.id, vocab_ids[1], WRONG, owner_id)

        stored = test_attempt_service.get_attempt(db_session, n5_attempt.id, owner_id).user_answers
        assert [(a.question_id, a.selected_answer) for a in stored] == [(vocab_ids[0], CORRECT)]

    def test_other_sections_stay_open(self, db_session, n5_attempt, owner_id):
        _submit(db_session, n5_attempt.id, VOCAB, owner_id)
        grammar_id = questions_in(db_session, n5_attempt.id, GRAMMAR)[0]

        answer = test_attempt_service.record_answer(db_session, n5_attempt.id, grammar_id, CORRECT, owner_id)

        assert answer.section_type == GRAMMAR

    def test_second_submit_is_already_submitted(self, db_session, n5_attempt, owner_id):
        first = _submit(db_session, n5_attempt.id, VOCAB, owner_id, time_spent=300)

        with pytest.raises(AlreadySubmitted):
            _submit(db_session, n5_attempt.id, VOCAB, owner_id, time_spent=10)

        assert first.already_submitted is False
        assert first.submission.time_spent_seconds == 300
        assert first.attempt.status == IN_PROGRESS

    def test_section_outside_attempt_is_rejected(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5, sections=[VOCAB])
        attempt = test_attempt_service.create_attempt(
            db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, mode=SECTION_PRACTICE, section=VOCAB
        )

        with pytest.raises(SectionNotInAttempt):
            _submit(db_session, attempt.id, LISTENING, owner_id)


class TestOwnership:
    def test_missing_attempt(self, db_session, owner_id):
        with pytest.raises(AttemptNotFound):
            test_attempt_service.get_attempt(db_session, 999, owner_id)

    def test_foreign_attempt_is_forbidden_and_looks_missing(self, db_session, n5_attempt, other_owner_id):
        question_id = questions_in(db_session, n5_attempt.id, VOCAB)[0]

        with pytest.raises(AttemptForbidden) as exc_info:
            test_attempt_service.get_attempt(db_session, n5_attempt.id, other_owner_id)
        with pytest.raises(AttemptNotFound):
            test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, CORRECT, other_owner_id)
        with pytest.raises(AttemptNotFound):
            _submit(db_session, n5_attempt.id, VOCAB, other_owner_id)
        with pytest.raises(AttemptNotFound):
            test_attempt_service.get_results(db_session, n5_attempt.id, other_owner_id)

        assert exc_info.value.code == AttemptNotFound.code
        assert exc_info.value.status_code == 404


class TestCompletion:
    def test_last_submission_completes_and_scores(self, db_session, n5_attempt, owner_id):
        for section_type in (VOCAB, GRAMMAR, LISTENING):
            answer_all(db_session, n5_attempt.id, owner_id, questions_in(db_session, n5_attempt.id, section_type), CORRECT)

        assert _submit(db_session, n5_attempt.id, VOCAB, owner_id).attempt.status == IN_PROGRESS
        assert _submit(db_session, n5_attempt.id, GRAMMAR, owner_id).attempt.status == IN_PROGRESS
        last = _submit(db_session, n5_attempt.id, LISTENING, owner_id)

        assert last.attempt.status == COMPLETED
        assert last.attempt.total_score == 180
        assert last.attempt.is_passed is True

        results = test_attempt_service.get_results(db_session, n5_attempt.id, owner_id)
        assert [s.section_type for s in results.section_scores] == [VOCAB, GRAMMAR, LISTENING]
        assert all(s.normalized_score == 60 for s in results.section_scores)
        assert all(s.reference_grade == ReferenceGradeEnum.A for s in results.section_scores)
        assert results.failure_reasons == []

        answers = db_session.query(UserAnswer).filter(UserAnswer.attempt_id == n5_attempt.id).all()
        assert len(answers) == 91
        assert all(a.is_correct for a in answers)

    def test_partial_answers_score_blank_as_wrong(self, db_session, n5_attempt, owner_id):
        vocab_first_mondai = questions_in(db_session, n5_attempt.id, VOCAB, subsection_number=1)
        answer_all(db_session, n5_attempt.id, owner_id, vocab_first_mondai[:6], CORRECT)
        answer_all(db_session, n5_attempt.id, owner_id, vocab_first_mondai[6:8], WRONG)

        for section_type in (VOCAB, GRAMMAR, LISTENING):
            _submit(db_session, n5_attempt.id, section_type, owner_id)

        results = test_attempt_service.get_results(db_session, n5_attempt.id, owner_id)
        vocabulary = results.section_scores[0]
        assert vocabulary.raw_score == 6
        assert vocabulary.raw_max_score == 35
        # 6 / 35 * 60 = 10.29
        assert vocabulary.normalized_score == 10
        assert vocabulary.reference_grade == ReferenceGradeEnum.C
        assert vocabulary.mondai_breakdown[0].correct == 6
        assert vocabulary.mondai_breakdown[0].total == 12
        assert results.total_score == 10
        assert results.is_passed is False
        assert [r.section_type for r in results.failure_reasons] == [VOCAB, GRAMMAR, LISTENING, None]
        assert results.sections_passed == {VOCAB: False, GRAMMAR: False, LISTENING: False}

        wrong = db_session.query(UserAnswer).filter(UserAnswer.question_id == vocab_first_mondai[7]).one()
        assert wrong.is_correct is False

    def test_section_practice_completes_on_its_only_section(self, db_session, seed_questions, owner_id):
        seed_questions(JLPTLevelEnum.N5, sections=[LISTENING])
        attempt = test_attempt_service.create_attempt(
            db_session, owner_id=owner_id, level=JLPTLevelEnum.N5, mode=SECTION_PRACTICE, section=LISTENING
        )
        answer_all(db_session, attempt.id, owner_id, questions_in(db_session, attempt.id, LISTENING), CORRECT)

        result = _submit(db_session, attempt.id, LISTENING, owner_id)

        assert result.attempt.status == COMPLETED
        assert result.attempt.total_score == 60
        assert result.attempt.is_passed is True

    def test_completed_attempt_is_closed(self, db_session, n5_attempt, owner_id):
        for section_type in (VOCAB, GRAMMAR, LISTENING):
            _submit(db_session, n5_attempt.id, section_type, owner_id)
        question_id = questions_in(db_session, n5_attempt.id, GRAMMAR)[0]

        with pytest.raises(AttemptClosed):
            test_attempt_service.record_answer(db_session, n5_attempt.id, question_id, CORRECT, owner_id)
        with pytest.raises(AttemptClosed):
            _submit(db_session, n5_attempt.id, VOCAB, owner_id)

    def test_try_complete_waits_for_every_section(self, db_session, n5_attempt, owner_id):
        _submit(db_session, n5_attempt.id, VOCAB, owner_id)

        attempt = test_attempt_service.complete_attempt(db_session, n5_attempt.id, owner_id)

        assert attempt.status == IN_PROGRESS
        assert attempt.section_scores == []
        with pytest.raises(ResultsNotAvailable):
            test_attempt_service.get_results(db_session, n5_attempt.id, owner_id)

    def test_try_complete_is_idempotent(self, db_session, n5_attempt, owner_id):
        for section_type in (VOCAB, GRAMMAR, LISTENING):
            _submit(db_session, n5_attempt.id, section_type, owner_id)
        completed_at = db_session.get(TestAttempt, n5_attempt.id).completed_at

        again = test_attempt_service.try_complete(db_session, n5_attempt.id)

        assert again.status == COMPLETED
        assert again.completed_at == completed_at
        assert len(again.section_scores) == 3

    def test_scoring_uses_frozen_answer_key(self, db_session, n5_attempt, owner_id):
        vocab_ids = questions_in(db_session, n5_attempt.id, VOCAB)
        answer_all(db_session, n5_attempt.id, owner_id, vocab_ids, CORRECT)

        crud_question.update(db_session, db_obj=db_session.get(Question, vocab_ids[0]), obj_in=QuestionUpdate(correct_answer=WRONG))
        crud_question.delete(db_session, id=vocab_ids[1])

        for section_type in (VOCAB, GRAMMAR, LISTENING):
            _submit(db_session, n5_attempt.id, section_type, owner_id)

        results = test_attempt_service.get_results(db_session, n5_attempt.id, owner_id)
        assert results.section_scores[0].raw_score == 35
        assert results.section_scores[0].normalized_score == 60
        assert snapshot_of(db_session, n5_attempt.id).question_ids()[:2] == vocab_ids[:2]

    def test_details_hide_scores_until_completed(self, db_session, n5_attempt, owner_id):
        details = test_attempt_service.get_attempt(db_session, n5_attempt.id, owner_id)

        assert details.section_scores is None
        assert details.failure_reasons is None
        public = details.question_snapshot.model_dump()
        assert "correct_answer" not in str(public)
        assert public["sections"][VOCAB][0]["question_ids"][0] == "q-N5-vocabulary-1-1"


class TestHistory:
    def test_history_is_newest_first_and_scoped(self, db_session, seed_questions, owner_id, other_owner_id):
        seed_questions(JLPTLevelEnum.N5)
        seed_questions(JLPTLevelEnum.N4, sections=[VOCAB])
        first = test_attempt_service.create_attempt(db_session, owner_id=owner_id, level=JLPTLevelEnum.N5)
        second = test_attempt_service.create_attempt(
            db_session, owner_id=owner_id, level=JLPTLevelEnum.N4, mode=SECTION_PRACTICE, section=VOCAB
        )
        test_attempt_service.create_attempt(db_session, owner_id=other_owner_id, level=JLPTLevelEnum.N5)

        history = test_attempt_service.get_user_attempts(db_session, owner_id=owner_id)
        n5_only = test_attempt_service.get_user_attempts(db_session, owner_id=owner_id, level=JLPTLevelEnum.N5)

        assert [a.id for a in history] == [second.id, first.id]
        assert [a.id for a in n5_only] == [first.id]
