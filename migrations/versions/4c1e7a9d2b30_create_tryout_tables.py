"""create tryout tables: attempts, section submissions, answers, scores, offline results, question read model

Revision ID: 4c1e7a9d2b30
Revises: 
Create Date: 2026-10-17 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = '4c1e7a9d2b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

jlpt_level = postgresql.ENUM('N5', 'N4', 'N3', 'N2', 'N1', name='jlptlevelenum', create_type=False)
section_type = postgresql.ENUM('VOCABULARY', 'GRAMMAR_READING', 'LISTENING', name='sectiontypeenum', create_type=False)
test_mode = postgresql.ENUM('FULL_TEST', 'SECTION_PRACTICE', name='testmodeenum', create_type=False)
attempt_status = postgresql.ENUM('IN_PROGRESS', 'COMPLETED', name='testattemptstatusenum', create_type=False)
selection_policy = postgresql.ENUM('ORDERED', 'SHUFFLED', name='selectionpolicyenum', create_type=False)
reference_grade = postgresql.ENUM('A', 'B', 'C', name='referencegradeenum', create_type=False)

ENUMS = (jlpt_level, section_type, test_mode, attempt_status, selection_policy, reference_grade)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table('jlpt_questions',
    sa.Column('id', sa.String(), nullable=False),
    sa.Column('level', jlpt_level, nullable=False),
    sa.Column('section_type', section_type, nullable=False),
    sa.Column('mondai_number', sa.Integer(), nullable=False),
    sa.Column('question_number', sa.Integer(), nullable=False),
    sa.Column('correct_answer', sa.String(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_jlpt_questions_id'), 'jlpt_questions', ['id'], unique=False)
    op.create_index(op.f('ix_jlpt_questions_level'), 'jlpt_questions', ['level'], unique=False)

    op.create_table('test_attempts',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('owner_id', sa.String(), nullable=False),
    sa.Column('level', jlpt_level, nullable=False),
    sa.Column('mode', test_mode, nullable=False),
    sa.Column('practice_section', section_type, nullable=True),
    sa.Column('status', attempt_status, nullable=False),
    sa.Column('question_snapshot', sa.JSON(), nullable=False),
    sa.Column('scoring_config_version', sa.String(), nullable=False),
    sa.Column('selection_policy', selection_policy, nullable=False),
    sa.Column('shuffle_seed', sa.Integer(), nullable=True),
    sa.Column('started_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    sa.Column('total_score', sa.Integer(), nullable=True),
    sa.Column('is_passed', sa.Boolean(), nullable=True),
    sa.Column('failure_reasons', sa.JSON(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_test_attempts_id'), 'test_attempts', ['id'], unique=False)
    op.create_index(op.f('ix_test_attempts_owner_id'), 'test_attempts', ['owner_id'], unique=False)

    op.create_table('section_submissions',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('attempt_id', sa.Integer(), nullable=False),
    sa.Column('section_type', section_type, nullable=False),
    sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.Column('time_spent_seconds', sa.Integer(), nullable=False),
    sa.Column('triggered_by_timer', sa.Boolean(), nullable=False),
    sa.ForeignKeyConstraint(['attempt_id'], ['test_attempts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('attempt_id', 'section_type', name='uq_section_submissions_attempt_section')
    )
    op.create_index(op.f('ix_section_submissions_id'), 'section_submissions', ['id'], unique=False)
    op.create_index(op.f('ix_section_submissions_attempt_id'), 'section_submissions', ['attempt_id'], unique=False)

    op.create_table('user_answers',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('attempt_id', sa.Integer(), nullable=False),
    sa.Column('question_id', sa.String(), nullable=False),
    sa.Column('section_type', section_type, nullable=False),
    sa.Column('subsection_number', sa.Integer(), nullable=False),
    sa.Column('selected_answer', sa.String(), nullable=True),
    sa.Column('answered_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.Column('is_correct', sa.Boolean(), nullable=True),
    sa.ForeignKeyConstraint(['attempt_id'], ['test_attempts.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('attempt_id', 'question_id', name='uq_user_answers_attempt_question')
    )
    op.create_index(op.f('ix_user_answers_id'), 'user_answers', ['id'], unique=False)
    op.create_index(op.f('ix_user_answers_attempt_id'), 'user_answers', ['attempt_id'], unique=False)

    op.create_table('offline_test_results',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('owner_id', sa.String(), nullable=False),
    sa.Column('level', jlpt_level, nullable=False),
    sa.Column('source', sa.String(), nullable=True),
    sa.Column('user_note', sa.Text(), nullable=True),
    sa.Column('raw_inputs', sa.JSON(), nullable=False),
    sa.Column('scoring_config_version', sa.String(), nullable=False),
    sa.Column('total_score', sa.Integer(), nullable=False),
    sa.Column('is_passed', sa.Boolean(), nullable=False),
    sa.Column('failure_reasons', sa.JSON(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_offline_test_results_id'), 'offline_test_results', ['id'], unique=False)
    op.create_index(op.f('ix_offline_test_results_owner_id'), 'offline_test_results', ['owner_id'], unique=False)

    op.create_table('section_scores',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('attempt_id', sa.Integer(), nullable=True),
    sa.Column('offline_result_id', sa.Integer(), nullable=True),
    sa.Column('section_type', section_type, nullable=False),
    sa.Column('raw_score', sa.Float(), nullable=False),
    sa.Column('weighted_score', sa.Float(), nullable=False),
    sa.Column('raw_max_score', sa.Float(), nullable=False),
    sa.Column('normalized_score', sa.Integer(), nullable=False),
    sa.Column('is_passed', sa.Boolean(), nullable=False),
    sa.Column('reference_grade', reference_grade, nullable=False),
    sa.Column('mondai_breakdown', sa.JSON(), nullable=False),
    sa.ForeignKeyConstraint(['attempt_id'], ['test_attempts.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['offline_result_id'], ['offline_test_results.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('attempt_id', 'section_type', name='uq_section_scores_attempt_section'),
    sa.UniqueConstraint('offline_result_id', 'section_type', name='uq_section_scores_offline_section')
    )
    op.create_index(op.f('ix_section_scores_id'), 'section_scores', ['id'], unique=False)
    op.create_index(op.f('ix_section_scores_attempt_id'), 'section_scores', ['attempt_id'], unique=False)
    op.create_index(op.f('ix_section_scores_offline_result_id'), 'section_scores', ['offline_result_id'], unique=False)


def downgrade() -> None:
    op.drop_table('section_scores')
    op.drop_table('offline_test_results')
    op.drop_table('user_answers')
    op.drop_table('section_submissions')
    op.drop_table('test_attempts')
    op.drop_table('jlpt_questions')

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
