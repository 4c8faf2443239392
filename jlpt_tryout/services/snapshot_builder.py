import logging
import random
from typing import List, Optional

from jlpt_tryout.core.constants import (
    JLPTLevelEnum,
    SectionTypeEnum,
    SelectionPolicyEnum,
    TestModeEnum,
)
from jlpt_tryout.core.exceptions import InsufficientQuestions, InvalidModeSelection
from jlpt_tryout.core.scoring_config import LevelConfig, ScoringConfig
from jlpt_tryout.schemas.question import PoolQuestion
from jlpt_tryout.schemas.snapshot import QuestionSnapshot, SnapshotQuestion, SnapshotSubsection
from jlpt_tryout.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)


class SelectionPolicy:
    name: SelectionPolicyEnum

    def order(self, pool: List[PoolQuestion]) -> List[PoolQuestion]:
        raise NotImplementedError


class OrderedSelection(SelectionPolicy):
    """Bank order. Deterministic for a given pool."""
    name = SelectionPolicyEnum.ORDERED

    def order(self, pool: List[PoolQuestion]) -> List[PoolQuestion]:
        return list(pool)


class ShuffledSelection(SelectionPolicy):
    """Seeded shuffle. The same seed over the same pools yields the same snapshot."""
    name = SelectionPolicyEnum.SHUFFLED

    def __init__(self, seed: int):
        self.seed = seed
        self._random = random.Random(seed)

    def order(self, pool: List[PoolQuestion]) -> List[PoolQuestion]:
        shuffled = list(pool)
        self._random.shuffle(shuffled)
        return shuffled


def get_selection_policy(policy: SelectionPolicyEnum, seed: Optional[int] = None) -> SelectionPolicy:
    policy = SelectionPolicyEnum(policy)
    if policy == SelectionPolicyEnum.SHUFFLED:
        if seed is None:
            raise ValueError("The shuffled selection policy needs a seed.")
        return ShuffledSelection(seed)
    return OrderedSelection()


def required_sections(level_config: LevelConfig, mode: TestModeEnum,
                      section: Optional[SectionTypeEnum] = None) -> List[SectionTypeEnum]:
    mode = TestModeEnum(mode)
    if mode == TestModeEnum.FULL_TEST:
        if section is not None:
            raise InvalidModeSelection(
                "A single section can only be chosen for section practice.",
                details={"mode": mode.value, "section": SectionTypeEnum(section).value},
            )
        return level_config.section_types

    if section is None:
        raise InvalidModeSelection(
            "Section practice requires a section.",
            details={"mode": mode.value},
        )
    section = SectionTypeEnum(section)
    if section not in level_config.section_types:
        raise InvalidModeSelection(
            f"{section.value} is not a section of {level_config.level.value}.",
            details={"mode": mode.value, "section": section.value},
        )
    return [section]


def build_snapshot(level: JLPTLevelEnum, mode: TestModeEnum, config: ScoringConfig, question_bank: QuestionBank,
                   policy: SelectionPolicy, section: Optional[SectionTypeEnum] = None) -> QuestionSnapshot:
    """Select and freeze the questions of a new attempt.

    Fails with InsufficientQuestions on the first mondai that cannot be filled.
    A question already selected anywhere in the attempt is never selected again.
    """
    level_config = config.level(level)
    selected_ids = set()
    sections = {}

    for section_type in required_sections(level_config, mode, section):
        section_config = level_config.section(section_type)
        subsections = []
        for subsection_config in section_config.subsections:
            pool = question_bank.fetch_pool(level, section_type, subsection_config.number)

            candidates = []
            candidate_ids = set()
            for candidate in policy.order(pool):
                if candidate.id in selected_ids or candidate.id in candidate_ids:
                    continue
                candidates.append(candidate)
                candidate_ids.add(candidate.id)

            if len(candidates) < subsection_config.questions_count:
                logger.warning(
                    f"Not enough questions for {JLPTLevelEnum(level).value} {section_type.value} "
                    f"mondai {subsection_config.number}: {len(candidates)}/{subsection_config.questions_count}",
                    extra={"level": JLPTLevelEnum(level).value, "section_type": section_type.value}
                )
                raise InsufficientQuestions(
                    level=JLPTLevelEnum(level).value,
                    section_type=section_type.value,
                    subsection_number=subsection_config.number,
                    required=subsection_config.questions_count,
                    available=len(candidates),
                )

            chosen = candidates[:subsection_config.questions_count]
            selected_ids.update(q.id for q in chosen)
            subsections.append(SnapshotSubsection(
                subsection_number=subsection_config.number,
                questions=[SnapshotQuestion(question_id=q.id, correct_answer=q.correct_answer) for q in chosen],
            ))
        sections[section_type] = subsections

    return QuestionSnapshot(sections=sections)
