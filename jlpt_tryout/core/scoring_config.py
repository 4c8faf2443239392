"""
Versioned scoring configuration for the JLPT tryout engine.

Every table the scoring engine needs (mondai weights, question counts, scaled
ceilings, grade cut points, pass marks, level totals, section durations) lives
in one immutable ScoringConfig value keyed by (level, section, subsection).
Attempts and offline results record the version they were scored with.
"""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum, SECTION_ORDER
from jlpt_tryout.core.exceptions import InvalidSectionConfig


class SubsectionConfig(BaseModel):
    number: int
    weight: float
    questions_count: int

    model_config = ConfigDict(frozen=True)


class SectionConfig(BaseModel):
    section_type: SectionTypeEnum
    subsections: Tuple[SubsectionConfig, ...]
    scale_max: int = 60
    grade_a_min: int = 40
    grade_b_min: int = 20
    pass_mark: int = 19
    duration_minutes: int = 30

    model_config = ConfigDict(frozen=True)

    def subsection(self, number: int) -> Optional[SubsectionConfig]:
        return next((s for s in self.subsections if s.number == number), None)

    @property
    def subsection_numbers(self) -> List[int]:
        return [s.number for s in self.subsections]

    @property
    def total_questions(self) -> int:
        return sum(s.questions_count for s in self.subsections)

    @property
    def max_raw_score(self) -> float:
        return sum(s.weight * s.questions_count for s in self.subsections)


class LevelConfig(BaseModel):
    level: JLPTLevelEnum
    sections: Tuple[SectionConfig, ...]
    total_pass_mark: int

    model_config = ConfigDict(frozen=True)

    def section(self, section_type: SectionTypeEnum) -> Optional[SectionConfig]:
        return next((s for s in self.sections if s.section_type == section_type), None)

    @property
    def section_types(self) -> List[SectionTypeEnum]:
        return [s.section_type for s in self.sections]

    @property
    def total_scale_max(self) -> int:
        return sum(s.scale_max for s in self.sections)


class ScoringConfig(BaseModel):
    version: str
    levels: Dict[JLPTLevelEnum, LevelConfig]

    model_config = ConfigDict(frozen=True)

    def level(self, level: JLPTLevelEnum) -> LevelConfig:
        level_config = self.levels.get(JLPTLevelEnum(level))
        if level_config is None:
            raise InvalidSectionConfig(f"No scoring configuration for level {JLPTLevelEnum(level).value} in {self.version}.")
        return level_config

    def section(self, level: JLPTLevelEnum, section_type: SectionTypeEnum) -> SectionConfig:
        section_config = self.level(level).section(SectionTypeEnum(section_type))
        if section_config is None:
            raise InvalidSectionConfig(
                f"No scoring configuration for {JLPTLevelEnum(level).value} {SectionTypeEnum(section_type).value} in {self.version}."
            )
        return section_config


def _section(section_type, mondai, duration_minutes, **kwargs) -> SectionConfig:
    return SectionConfig(
        section_type=section_type,
        subsections=tuple(
            SubsectionConfig(number=number, weight=weight, questions_count=count)
            for number, weight, count in mondai
        ),
        duration_minutes=duration_minutes,
        **kwargs,
    )


def _level(level, total_pass_mark, vocabulary, grammar_reading, listening) -> LevelConfig:
    sections = {
        SectionTypeEnum.VOCABULARY: vocabulary,
        SectionTypeEnum.GRAMMAR_READING: grammar_reading,
        SectionTypeEnum.LISTENING: listening,
    }
    return LevelConfig(
        level=level,
        total_pass_mark=total_pass_mark,
        sections=tuple(
            _section(section_type, *sections[section_type])
            for section_type in SECTION_ORDER
        ),
    )


# (mondai number, weight, questions) per section, then duration in minutes.
JLPT_2024_1 = ScoringConfig(
    version="jlpt-2024.1",
    levels={
        JLPTLevelEnum.N5: _level(
            JLPTLevelEnum.N5, 80,
            vocabulary=([(1, 1, 12), (2, 1, 8), (3, 1, 10), (4, 1, 5)], 20),
            grammar_reading=([(1, 1, 16), (2, 1, 5), (3, 1, 5), (4, 4, 3), (5, 4, 2), (6, 4, 1)], 40),
            listening=([(1, 2, 7), (2, 2.5, 6), (3, 3, 5), (4, 2.5, 6)], 30),
        ),
        JLPTLevelEnum.N4: _level(
            JLPTLevelEnum.N4, 90,
            vocabulary=([(1, 1, 9), (2, 1, 6), (3, 1, 10), (4, 2, 5), (5, 2, 5)], 25),
            grammar_reading=([(1, 1, 15), (2, 1, 5), (3, 1, 5), (4, 7, 4), (5, 7, 4), (6, 9, 2)], 55),
            listening=([(1, 2, 8), (2, 2, 7), (3, 4, 5), (4, 1.5, 8)], 35),
        ),
        JLPTLevelEnum.N3: _level(
            JLPTLevelEnum.N3, 95,
            vocabulary=([(1, 1, 8), (2, 1, 6), (3, 1, 11), (4, 1, 5), (5, 1, 5)], 30),
            grammar_reading=([(1, 1, 13), (2, 1, 5), (3, 1, 5), (4, 3, 4), (5, 4, 6), (6, 4, 4), (7, 4, 2)], 70),
            listening=([(1, 2, 6), (2, 2, 6), (3, 2, 4), (4, 2, 9)], 40),
        ),
        JLPTLevelEnum.N2: _level(
            JLPTLevelEnum.N2, 90,
            vocabulary=([(1, 1, 5), (2, 1, 5), (3, 1, 5), (4, 1, 7), (5, 1, 5), (6, 2, 5),
                         (7, 1, 12), (8, 1, 5), (9, 1, 5)], 50),
            grammar_reading=([(10, 2, 5), (11, 2, 9), (12, 3, 2), (13, 4, 3), (14, 4, 2)], 55),
            listening=([(1, 2, 5), (2, 2, 6), (3, 2, 5), (4, 1, 12), (5, 3, 4)], 50),
        ),
        JLPTLevelEnum.N1: _level(
            JLPTLevelEnum.N1, 100,
            vocabulary=([(1, 1, 6), (2, 1, 7), (3, 1, 6), (4, 1, 6), (5, 1, 10), (6, 2, 5), (7, 1, 5)], 50),
            grammar_reading=([(8, 1, 4), (9, 1, 9), (10, 2, 4), (11, 2, 2), (12, 3, 4), (13, 4, 2)], 60),
            listening=([(1, 2, 6), (2, 2, 7), (3, 2, 6), (4, 1, 14), (5, 3, 4)], 55),
        ),
    },
)

SCORING_CONFIGS: Dict[str, ScoringConfig] = {
    JLPT_2024_1.version: JLPT_2024_1,
}


def get_scoring_config(version: Optional[str] = None) -> ScoringConfig:
    if version is None:
        from jlpt_tryout.core.config import settings
        version = settings.SCORING_CONFIG_VERSION

    config = SCORING_CONFIGS.get(version)
    if config is None:
        raise InvalidSectionConfig(f"Unknown scoring configuration version '{version}'.")
    return config
