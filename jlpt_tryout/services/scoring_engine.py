"""
Pure JLPT scoring functions shared by the live attempt path and the offline
calculator. Nothing here touches the database or global state: the scoring
configuration is always passed in explicitly.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence, Tuple

from jlpt_tryout.core.constants import (
    FailureKindEnum,
    JLPTLevelEnum,
    ReferenceGradeEnum,
    SECTION_DISPLAY_NAMES,
)
from jlpt_tryout.core.exceptions import InvalidSectionConfig
from jlpt_tryout.core.scoring_config import ScoringConfig, SectionConfig
from jlpt_tryout.schemas.scoring import (
    FailureReason,
    MondaiScore,
    PassFailResult,
    SectionInput,
    SectionScore,
)


def round_half_up(value: Decimal) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def reference_grade(normalized_score: int, section_config: SectionConfig) -> ReferenceGradeEnum:
    if normalized_score >= section_config.grade_a_min:
        return ReferenceGradeEnum.A
    if normalized_score >= section_config.grade_b_min:
        return ReferenceGradeEnum.B
    return ReferenceGradeEnum.C


def score_section(config: ScoringConfig, level: JLPTLevelEnum, section_input: SectionInput) -> SectionScore:
    section_config = config.section(level, section_input.section_type)

    raw_score = Decimal(0)
    raw_max_score = Decimal(0)
    breakdown = []
    for subsection in section_input.subsections:
        subsection_config = section_config.subsection(subsection.subsection_number)
        if subsection_config is None:
            raise InvalidSectionConfig(
                f"Mondai {subsection.subsection_number} is not configured for "
                f"{JLPTLevelEnum(level).value} {section_input.section_type.value} in {config.version}.",
                details={
                    "level": JLPTLevelEnum(level).value,
                    "section_type": section_input.section_type.value,
                    "subsection_number": subsection.subsection_number,
                },
            )
        weight = Decimal(str(subsection_config.weight))
        weighted = subsection.correct * weight
        maximum = subsection.total * weight
        raw_score += weighted
        raw_max_score += maximum
        breakdown.append(MondaiScore(
            subsection_number=subsection.subsection_number,
            weight=float(weight),
            correct=subsection.correct,
            total=subsection.total,
            weighted_score=float(weighted),
            max_score=float(maximum),
        ))

    if raw_max_score <= 0:
        raise InvalidSectionConfig(
            f"{section_input.section_type.value} has no scorable questions, cannot normalize.",
            details={"section_type": section_input.section_type.value},
        )

    scaled = raw_score / raw_max_score * section_config.scale_max
    normalized_score = round_half_up(scaled)

    return SectionScore(
        section_type=section_input.section_type,
        raw_score=float(raw_score),
        weighted_score=float(scaled),
        raw_max_score=float(raw_max_score),
        normalized_score=normalized_score,
        is_passed=normalized_score >= section_config.pass_mark,
        reference_grade=reference_grade(normalized_score, section_config),
        mondai_breakdown=breakdown,
    )


def score(config: ScoringConfig, level: JLPTLevelEnum, section_inputs: Sequence[SectionInput]) -> List[SectionScore]:
    return [score_section(config, level, section_input) for section_input in section_inputs]


def aggregate(section_scores: Sequence[SectionScore]) -> int:
    return sum(s.normalized_score for s in section_scores)


def evaluate_pass_fail(config: ScoringConfig, level: JLPTLevelEnum, section_scores: Sequence[SectionScore],
                       total_score: int) -> PassFailResult:
    """Conjunctive verdict: every section at or above its minimum and, for a
    full test, the total at or above the level minimum.

    Section failures are reported in input order, then the total failure.
    """
    level_config = config.level(level)

    sections_passed = {}
    failure_reasons = []
    for section_score in section_scores:
        section_config = config.section(level, section_score.section_type)
        passed = section_score.normalized_score >= section_config.pass_mark
        sections_passed[section_score.section_type] = passed
        if not passed:
            name = SECTION_DISPLAY_NAMES[section_score.section_type]
            failure_reasons.append(FailureReason(
                kind=FailureKindEnum.SECTION,
                section_type=section_score.section_type,
                score=section_score.normalized_score,
                minimum=section_config.pass_mark,
                message=(
                    f"{name} score {section_score.normalized_score} is below "
                    f"the sectional minimum of {section_config.pass_mark}."
                ),
            ))

    # Single-section practice is judged on its section mark only.
    covers_level = set(sections_passed) == set(level_config.section_types)
    if covers_level and total_score < level_config.total_pass_mark:
        failure_reasons.append(FailureReason(
            kind=FailureKindEnum.TOTAL,
            score=total_score,
            minimum=level_config.total_pass_mark,
            message=(
                f"Total score {total_score} is below the {level_config.level.value} "
                f"passing score of {level_config.total_pass_mark}."
            ),
        ))

    return PassFailResult(
        is_passed=not failure_reasons,
        total_score=total_score,
        sections_passed=sections_passed,
        failure_reasons=failure_reasons,
    )


def evaluate(config: ScoringConfig, level: JLPTLevelEnum,
             section_inputs: Sequence[SectionInput]) -> Tuple[List[SectionScore], PassFailResult]:
    section_scores = score(config, level, section_inputs)
    total_score = aggregate(section_scores)
    return section_scores, evaluate_pass_fail(config, level, section_scores, total_score)
