import logging
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.orm import Session

from jlpt_tryout.core.constants import JLPTLevelEnum, SECTION_DISPLAY_NAMES, SECTION_ORDER
from jlpt_tryout.core.exceptions import (
    OfflineResultForbidden,
    OfflineResultNotFound,
    OfflineValidationError,
)
from jlpt_tryout.core.scoring_config import ScoringConfig, get_scoring_config
from jlpt_tryout.crud.offline_result import offline_result as crud_offline_result
from jlpt_tryout.crud.section_score import section_score as crud_section_score
from jlpt_tryout.models.offline_test_result import OfflineTestResult
from jlpt_tryout.schemas.offline_result import OfflineResult, OfflineScoreTuple
from jlpt_tryout.schemas.scoring import SectionInput, SubsectionInput
from jlpt_tryout.services import scoring_engine

logger = logging.getLogger(__name__)


class OfflineResultService:
    """Scores a paper test from self-reported (correct, total) counts per mondai
    through the same engine the online attempts use."""

    def _validate(self, config: ScoringConfig, level: JLPTLevelEnum,
                  scores: Sequence[OfflineScoreTuple]) -> List[Dict[str, Any]]:
        errors = []
        if not scores:
            errors.append({"index": None, "field": "scores", "message": "At least one mondai score is required."})
            return errors

        level_config = config.level(level)
        seen = set()
        for index, item in enumerate(scores):
            if item.total <= 0:
                errors.append({"index": index, "field": "total", "message": "Total questions must be greater than 0."})
            if item.correct < 0:
                errors.append({"index": index, "field": "correct", "message": "Correct answers cannot be negative."})
            if item.correct > item.total:
                errors.append({
                    "index": index,
                    "field": "correct",
                    "message": f"Correct answers ({item.correct}) cannot exceed total questions ({item.total}).",
                })

            section_config = level_config.section(item.section_type)
            subsection_config = section_config.subsection(item.subsection_number) if section_config else None
            if subsection_config is None:
                errors.append({
                    "index": index,
                    "field": "subsection_number",
                    "message": (
                        f"Mondai {item.subsection_number} does not exist in "
                        f"{level_config.level.value} {SECTION_DISPLAY_NAMES[item.section_type]}."
                    ),
                })
            elif item.total > 0 and item.total != subsection_config.questions_count:
                errors.append({
                    "index": index,
                    "field": "total",
                    "message": (
                        f"Mondai {item.subsection_number} of {SECTION_DISPLAY_NAMES[item.section_type]} "
                        f"has {subsection_config.questions_count} questions, got {item.total}."
                    ),
                })

            key = (item.section_type, item.subsection_number)
            if key in seen:
                errors.append({
                    "index": index,
                    "field": "subsection_number",
                    "message": (
                        f"Mondai {item.subsection_number} of "
                        f"{SECTION_DISPLAY_NAMES[item.section_type]} is listed more than once."
                    ),
                })
            seen.add(key)

        for section_type in SECTION_ORDER:
            supplied = {number for s, number in seen if s == section_type}
            section_config = level_config.section(section_type)
            if not supplied or section_config is None:
                continue
            missing = [n for n in section_config.subsection_numbers if n not in supplied]
            if missing:
                errors.append({
                    "index": None,
                    "field": "scores",
                    "message": (
                        f"{SECTION_DISPLAY_NAMES[section_type]} is missing mondai "
                        f"{', '.join(str(n) for n in missing)}."
                    ),
                })
        return errors

    def _section_inputs(self, config: ScoringConfig, level: JLPTLevelEnum,
                        scores: Sequence[OfflineScoreTuple]) -> List[SectionInput]:
        section_inputs = []
        for section_type in SECTION_ORDER:
            by_number = {s.subsection_number: s for s in scores if s.section_type == section_type}
            if not by_number:
                continue
            section_config = config.section(level, section_type)
            section_inputs.append(SectionInput(
                section_type=section_type,
                subsections=[
                    SubsectionInput(
                        subsection_number=number,
                        correct=by_number[number].correct,
                        total=by_number[number].total,
                    )
                    for number in section_config.subsection_numbers
                    if number in by_number
                ],
            ))
        return section_inputs

    def record_result(self, db: Session, owner_id: str, level: JLPTLevelEnum, scores: Sequence[OfflineScoreTuple],
                      source: Optional[str] = None, user_note: Optional[str] = None) -> OfflineTestResult:
        config = get_scoring_config()
        level = JLPTLevelEnum(level)

        errors = self._validate(config, level, scores)
        if errors:
            raise OfflineValidationError(errors)

        section_scores, verdict = scoring_engine.evaluate(config, level, self._section_inputs(config, level, scores))

        result = crud_offline_result.create(db, obj_in={
            "owner_id": owner_id,
            "level": level,
            "source": source,
            "user_note": user_note,
            "raw_inputs": [s.model_dump(mode="json") for s in scores],
            "scoring_config_version": config.version,
            "total_score": verdict.total_score,
            "is_passed": verdict.is_passed,
            "failure_reasons": [r.model_dump(mode="json") for r in verdict.failure_reasons],
        }, commit=False)
        crud_section_score.create_many(db, scores=section_scores, offline_result_id=result.id)
        db.commit()

        logger.info(
            f"Offline result {result.id} recorded: {level.value} total {verdict.total_score}, passed={verdict.is_passed}",
            extra={"offline_result_id": result.id, "owner_id": owner_id}
        )
        return crud_offline_result.get(db, id=result.id)

    def get_result(self, db: Session, result_id: int, owner_id: str) -> OfflineTestResult:
        result = crud_offline_result.get(db, id=result_id)
        if not result:
            raise OfflineResultNotFound(details={"result_id": result_id})
        if result.owner_id != owner_id:
            logger.warning(
                f"Owner mismatch on offline result {result_id}",
                extra={"result_id": result_id, "requester_id": owner_id}
            )
            raise OfflineResultForbidden(details={"result_id": result_id})
        return result

    def list_results(self, db: Session, owner_id: str, level: Optional[JLPTLevelEnum] = None,
                     skip: int = 0, limit: int = 100) -> List[OfflineTestResult]:
        return crud_offline_result.get_all_by_owner(db, owner_id=owner_id, level=level, skip=skip, limit=limit)

    def delete_result(self, db: Session, result_id: int, owner_id: str) -> OfflineResult:
        result = self.get_result(db, result_id=result_id, owner_id=owner_id)
        deleted = OfflineResult.model_validate(result)
        crud_offline_result.delete(db, id=result.id)
        logger.info(f"Offline result {result_id} deleted", extra={"offline_result_id": result_id})
        return deleted


offline_result_service = OfflineResultService()
