from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from jlpt_tryout.core.constants import JLPTLevelEnum, SectionTypeEnum
from jlpt_tryout.schemas.response import APIResponse
from jlpt_tryout.schemas.scoring import LevelBlueprint
from jlpt_tryout.schemas.section_submission import SectionSubmitIn
from jlpt_tryout.schemas.test_attempt import (
    SectionSubmitResult,
    TestAttempt,
    TestAttemptCreate,
    TestAttemptCreated,
    TestAttemptDetails,
    TestAttemptResults,
)
from jlpt_tryout.schemas.user_answer import UserAnswer, UserAnswerIn
from jlpt_tryout.services.test_attempt import test_attempt_service
from jlpt_tryout.utils import deps

router = APIRouter()


@router.get("/blueprints/{level}", response_model=APIResponse[LevelBlueprint])
async def get_blueprint(level: JLPTLevelEnum):
    blueprint = test_attempt_service.get_blueprint(level)
    return APIResponse(message="Blueprint retrieved successfully", data=blueprint)


@router.post("/attempts", response_model=APIResponse[TestAttemptCreated], status_code=status.HTTP_201_CREATED)
async def create_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_in: TestAttemptCreate,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    attempt = test_attempt_service.create_attempt(
        db, owner_id=owner_id, level=attempt_in.level, mode=attempt_in.mode, section=attempt_in.section
    )
    return APIResponse(message="Test attempt started successfully", data=attempt)


@router.get("/attempts", response_model=APIResponse[List[TestAttempt]])
async def get_user_attempts(
    db: Session = Depends(deps.get_db),
    owner_id: str = Depends(deps.get_current_owner_id),
    skip: int = 0,
    limit: int = Query(100, le=100),
    level: Optional[JLPTLevelEnum] = Query(None)
):
    attempts = test_attempt_service.get_user_attempts(db, owner_id=owner_id, level=level, skip=skip, limit=limit)
    return APIResponse(message="Test attempts retrieved successfully", data=[TestAttempt.model_validate(a) for a in attempts])


@router.get("/attempts/{attempt_id}", response_model=APIResponse[TestAttemptDetails])
async def get_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    attempt = test_attempt_service.get_attempt(db, attempt_id=attempt_id, requester_id=owner_id)
    return APIResponse(message="Test attempt retrieved successfully", data=attempt)


@router.put("/attempts/{attempt_id}/answers", response_model=APIResponse[UserAnswer])
async def record_answer(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    answer_in: UserAnswerIn,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    user_answer = test_attempt_service.record_answer(
        db,
        attempt_id=attempt_id,
        question_id=answer_in.question_id,
        selected_answer=answer_in.selected_answer,
        requester_id=owner_id
    )
    return APIResponse(message="Answer saved successfully", data=UserAnswer.model_validate(user_answer))


@router.post("/attempts/{attempt_id}/sections/{section_type}/submit", response_model=APIResponse[SectionSubmitResult])
async def submit_section(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    section_type: SectionTypeEnum,
    submit_in: SectionSubmitIn,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    result = test_attempt_service.submit_and_try_complete(
        db,
        attempt_id=attempt_id,
        section_type=section_type,
        time_spent_seconds=submit_in.time_spent_seconds,
        requester_id=owner_id,
        triggered_by_timer=submit_in.triggered_by_timer
    )
    message = "Section was already submitted" if result.already_submitted else "Section submitted successfully"
    return APIResponse(message=message, data=result)


@router.post("/attempts/{attempt_id}/complete", response_model=APIResponse[TestAttempt])
async def complete_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    attempt = test_attempt_service.complete_attempt(db, attempt_id=attempt_id, requester_id=owner_id)
    return APIResponse(message="Test attempt status evaluated", data=TestAttempt.model_validate(attempt))


@router.get("/attempts/{attempt_id}/results", response_model=APIResponse[TestAttemptResults])
async def get_results(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    results = test_attempt_service.get_results(db, attempt_id=attempt_id, requester_id=owner_id)
    return APIResponse(message="Test results retrieved successfully", data=results)
