from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from jlpt_tryout.core.constants import JLPTLevelEnum
from jlpt_tryout.schemas.offline_result import OfflineResult, OfflineResultCreate
from jlpt_tryout.schemas.response import APIResponse
from jlpt_tryout.services.offline_result import offline_result_service
from jlpt_tryout.utils import deps

router = APIRouter()


@router.post("/results", response_model=APIResponse[OfflineResult], status_code=status.HTTP_201_CREATED)
async def record_result(
    *,
    db: Session = Depends(deps.get_db),
    result_in: OfflineResultCreate,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    result = offline_result_service.record_result(
        db,
        owner_id=owner_id,
        level=result_in.level,
        scores=result_in.scores,
        source=result_in.source,
        user_note=result_in.user_note
    )
    return APIResponse(message="Offline result recorded successfully", data=OfflineResult.model_validate(result))


@router.get("/results", response_model=APIResponse[List[OfflineResult]])
async def list_results(
    db: Session = Depends(deps.get_db),
    owner_id: str = Depends(deps.get_current_owner_id),
    skip: int = 0,
    limit: int = Query(100, le=100),
    level: Optional[JLPTLevelEnum] = Query(None)
):
    results = offline_result_service.list_results(db, owner_id=owner_id, level=level, skip=skip, limit=limit)
    return APIResponse(message="Offline results retrieved successfully", data=[OfflineResult.model_validate(r) for r in results])


@router.get("/results/{result_id}", response_model=APIResponse[OfflineResult])
async def get_result(
    *,
    db: Session = Depends(deps.get_db),
    result_id: int,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    result = offline_result_service.get_result(db, result_id=result_id, owner_id=owner_id)
    return APIResponse(message="Offline result retrieved successfully", data=OfflineResult.model_validate(result))


@router.delete("/results/{result_id}", response_model=APIResponse[OfflineResult])
async def delete_result(
    *,
    db: Session = Depends(deps.get_db),
    result_id: int,
    owner_id: str = Depends(deps.get_current_owner_id)
):
    deleted = offline_result_service.delete_result(db, result_id=result_id, owner_id=owner_id)
    return APIResponse(message="Offline result deleted successfully", data=deleted)
