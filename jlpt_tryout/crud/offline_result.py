from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from jlpt_tryout.core.constants import JLPTLevelEnum
from jlpt_tryout.crud.base import CRUDBase
from jlpt_tryout.models.offline_test_result import OfflineTestResult
from jlpt_tryout.schemas.offline_result import OfflineResultCreate

class CRUDOfflineResult(CRUDBase[OfflineTestResult, OfflineResultCreate, OfflineResultCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(OfflineTestResult).options(
            selectinload(OfflineTestResult.section_scores)
        )

    def get(self, db: Session, id: int) -> Optional[OfflineTestResult]:
        return self._query_with_relationships(db).filter(OfflineTestResult.id == id).first()

    def get_all_by_owner(self, db: Session, owner_id: str, level: Optional[JLPTLevelEnum] = None,
                         skip: int = 0, limit: int = 100) -> List[OfflineTestResult]:
        query = self._query_with_relationships(db).filter(OfflineTestResult.owner_id == owner_id)
        if level:
            query = query.filter(OfflineTestResult.level == level)
        return (
            query
            .order_by(OfflineTestResult.created_at.desc(), OfflineTestResult.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )


offline_result = CRUDOfflineResult(OfflineTestResult)
