# backend/repositories/logs.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.log import Log
from repositories.base import LIKE_ESCAPE, BaseRepository, contains_pattern, paginate
from schemas.common import PageResult, PaginationParams


@dataclass
class LogFilters:
    action: Optional[str] = None
    resource: Optional[str] = None
    user_id: Optional[str] = None
    status: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class LogRepository(BaseRepository[Log]):
    model = Log

    def find_many(self, db: Session, pagination: PaginationParams, filters: Optional[LogFilters] = None) -> PageResult[Log]:
        filters = filters or LogFilters()
        try:
            query = db.query(Log)

            if filters.action:
                query = query.filter(Log.action.ilike(contains_pattern(filters.action), escape=LIKE_ESCAPE))
            if filters.resource:
                query = query.filter(Log.resource.ilike(contains_pattern(filters.resource), escape=LIKE_ESCAPE))
            if filters.user_id:
                query = query.filter(Log.user_id == filters.user_id)
            if filters.status:
                query = query.filter(Log.status == filters.status)
            if filters.date_from:
                query = query.filter(Log.ts >= filters.date_from)
            if filters.date_to:
                query = query.filter(Log.ts <= filters.date_to)

            # Newest first
            query = query.order_by(Log.ts.desc(), Log.id.desc())
            return paginate(query, pagination)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to find logs: {e}")
            raise
