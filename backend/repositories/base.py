# backend/repositories/base.py
import logging
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from database import Base
from schemas.common import PageResult, PaginationParams
from utils.errors import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def paginate(query: Query, pagination: PaginationParams) -> PageResult:
    """Count the filtered query, then fetch the requested slice of it."""
    total = query.order_by(None).count()
    items = query.offset(pagination.offset).limit(pagination.page_size).all()
    return PageResult(items=items, total=total, page=pagination.page, page_size=pagination.page_size)


LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """LIKE pattern matching `term` literally anywhere; use with `escape=LIKE_ESCAPE`."""
    escaped = term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", r"\%").replace("_", r"\_")
    return f"%{escaped}%"


def apply_sort(query: Query, sort_map: Dict[str, Any], sort_by: str, order: str, default: str) -> Query:
    col = sort_map.get(sort_by, sort_map[default])
    return query.order_by(col.asc() if order == "asc" else col.desc())


class BaseRepository(Generic[ModelT]):
    """Basic get/create/update/delete against a single table.

    Mutations commit immediately unless `commit=False` is passed, in which case
    they only flush and the caller's `transaction(db)` block decides the outcome.
    Persistence failures are logged and re-raised unchanged.
    """

    model: Type[ModelT]
    not_found_message = "errors.not_found"

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    @property
    def entity(self) -> str:
        return self.model.__name__

    def _finish(self, db: Session, obj: ModelT, commit: bool) -> ModelT:
        if commit:
            db.commit()
            db.refresh(obj)
        else:
            db.flush()
        return obj

    def get_by_id(self, db: Session, id: str) -> Optional[ModelT]:
        try:
            return db.get(self.model, id)
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to retrieve {self.entity} {id}: {e}")
            raise

    def create(self, db: Session, data: Dict[str, Any], *, commit: bool = True) -> ModelT:
        try:
            obj = self.model(**data)
            db.add(obj)
            self._finish(db, obj, commit)
            self.logger.info(f"{self.entity} created", extra={"entity_id": obj.id})
            return obj
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to create {self.entity}: {e}")
            if commit:
                db.rollback()
            raise

    def update(self, db: Session, id: str, data: Dict[str, Any], *, commit: bool = True) -> ModelT:
        obj = self.get_by_id(db, id)
        if obj is None:
            raise NotFoundError(self.not_found_message)
        return self.update_obj(db, obj, data, commit=commit)

    def update_obj(self, db: Session, obj: ModelT, data: Dict[str, Any], *, commit: bool = True) -> ModelT:
        columns = self.model.__table__.columns
        try:
            for key, value in data.items():
                # null for a required column means "leave unchanged"
                if value is None and key in columns and not columns[key].nullable:
                    continue
                setattr(obj, key, value)
            self._finish(db, obj, commit)
            self.logger.info(f"{self.entity} updated", extra={"entity_id": obj.id})
            return obj
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to update {self.entity} {obj.id}: {e}")
            if commit:
                db.rollback()
            raise

    def delete(self, db: Session, id: str, *, commit: bool = True) -> ModelT:
        obj = self.get_by_id(db, id)
        if obj is None:
            raise NotFoundError(self.not_found_message)
        try:
            db.delete(obj)
            if commit:
                db.commit()
            else:
                db.flush()
            self.logger.info(f"{self.entity} deleted", extra={"entity_id": id})
            return obj
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to delete {self.entity} {id}: {e}")
            if commit:
                db.rollback()
            raise
