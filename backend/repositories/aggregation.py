# backend/repositories/aggregation.py
import enum
from typing import Dict, Iterable, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

E = TypeVar("E", bound=enum.Enum)


def count_by_category(db: Session, column, enum_type: Type[E], *criteria, joins: Iterable = ()) -> Dict[E, int]:
    """
    Count rows per value of an enum column.

    Runs a single GROUP BY query and returns a map holding every member of
    `enum_type`, so members without rows are reported as 0 rather than missing.
    `criteria` are extra filter expressions, `joins` are entities/targets joined
    before filtering (e.g. to scope applications by the project's organization).
    """
    query = db.query(column, func.count()).select_from(column.class_)
    for target in joins:
        query = query.join(target)
    if criteria:
        query = query.filter(*criteria)
    rows = query.group_by(column).all()

    result = {member: 0 for member in enum_type}
    for category, count in rows:
        if category is None:
            continue
        result[enum_type(category)] = count
    return result
