# backend/schemas/common.py
import math
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Uniform response envelope returned by every endpoint
class ActionResponse(BaseModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None


def ok(data: Any = None) -> dict:
    return {"success": True, "data": data, "error": None}


# Requested page number and size
class PaginationParams(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# Page of ORM rows produced by the repositories (a plain class, FastAPI runs asdict() on dataclasses)
class PageResult(Generic[T]):
    def __init__(self, items: List[T], total: int, page: int, page_size: int):
        self.items = items
        self.total = total
        self.page = page
        self.page_size = page_size
        self.total_pages = math.ceil(total / page_size) if page_size else 0


# Serialized page returned to the client
class Page(ORMBase, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int
