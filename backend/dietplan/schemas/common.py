from datetime import datetime
from math import ceil
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def build(cls, items, page: int, size: int, total: int, item_schema=None):
        if item_schema is not None:
            items = [item_schema.model_validate(i) for i in items]
        return cls(
            content=items,
            page=page,
            size=size,
            total_elements=total,
            total_pages=ceil(total / size) if size else 0,
        )


class ErrorField(BaseModel):
    field: Optional[str] = None
    message: str


class RequestError(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    error_code: str = "400 BAD_REQUEST"
    error_message: str = "Request Validation Failed"
    errors: List[ErrorField] = []


class DatabaseError(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    error_code: str = "500 INTERNAL_SERVER_ERROR"
    error_message: str = "Database Query Failed"
    errors: List[str] = []
