"""
Shared schemas
"""
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar('T')


class ErrorResponse(BaseModel):
    """Error envelope"""
    ok: bool = Field(default=False)
    error: str = Field(..., description="Human-readable error")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list"""
    page: int = Field(..., description="Page number")
    size: int = Field(..., description="Page size")
    total: int = Field(..., description="Total rows")
    items: List[T] = Field(..., description="Rows")
