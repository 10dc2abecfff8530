from pydantic import BaseModel
from typing import Optional, Any


class PageInfo(BaseModel):
    """
    Pagination metadata returned alongside a filtered page.
    """
    currentPage: int
    totalPages: int
    totalCount: int
    hasNextPage: bool
    hasPrevPage: bool


class ApiResponse(BaseModel):
    """
    Standard success response structure.
    """
    success: bool = True
    message: str
    data: Optional[Any] = None
    count: Optional[int] = None
    pagination: Optional[PageInfo] = None


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    message: str
    error: Optional[str] = None
    code: str
    data: Optional[Any] = None
    details: Optional[Any] = None
    pagination: Optional[PageInfo] = None
