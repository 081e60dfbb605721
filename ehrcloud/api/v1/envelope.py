# ehrcloud/api/v1/envelope.py
"""
JSON envelope returned by every endpoint:

    {"success": true, "message": "...", "data": ..., "pagination": {...}}

Members that are not set are left out of the payload.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from ehrcloud.api.v1.dependencies import PaginationParams

DataT = TypeVar("DataT")


class FieldError(BaseModel):
    field: str
    message: str


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    pages: int
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    @classmethod
    def build(cls, total: int, params: PaginationParams) -> "PaginationMeta":
        pages = params.pages_for(total)
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            pages=pages,
            has_next=params.page < pages,
            has_prev=params.page > 1,
        )


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None
    errors: Optional[List[FieldError]] = None
    pagination: Optional[PaginationMeta] = None

    @model_serializer(mode="wrap")
    def _drop_unset_members(self, handler) -> Dict[str, Any]:
        payload = handler(self)
        return {key: value for key, value in payload.items() if value is not None}


def ok(data: Any = None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(success=True, data=data, message=message)


def paginated(items: List[Any], total: int, params: PaginationParams, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(
        success=True,
        data=items,
        message=message,
        pagination=PaginationMeta.build(total, params),
    )
