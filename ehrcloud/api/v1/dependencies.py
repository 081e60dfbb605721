# ehrcloud/api/v1/dependencies.py
"""
Shared dependencies of API v1.

- PaginationParams: page/limit/sort query parameters for every list route
- reject_null: validator refusing null for required columns in update bodies

Authentication and tenant dependencies live in ehrcloud/core/auth/.
"""

import math
from typing import Annotated, Any, Optional

from fastapi import Depends, Query

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class PaginationParams:
    """
    Standard pagination parameters.

    Out-of-range values are normalised instead of rejected: page <= 0 reads
    the first page, limit is clamped to 1..MAX_PAGE_SIZE.

    Usage:
        @router.get("/patients")
        def list_patients(pagination: Pagination):
            # pagination.page, pagination.limit, pagination.offset
            ...
    """

    def __init__(
            self,
            page: Annotated[int, Query(description="Page number (starts at 1)")] = 1,
            limit: Annotated[int, Query(description="Items per page")] = DEFAULT_PAGE_SIZE,
            sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
            sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "desc",
    ):
        self.page = page if page >= 1 else 1
        if limit < 1:
            limit = DEFAULT_PAGE_SIZE
        self.limit = min(limit, MAX_PAGE_SIZE)
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def offset(self) -> int:
        """Rows to skip: (page - 1) * limit."""
        return (self.page - 1) * self.limit

    def pages_for(self, total: int) -> int:
        return math.ceil(total / self.limit) if total > 0 else 0


# =============================================================================
# TYPE ALIASES
# =============================================================================

Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# UPDATE BODIES
# =============================================================================

def reject_null(v: Any) -> Any:
    """
    Field validator for partial updates.

    Omitted fields keep their value; a field sent as null would clear a
    NOT NULL column, so it is refused with a 400 on that field.
    """
    if v is None:
        raise ValueError("may not be null")
    return v
