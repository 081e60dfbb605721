"""
EHR Cloud API v1.

Usage:
    from ehrcloud.api.v1.router import api_router

    app = FastAPI()
    app.include_router(api_router)
"""
from .dependencies import PaginationParams, Pagination

__all__ = [
    "PaginationParams",
    "Pagination",
]
