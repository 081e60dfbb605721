"""
FastAPI routes for the User module (hospital owner only).

Endpoints:
- GET   /users        : accounts of the hospital
- GET   /users/{id}   : one account
- POST  /users        : create an account
- PATCH /users/{id}   : change names, role or active flag
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.user.schemas import UserCreate, UserFilters, UserResponse, UserUpdate
from ehrcloud.api.v1.user.services import UserService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import UserRole

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ApiResponse[List[UserResponse]])
def list_users(
    pagination: Pagination,
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    ctx: TenantContext = Depends(require_permission(Permission.USERS_MANAGE)),
    db: Session = Depends(get_db),
):
    filters = UserFilters(role=role, is_active=is_active, search=search)
    items, total = UserService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([UserResponse.model_validate(u) for u in items], total, pagination)


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.USERS_MANAGE)),
    db: Session = Depends(get_db),
):
    return ok(UserResponse.model_validate(UserService(db, ctx.tenant_id).get_by_id(user_id)))


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    ctx: TenantContext = Depends(require_permission(Permission.USERS_MANAGE)),
    db: Session = Depends(get_db),
):
    user = UserService(db, ctx.tenant_id).create_user(data)
    return ok(UserResponse.model_validate(user), "User created successfully")


@router.patch("/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(
    user_id: int,
    data: UserUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.USERS_MANAGE)),
    db: Session = Depends(get_db),
):
    user = UserService(db, ctx.tenant_id).update_user(user_id, data, acting_user_id=ctx.user_id)
    return ok(UserResponse.model_validate(user), "User updated successfully")
