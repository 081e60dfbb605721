"""
Business services for the User module.

MULTI-TENANT: users carry a nullable tenant_id (the platform super admin
has none), so they are not a TenantScopedMixin model; UserService applies
the tenant filter itself in _base_query().
"""
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import PaginationParams
from ehrcloud.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ehrcloud.core.security.hashing import hash_password
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.models.user.user import User

from ehrcloud.api.v1.user.schemas import UserCreate, UserFilters, UserUpdate


class UserService:
    """Accounts of one hospital."""

    def __init__(self, db: Session, tenant_id: int):
        self.db = db
        self.tenant_id = tenant_id

    def _base_query(self):
        return select(User).where(User.tenant_id == self.tenant_id)

    def get_all(
            self,
            pagination: PaginationParams,
            filters: Optional[UserFilters] = None,
    ) -> Tuple[List[User], int]:
        query = self._base_query()
        if filters:
            if filters.role:
                query = query.where(User.role == filters.role)
            if filters.is_active is not None:
                query = query.where(User.is_active == filters.is_active)
            if filters.search:
                term = f"%{filters.search.strip()}%"
                query = query.where(or_(
                    User.first_name.ilike(term),
                    User.last_name.ilike(term),
                    User.email.ilike(term),
                ))

        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar() or 0
        query = query.order_by(User.last_name, User.first_name, User.id)
        query = query.offset(pagination.offset).limit(pagination.limit)
        return list(self.db.execute(query).scalars().all()), total

    def get_by_id(self, user_id: int) -> User:
        user = self.db.scalar(self._base_query().where(User.id == user_id))
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.scalar(self._base_query().where(func.lower(User.email) == email.lower()))

    def count(self) -> int:
        return self.db.execute(
            select(func.count()).select_from(self._base_query().subquery())
        ).scalar() or 0

    def create_user(self, data: UserCreate) -> User:
        """
        Raises:
            ConflictError: email already used in this hospital
            AuthorizationError: plan user limit reached
        """
        if self.get_by_email(data.email) is not None:
            raise ConflictError("A user with this email already exists")

        tenant = self.db.get(Tenant, self.tenant_id)
        if tenant is not None and tenant.max_users is not None and self.count() >= tenant.max_users:
            raise AuthorizationError("User limit reached for the hospital's subscription plan")

        user = User(
            tenant_id=self.tenant_id,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            phone=data.phone,
            role=data.role,
            is_active=True,
        )
        self.db.add(user)
        self.db.flush()
        self.db.refresh(user)
        return user

    def update_user(self, user_id: int, data: UserUpdate, acting_user_id: int) -> User:
        user = self.get_by_id(user_id)
        changes = data.model_dump(exclude_unset=True)

        if user.id == acting_user_id:
            if changes.get("is_active") is False:
                raise AuthorizationError("You cannot deactivate your own account")
            if "role" in changes and changes["role"] != user.role:
                raise AuthorizationError("You cannot change your own role")

        for field, value in changes.items():
            setattr(user, field, value)
        self.db.flush()
        self.db.refresh(user)
        return user
