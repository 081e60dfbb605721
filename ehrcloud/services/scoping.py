"""
Tenant-scoped data access.

TenantScopedService is the base of every hospital-owned resource service.
All of its queries start from _base_query(), which filters on the tenant of
the request; a record that belongs to another hospital is therefore
reported exactly like a record that does not exist.

Usage:
    class PatientService(TenantScopedService[Patient]):
        model = Patient
        not_found_message = "Patient not found"

    service = PatientService(db, ctx.tenant_id)
    patient = service.create(data.model_dump(), created_by=ctx.user_id)
"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import PaginationParams
from ehrcloud.core.exceptions import NotFoundError
from ehrcloud.models.mixins import TenantScopedMixin

ModelT = TypeVar("ModelT", bound=TenantScopedMixin)
OtherT = TypeVar("OtherT", bound=TenantScopedMixin)

# Never copied from client input onto a row
PROTECTED_FIELDS = frozenset({"id", "tenant_id", "created_at", "updated_at", "created_by"})


class TenantScopedService(Generic[ModelT]):
    model: Type[ModelT]
    not_found_message: str = "Resource not found"
    default_sort: str = "created_at"
    # Columns a client may pass as ?sort_by=
    sortable_fields: frozenset = frozenset({"created_at", "updated_at"})

    def __init__(self, db: Session, tenant_id: int):
        """
        Args:
            db: SQLAlchemy session of the request
            tenant_id: Tenant resolved for the request
        """
        self.db = db
        self.tenant_id = tenant_id

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _base_query(self) -> Select:
        """Every query of the service starts here."""
        return select(self.model).where(self.model.tenant_id == self.tenant_id)

    def _apply_filters(self, query: Select, filters: Optional[Any]) -> Select:
        """Hook for subclasses; filters is the module's Filters schema."""
        return query

    def _order_by(self, query: Select, pagination: PaginationParams) -> Select:
        sort_by = pagination.sort_by if pagination.sort_by in self.sortable_fields else self.default_sort
        column = getattr(self.model, sort_by)
        return query.order_by(column.desc() if pagination.sort_order == "desc" else column.asc(), self.model.id)

    def get_all(
            self,
            pagination: PaginationParams,
            filters: Optional[Any] = None,
    ) -> Tuple[List[ModelT], int]:
        """
        One page of the tenant's records plus the total matching count.
        """
        query = self._apply_filters(self._base_query(), filters)

        count_query = select(func.count()).select_from(query.subquery())
        total = self.db.execute(count_query).scalar() or 0

        query = self._order_by(query, pagination)
        query = query.offset(pagination.offset).limit(pagination.limit)
        items = self.db.execute(query).scalars().unique().all()
        return list(items), total

    def find(self, obj_id: int) -> Optional[ModelT]:
        return self.db.execute(
            self._base_query().where(self.model.id == obj_id)
        ).scalars().first()

    def get_by_id(self, obj_id: int) -> ModelT:
        """
        Raises:
            NotFoundError: missing, or owned by another tenant
        """
        obj = self.find(obj_id)
        if obj is None:
            raise NotFoundError(self.not_found_message)
        return obj

    def get_related(self, model: Type[OtherT], obj_id: int, message: str) -> OtherT:
        """
        Fetch a referenced record (patient_id, doctor_id...) through the same
        tenant scope, so foreign references cannot cross hospitals.
        """
        obj = self.db.execute(
            select(model).where(model.tenant_id == self.tenant_id, model.id == obj_id)
        ).scalars().first()
        if obj is None:
            raise NotFoundError(message)
        return obj

    def count(self) -> int:
        query = select(func.count()).select_from(self._base_query().subquery())
        return self.db.execute(query).scalar() or 0

    # =========================================================================
    # WRITES
    # =========================================================================

    @staticmethod
    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}

    def create(self, data: Mapping[str, Any], **extra: Any) -> ModelT:
        """
        Insert a record for the current tenant.

        tenant_id always comes from the request context, never from data.
        """
        values = self._clean(data)
        values.update(extra)
        values.pop("tenant_id", None)

        obj = self.model(**values)
        obj.tenant_id = self.tenant_id
        self.db.add(obj)
        self.db.flush()
        self.db.refresh(obj)
        return obj

    def update(self, obj_id: int, data: Mapping[str, Any]) -> ModelT:
        obj = self.get_by_id(obj_id)
        return self.apply_changes(obj, data)

    def apply_changes(self, obj: ModelT, data: Mapping[str, Any]) -> ModelT:
        for field, value in self._clean(data).items():
            setattr(obj, field, value)
        self.db.flush()
        self.db.refresh(obj)
        return obj

    def delete(self, obj_id: int) -> None:
        obj = self.get_by_id(obj_id)
        self.db.delete(obj)
        self.db.flush()
