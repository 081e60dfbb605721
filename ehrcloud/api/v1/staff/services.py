"""
Business services for the Staff module.

Creating a staff member writes two rows (user account + staff profile).
Both are flushed in the request session, so the request transaction
commits them together or rolls both back.
"""
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import Select, or_, select

from ehrcloud.core.exceptions import ConflictError
from ehrcloud.models.care_team.staff import Staff
from ehrcloud.models.enums import StaffStatus
from ehrcloud.services.scoping import TenantScopedService

from ehrcloud.api.v1.staff.schemas import StaffCreate, StaffFilters, StaffUpdate
from ehrcloud.api.v1.user.schemas import UserCreate
from ehrcloud.api.v1.user.services import UserService

# Profile fields mirrored on the sign-in account
ACCOUNT_FIELDS = ("first_name", "last_name", "phone")


class StaffService(TenantScopedService[Staff]):
    model = Staff
    not_found_message = "Staff member not found"
    sortable_fields = frozenset({"created_at", "employee_id", "last_name", "department", "joining_date"})

    def _apply_filters(self, query: Select, filters: Optional[StaffFilters]) -> Select:
        if filters is None:
            return query
        if filters.department:
            query = query.where(Staff.department == filters.department)
        if filters.position:
            query = query.where(Staff.position.ilike(f"%{filters.position}%"))
        if filters.status:
            query = query.where(Staff.status == filters.status)
        if filters.search:
            term = f"%{filters.search.strip()}%"
            query = query.where(or_(
                Staff.employee_id.ilike(term),
                Staff.first_name.ilike(term),
                Staff.last_name.ilike(term),
            ))
        return query

    def _ensure_unique_employee_id(self, employee_id: str) -> None:
        exists = self.db.scalar(
            self._base_query().with_only_columns(Staff.id).where(Staff.employee_id == employee_id)
        )
        if exists is not None:
            raise ConflictError("Employee ID already exists")

    def create_staff(self, data: StaffCreate) -> Staff:
        """
        Create the account, then the profile, in the caller's transaction.

        Raises:
            ConflictError: duplicate employee ID or email
            AuthorizationError: plan user limit reached
        """
        self._ensure_unique_employee_id(data.employee_id)

        user = UserService(self.db, self.tenant_id).create_user(UserCreate(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            role=data.account_role,
        ))

        values = data.model_dump(exclude={"password", "account_role"})
        values["email"] = user.email
        return self.create(values, user_id=user.id)

    def update_staff(self, staff_id: int, data: StaffUpdate) -> Staff:
        staff = self.get_by_id(staff_id)
        changes = data.model_dump(exclude_unset=True)

        for field in ACCOUNT_FIELDS:
            if field in changes:
                setattr(staff.user, field, changes[field])
        if "status" in changes:
            staff.user.is_active = changes["status"] != StaffStatus.INACTIVE

        return self.apply_changes(staff, changes)

    def deactivate(self, staff_id: int) -> Staff:
        """DELETE keeps the row: the profile goes inactive and the account is disabled."""
        staff = self.get_by_id(staff_id)
        staff.status = StaffStatus.INACTIVE
        staff.user.is_active = False
        self.db.flush()
        return staff

    def group_by_department(self) -> List[Dict]:
        """Active staff grouped by department, departments in alphabetical order."""
        query = (
            self._base_query()
            .where(Staff.status == StaffStatus.ACTIVE)
            .order_by(Staff.department, Staff.last_name, Staff.first_name)
        )
        groups: "OrderedDict[str, List[Staff]]" = OrderedDict()
        for member in self.db.execute(query).scalars().unique().all():
            groups.setdefault(member.department, []).append(member)
        return [
            {"department": department, "count": len(members), "staff": members}
            for department, members in groups.items()
        ]
