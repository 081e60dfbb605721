from ehrcloud.models.tenants.subscription_plan import INITIAL_PLANS, SubscriptionPlan
from ehrcloud.models.tenants.tenant import Tenant

__all__ = ["Tenant", "SubscriptionPlan", "INITIAL_PLANS"]
