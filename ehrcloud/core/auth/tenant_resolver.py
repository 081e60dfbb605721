"""
Tenant resolution.

Every hospital-facing request names its tenant, either through the tenant
header (TENANT_HEADER) or through the leftmost label of the Host:

    h1.ehr.example.com  ->  subdomain "h1"   (BASE_DOMAIN = "ehr.example.com")

Resolution happens before authentication, so an unknown hospital answers
404 whatever credential the caller sends.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from ehrcloud.core.config import Settings
from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.core.exceptions import AuthorizationError, NotFoundError
from ehrcloud.core.tenant_context import set_tenant_context
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import TenantStatus
from ehrcloud.models.tenants.tenant import Tenant

logger = logging.getLogger(__name__)

# Labels that can never name a hospital
RESERVED_SUBDOMAINS = frozenset({"www", "api", "app", "admin", "platform", "mail", "static"})


def extract_subdomain(host: Optional[str], base_domain: str) -> Optional[str]:
    """
    Return the single label in front of base_domain, or None.

    >>> extract_subdomain("h1.ehr.test:8000", "ehr.test")
    'h1'
    >>> extract_subdomain("a.b.ehr.test", "ehr.test") is None
    True
    """
    if not host:
        return None
    hostname = host.strip().lower()
    if hostname.startswith("["):
        # IPv6 literal, never a tenant host
        return None
    hostname = hostname.split(":", 1)[0].rstrip(".")

    suffix = f".{base_domain}"
    if not hostname.endswith(suffix):
        return None
    label = hostname[: -len(suffix)]
    if not label or "." in label:
        return None
    return label


def tenant_token_from_request(request: Request, settings: Settings) -> Optional[str]:
    """Header first, then Host."""
    header_value = request.headers.get(settings.TENANT_HEADER)
    if header_value and header_value.strip():
        return header_value.strip().lower()
    return extract_subdomain(request.headers.get("host"), settings.BASE_DOMAIN)


def check_tenant_access(tenant: Tenant) -> None:
    """
    Refuse requests for hospitals that may not use the platform.

    Raises:
        AuthorizationError: suspended, cancelled or expired trial
    """
    if tenant.status == TenantStatus.SUSPENDED:
        raise AuthorizationError("Hospital account is suspended")
    if tenant.status == TenantStatus.CANCELLED:
        raise AuthorizationError("Hospital account is cancelled")
    if tenant.trial_expired:
        raise AuthorizationError("Hospital trial period has expired")


def find_tenant_by_subdomain(db: Session, subdomain: str) -> Optional[Tenant]:
    return db.scalar(select(Tenant).where(Tenant.subdomain == subdomain))


def resolve_tenant(
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
) -> Tenant:
    """
    Dependency resolving the tenant of the current request.

    Raises:
        NotFoundError 404: no tenant named, or unknown subdomain
        AuthorizationError 403: tenant not allowed to use the platform
    """
    subdomain = tenant_token_from_request(request, context.settings)
    if subdomain is None or subdomain in RESERVED_SUBDOMAINS:
        raise NotFoundError("Hospital not found")

    tenant = find_tenant_by_subdomain(db, subdomain)
    if tenant is None:
        logger.info("Unknown hospital subdomain '%s'", subdomain)
        raise NotFoundError("Hospital not found")

    try:
        check_tenant_access(tenant)
    except AuthorizationError as e:
        logger.warning("Request refused for tenant %s: %s", tenant.id, e.message)
        raise

    request.state.tenant_id = tenant.id
    request.state.tenant_status = tenant.status.value
    set_tenant_context(tenant.id)
    return tenant
