"""
Database initialisation for EHR Cloud.

Creates the tables, seeds the subscription plan catalogue and, when
SUPER_ADMIN_EMAIL and SUPER_ADMIN_PASSWORD are set, the platform super
admin account. Every step is idempotent.

Usage:
    python -m ehrcloud.database.init_db
    python -m ehrcloud.database.init_db --drop
"""

import logging
import sys
from typing import List, Optional

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from ehrcloud.core.config import Settings, get_settings
from ehrcloud.core.logging import configure_logging
from ehrcloud.core.security.hashing import hash_password
from ehrcloud.database.base_class import Base
from ehrcloud.database.session import (
    check_database_connection,
    create_db_engine,
    create_session_factory,
    db_session,
)
from ehrcloud.models import INITIAL_PLANS, SubscriptionPlan, User, UserRole

logger = logging.getLogger(__name__)


# =============================================================================
# 1. TABLES
# =============================================================================

def create_all_tables(engine: Engine) -> None:
    """Create every table registered on Base.metadata."""
    Base.metadata.create_all(bind=engine)
    logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


def drop_all_tables(engine: Engine) -> None:
    Base.metadata.drop_all(bind=engine)
    logger.warning("All tables dropped")


# =============================================================================
# 2. SUBSCRIPTION PLANS
# =============================================================================

def init_plans(db: Session) -> List[SubscriptionPlan]:
    """Insert the plans of INITIAL_PLANS that do not exist yet."""
    plans = []
    created = 0
    for plan_data in INITIAL_PLANS:
        plan = db.scalar(select(SubscriptionPlan).where(SubscriptionPlan.code == plan_data["code"]))
        if plan is None:
            plan = SubscriptionPlan(**plan_data)
            db.add(plan)
            created += 1
        plans.append(plan)
    db.flush()
    logger.info("%d subscription plans (%d new)", len(plans), created)
    return plans


# =============================================================================
# 3. PLATFORM SUPER ADMIN
# =============================================================================

def init_super_admin(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """
    Create the platform operator (tenant_id NULL) if it does not exist.

    Skipped when no credentials are configured.
    """
    if not email or not password:
        logger.info("SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD not set, no super admin created")
        return None

    existing = db.scalar(
        select(User).where(User.tenant_id.is_(None), func.lower(User.email) == email.lower())
    )
    if existing is not None:
        logger.info("Super admin %s already exists", existing.email)
        return existing

    admin = User(
        tenant_id=None,
        email=email.lower(),
        password_hash=hash_password(password),
        first_name="Platform",
        last_name="Administrator",
        role=UserRole.SUPER_ADMIN,
        is_active=True,
    )
    db.add(admin)
    db.flush()
    logger.info("Super admin %s created", admin.email)
    return admin


# =============================================================================
# 4. ORCHESTRATION
# =============================================================================

def seed_database(db: Session, settings: Settings) -> None:
    init_plans(db)
    init_super_admin(db, settings.SUPER_ADMIN_EMAIL, settings.SUPER_ADMIN_PASSWORD)


def init_database(settings: Settings, drop_existing: bool = False) -> bool:
    """
    Full initialisation.

    Returns:
        True on success, False otherwise (the error is logged)
    """
    engine = create_db_engine(settings)
    try:
        if not check_database_connection(engine):
            return False
        if drop_existing:
            drop_all_tables(engine)
        create_all_tables(engine)
        with db_session(create_session_factory(engine)) as db:
            seed_database(db, settings)
        logger.info("Database initialised")
        return True
    except Exception:
        logger.exception("Database initialisation failed")
        return False
    finally:
        engine.dispose()


# =============================================================================
# 5. CLI
# =============================================================================

def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Initialise the EHR Cloud database")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables first (destroys all data)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    if args.drop and settings.is_production:
        logger.error("--drop is refused in production")
        sys.exit(1)

    sys.exit(0 if init_database(settings, drop_existing=args.drop) else 1)


if __name__ == "__main__":
    main()
