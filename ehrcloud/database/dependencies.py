"""
FastAPI database dependency.

Usage:
    @router.get("/patients")
    def list_patients(db: Session = Depends(get_db)):
        ...
"""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from ehrcloud.core.context import AppContext, get_app_context


def get_db(context: AppContext = Depends(get_app_context)) -> Generator[Session, None, None]:
    """
    One session per request.

    Commits when the handler succeeds, rolls back on any exception (so the
    several writes of one request succeed or fail together) and always
    closes. The tenant filter is switched on later by the auth dependency,
    once the tenant is known.
    """
    db = context.session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
