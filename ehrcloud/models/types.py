"""
Custom SQLAlchemy types shared by the models.

Types work on both PostgreSQL (production) and SQLite (tests).
"""

from enum import Enum
from typing import Type

from sqlalchemy import JSON, Enum as SQLEnum, Text
from sqlalchemy.dialects.postgresql import JSONB


# ============================================================================
# JSONBCompatible - JSON column, JSONB on PostgreSQL
# ============================================================================
#
# Usage:
#     data: Mapped[dict] = mapped_column(JSONBCompatible, nullable=False, default=dict)
#
JSONBCompatible = JSON().with_variant(JSONB(astext_type=Text()), "postgresql")


def enum_column(enum_cls: Type[Enum], name: str) -> SQLEnum:
    """
    String-backed enum type storing the enum *values* ("No-Show"),
    not the member names ("NO_SHOW").
    """
    return SQLEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
