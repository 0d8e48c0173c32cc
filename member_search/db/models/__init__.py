"""
ORM models for the member/team domain.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .member import (  # noqa: F401
    Member,
    Team,
)
