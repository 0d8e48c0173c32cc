from __future__ import annotations

from typing import ClassVar, Tuple

from sqlalchemy import Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Constraint and index names Alembic can reproduce on every backend.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Declarative base for members and teams.

    Subclasses list the attributes worth showing in ``repr`` via ``_repr_attrs``;
    the primary key is always shown first.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    _repr_attrs: ClassVar[Tuple[str, ...]] = ()

    def __repr__(self) -> str:
        # Read from __dict__ so repr never triggers a load on an expired instance.
        state = self.__dict__
        parts = [
            f"{name}={state.get(name)!r}" for name in ("id", *self._repr_attrs) if name in state
        ]
        return f"{type(self).__name__}({', '.join(parts)})"


class IntPkMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
