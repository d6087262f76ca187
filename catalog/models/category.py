"""
Catalog API: Category SQLAlchemy Model
========================================

What:  ORM model for the `categories` table.
Who:   SQL repositories (CRUD) and catalog.migrations (schema creation).

Table Design:
    - BIGINT primary key from the database sequence. sqlite_autoincrement
      makes SQLite behave like a PostgreSQL BIGSERIAL and never hand out an id
      that was used by a deleted row.
    - name is UNIQUE; the repository pre-checks it for a readable error, the
      constraint stays the source of truth under concurrent writers.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String, Text, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base, IdType

if TYPE_CHECKING:
    from catalog.models.product import ProductRecord


class CategoryRecord(Base):
    """A persisted category row."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP, nullable=True, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=True,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    # passive_deletes leaves the SET NULL to the database foreign key
    products: Mapped[List["ProductRecord"]] = relationship(
        back_populates="category",
        passive_deletes=True,
    )

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<CategoryRecord(id={self.id}, name='{self.name}')>"
