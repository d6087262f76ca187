"""
Catalog API: Product SQLAlchemy Model
=======================================

What:  ORM model for the `products` table.
Who:   SQL repositories and catalog.migrations.

Columns:
    price        NUMERIC(10, 2), returned to Python as float
    stock        BIGINT, never negative (checked by the service layer)
    category_id  nullable FK to categories.id with ON DELETE SET NULL;
                 NULL means "uncategorized"

The `category` relationship is only ever loaded to build the read-time
snapshot embedded in API responses. Nothing is denormalized onto the row.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Numeric, String, TIMESTAMP, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base, IdType
from catalog.models.category import CategoryRecord


class ProductRecord(Base):
    """A persisted product row."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    stock: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default=text("0")
    )

    category_id: Mapped[Optional[int]] = mapped_column(
        IdType,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP, nullable=True, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=True,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    category: Mapped[Optional[CategoryRecord]] = relationship(
        back_populates="products",
        lazy="raise",
    )

    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return (
            f"<ProductRecord(id={self.id}, name='{self.name}', "
            f"category_id={self.category_id})>"
        )
