"""Store and sales channel models."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from packages.db.base import BigIntId, Base


class Store(Base):
    """A physical store belonging to a brand."""

    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    brand_id: Mapped[int] = mapped_column(ForeignKey("brands.id"), nullable=False)
    sub_brand_id: Mapped[int | None] = mapped_column(ForeignKey("sub_brands.id"))
    name: Mapped[str] = mapped_column(String, nullable=False)
    city: Mapped[str] = mapped_column(String, nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    brand = relationship("Brand", back_populates="stores")
    sales = relationship("Sale", back_populates="store")


class Channel(Base):
    """Where a sale came from (counter, app, delivery marketplace)."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    brand_id: Mapped[int] = mapped_column(ForeignKey("brands.id"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String(1), nullable=False)
