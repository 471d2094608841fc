"""Brand hierarchy models: brands and their sub-brands."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from packages.db.base import BigIntId, Base


class Brand(Base):
    """Top-level brand that owns stores, channels and the menu."""

    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    sub_brands = relationship("SubBrand", back_populates="brand")
    stores = relationship("Store", back_populates="brand")


class SubBrand(Base):
    """A brand line operated under a parent brand."""

    __tablename__ = "sub_brands"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    brand_id: Mapped[int] = mapped_column(ForeignKey("brands.id"), nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    brand = relationship("Brand", back_populates="sub_brands")
