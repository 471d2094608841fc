"""Sale, product and sold-product models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from packages.db.base import BigIntId, Base


class Product(Base):
    """A menu product sold by a brand."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    brand_id: Mapped[int] = mapped_column(ForeignKey("brands.id"), nullable=False)
    sub_brand_id: Mapped[int | None] = mapped_column(ForeignKey("sub_brands.id"))
    name: Mapped[str] = mapped_column(String, nullable=False)


class Sale(Base):
    """A closed ticket at a store."""

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), nullable=False)
    sub_brand_id: Mapped[int | None] = mapped_column(ForeignKey("sub_brands.id"))
    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"))
    channel_id: Mapped[int] = mapped_column(ForeignKey("channels.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    sale_status_desc: Mapped[str] = mapped_column(String, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_discount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    people_quantity: Mapped[int | None] = mapped_column(Integer)

    store = relationship("Store", back_populates="sales")
    customer = relationship("Customer", back_populates="sales")
    product_sales = relationship("ProductSale", back_populates="sale")


class ProductSale(Base):
    """One product line within a sale."""

    __tablename__ = "product_sales"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    sale = relationship("Sale", back_populates="product_sales")
