"""Seed script for local development data."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from random import Random

from faker import Faker
from sqlalchemy.orm import Session

from packages.db.base import Base, get_engine
from packages.db.models import (
    Brand,
    Channel,
    Customer,
    Product,
    ProductSale,
    Sale,
    Store,
    SubBrand,
)
from packages.db.session import get_session_factory

logger = logging.getLogger(__name__)

CHANNELS = [("Presencial", "P"), ("iFood", "D"), ("App Proprio", "D"), ("Rappi", "D")]
SALE_STATUSES = ["COMPLETED", "COMPLETED", "COMPLETED", "CANCELLED"]
PRODUCT_NAMES = ["Burger Classico", "Batata Frita", "Refrigerante", "Milkshake", "Salada", "Combo Familia"]


def seed_brands(session: Session, fake: Faker) -> tuple[Brand, list[SubBrand]]:
    brand = Brand(name=fake.company())
    session.add(brand)
    session.flush()

    sub_brands = [SubBrand(brand_id=brand.id, name=f"{brand.name} {suffix}") for suffix in ("Express", "Gourmet")]
    session.add_all(sub_brands)
    session.flush()
    return brand, sub_brands


def seed_stores(session: Session, fake: Faker, rng: Random, brand: Brand, sub_brands: list[SubBrand]) -> list[Store]:
    stores = []
    for _ in range(5):
        store = Store(
            brand_id=brand.id,
            sub_brand_id=rng.choice(sub_brands).id,
            name=f"{fake.city()} {fake.street_suffix()}",
            city=fake.city(),
            state=fake.state_abbr(),
            is_active=rng.random() > 0.1,
        )
        stores.append(store)
    session.add_all(stores)
    session.flush()
    return stores


def seed_channels(session: Session, brand: Brand) -> list[Channel]:
    channels = [Channel(brand_id=brand.id, name=name, type=kind) for name, kind in CHANNELS]
    session.add_all(channels)
    session.flush()
    return channels


def seed_customers(session: Session, fake: Faker, rng: Random, stores: list[Store]) -> list[Customer]:
    customers = []
    for _ in range(40):
        customer = Customer(
            store_id=rng.choice(stores).id,
            customer_name=fake.name(),
            email=fake.email(),
            birth_date=fake.date_of_birth(minimum_age=18, maximum_age=80),
        )
        customers.append(customer)
    session.add_all(customers)
    session.flush()
    return customers


def seed_products(session: Session, brand: Brand) -> list[Product]:
    products = [Product(brand_id=brand.id, name=name) for name in PRODUCT_NAMES]
    session.add_all(products)
    session.flush()
    return products


def seed_sales(
    session: Session,
    rng: Random,
    stores: list[Store],
    channels: list[Channel],
    customers: list[Customer],
    products: list[Product],
    count: int,
) -> list[Sale]:
    sales = []
    start = datetime.now(timezone.utc) - timedelta(days=180)
    for _ in range(count):
        sale = Sale(
            store_id=rng.choice(stores).id,
            customer_id=rng.choice(customers).id,
            channel_id=rng.choice(channels).id,
            created_at=start + timedelta(minutes=rng.randint(0, 180 * 24 * 60)),
            sale_status_desc=rng.choice(SALE_STATUSES),
            total_amount=Decimal(rng.randint(1500, 25000)) / 100,
            total_discount=Decimal(rng.randint(0, 500)) / 100,
            people_quantity=rng.randint(1, 6),
        )
        sales.append(sale)
    session.add_all(sales)
    session.flush()

    for sale in sales:
        for product in rng.sample(products, k=rng.randint(1, 3)):
            quantity = rng.randint(1, 4)
            session.add(
                ProductSale(
                    sale_id=sale.id,
                    product_id=product.id,
                    quantity=quantity,
                    total_price=Decimal(rng.randint(800, 4500)) / 100 * quantity,
                )
            )
    return sales


def seed_all(session: Session, sales_count: int = 500, seed: int | None = None) -> dict[str, int]:
    """Populate the reporting schema with fake data and return row counts."""
    fake = Faker()
    rng = Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    brand, sub_brands = seed_brands(session, fake)
    stores = seed_stores(session, fake, rng, brand, sub_brands)
    channels = seed_channels(session, brand)
    customers = seed_customers(session, fake, rng, stores)
    products = seed_products(session, brand)
    sales = seed_sales(session, rng, stores, channels, customers, products, sales_count)
    session.flush()

    return {
        "stores": len(stores),
        "channels": len(channels),
        "customers": len(customers),
        "products": len(products),
        "sales": len(sales),
    }


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    engine = get_engine()
    Base.metadata.create_all(engine)

    session = get_session_factory(engine)()
    try:
        counts = seed_all(session)
        session.commit()
        logger.info("Seeded database with fake data: %s", counts)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
