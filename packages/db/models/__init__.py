"""ORM model exports."""

from packages.db.models.brands import Brand, SubBrand
from packages.db.models.customers import Customer
from packages.db.models.sales import Product, ProductSale, Sale
from packages.db.models.stores import Channel, Store

__all__ = [
    "Brand",
    "Channel",
    "Customer",
    "Product",
    "ProductSale",
    "Sale",
    "Store",
    "SubBrand",
]
