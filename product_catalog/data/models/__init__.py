from sqlalchemy.orm import declarative_base

Base = declarative_base()

from product_catalog.data.models.product import Product  # noqa: E402

__all__ = ["Base", "Product"]
