import uuid
from datetime import datetime, UTC

from sqlalchemy import Column, String, Numeric, Integer, DateTime
from sqlalchemy.sql import func

from product_catalog.data.models import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Product(Base):
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Unique across soft-deleted rows too, the sync upsert relies on it
    external_id = Column(String, unique=True, index=True, nullable=False)
    sku = Column(String, nullable=True)
    name = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    model = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    color = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    currency = Column(String, nullable=True)
    stock = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "external_id": self.external_id,
            "sku": self.sku,
            "name": self.name,
            "brand": self.brand,
            "model": self.model,
            "category": self.category,
            "color": self.color,
            "price": float(self.price) if self.price is not None else None,
            "currency": self.currency,
            "stock": self.stock,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "deleted_at": self.deleted_at.isoformat() if self.deleted_at else None,
        }
