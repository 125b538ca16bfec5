# server/models/product.py

from datetime import datetime
from sqlalchemy import Column, String, Float, Text, DateTime
from . import Base, new_object_id


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_object_id)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    def to_document(self) -> dict:
        return {
            "_id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "description": self.description,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
