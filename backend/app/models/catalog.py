"""
Modelos del catálogo: categorías y productos
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, DECIMAL, ForeignKey, Integer, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"


class Product(Base):
    """
    Productos de la tienda
    """
    __tablename__ = "products"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)

    # Precios
    price = Column(DECIMAL(12, 2), nullable=False)
    original_price = Column(DECIMAL(12, 2))

    image_url = Column(Text, default="/placeholder.svg", server_default="/placeholder.svg")
    category_id = Column(UUID(as_uuid=True), ForeignKey("categories.id", ondelete="SET NULL"), index=True)
    size = Column(String(50))
    payment_link = Column(Text)

    # Stock
    in_stock = Column(Boolean, default=True, server_default="true")
    stock_quantity = Column(Integer, default=0, server_default="0", nullable=False)

    featured = Column(Boolean, default=False, server_default="false", index=True)
    rating = Column(DECIMAL(2, 1), default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, stock={self.stock_quantity})>"
