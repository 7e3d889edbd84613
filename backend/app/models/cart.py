"""
Modelos del carrito (usuario o sesión anónima)
"""
from sqlalchemy import Column, String, DateTime, DECIMAL, ForeignKey, Integer, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class UserCart(Base):
    """
    Carrito activo. user_id para usuarios autenticados, session_id para
    visitantes anónimos.
    """
    __tablename__ = "user_carts"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    user_id = Column(UUID(as_uuid=True), index=True)
    session_id = Column(String(100), index=True)
    status = Column(String(20), default="active", server_default="active", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<UserCart(id={self.id}, user_id={self.user_id}, session_id={self.session_id})>"


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    cart_id = Column(UUID(as_uuid=True), ForeignKey("user_carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    cart = relationship("UserCart", back_populates="items")
