"""
Modelos relacionados con órdenes/pedidos
"""
from sqlalchemy import Column, String, DateTime, Text, DECIMAL, ForeignKey, Integer, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Order(Base):
    """
    Pedido creado en el checkout
    """
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    user_id = Column(UUID(as_uuid=True), index=True)

    # Cliente
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50))
    shipping_address = Column(Text)

    # Montos
    total_amount = Column(DECIMAL(12, 2), nullable=False)

    # Pago
    payment_method = Column(String(50), default="pagadito", server_default="pagadito")
    payment_status = Column(String(50), default="pending", server_default="pending", index=True)
    transaction_id = Column(String(100), unique=True, index=True)

    # Estado
    status = Column(String(50), default="pending", server_default="pending", index=True)

    # Metadata
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relaciones
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Order(id={self.id}, payment_status={self.payment_status}, total={self.total_amount})>"


class OrderItem(Base):
    """
    Items de cada pedido
    """
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    price = Column(DECIMAL(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem(order_id={self.order_id}, product_id={self.product_id}, quantity={self.quantity})>"
