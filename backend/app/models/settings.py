"""
Configuración de la tienda: WhatsApp, pasarelas de pago y datos del comercio
"""
from sqlalchemy import Column, String, DateTime, Text, text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from app.core.database import Base


class WhatsAppSetting(Base):
    __tablename__ = "whatsapp_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    phone_number = Column(String(30), nullable=False)
    default_message = Column(Text, nullable=False)
    product_message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PaymentSetting(Base):
    """Credenciales por proveedor (JSON) y llave de firma de webhooks"""
    __tablename__ = "payment_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    provider = Column(String(50), nullable=False, unique=True)
    settings = Column(JSONB)
    webhook_key = Column(String(128))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class StoreSetting(Base):
    __tablename__ = "store_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()"))
    store_name = Column(String(255), nullable=False)
    logo_url = Column(Text)
    address = Column(Text)
    phone = Column(String(50))
    email = Column(String(255))
    tax_id = Column(String(50))
