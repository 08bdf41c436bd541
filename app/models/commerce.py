"""
Modelos de cupons, parceiros, frete e integrações
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, DECIMAL, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class Partner(Base):
    """
    Parceiros (afiliados) com código próprio de desconto
    """
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(100), nullable=False, unique=True)

    # Quantidade de pedidos gerados pelo código (comissão)
    score = Column(Integer, nullable=False, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Coupon(Base):
    """
    Cupons de desconto
    """
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(100), nullable=False, unique=True)

    # percent | fixed
    discount_type = Column(String(10), nullable=False)
    discount_value = Column(DECIMAL(12, 2), nullable=False)

    expiration_date = Column(DateTime(timezone=True))
    usage_limit = Column(Integer)
    used_count = Column(Integer, nullable=False, server_default="0")
    active = Column(Boolean, nullable=False, server_default="true")

    partner_id = Column(Integer, ForeignKey("partners.id", ondelete="SET NULL"))
    partner_name = Column(String(150))

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ShippingRate(Base):
    """
    Tabela de frete por cidade
    """
    __tablename__ = "shipping_rates"

    id = Column(Integer, primary_key=True, index=True)
    city_name = Column(String(150), nullable=False)
    state = Column(String(2), nullable=False, server_default="SP")
    base_fee = Column(DECIMAL(12, 2), nullable=False)

    # Prazo em dias
    estimated_delivery_time = Column(Integer, nullable=False, server_default="5")
    is_active = Column(Boolean, nullable=False, server_default="true")

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class IntegrationSettings(Base):
    """
    Configurações de integrações (linha única)
    """
    __tablename__ = "integration_settings"

    id = Column(Integer, primary_key=True, index=True)

    # Webhooks
    webhook_order_created = Column(Text)
    webhook_abandoned_cart = Column(Text)
    status_order_created = Column(Boolean, nullable=False, server_default="false")
    status_abandoned_cart = Column(Boolean, nullable=False, server_default="false")
    auth_token = Column(Text)

    # Mercado Pago
    mp_access_token = Column(Text)
    mp_public_key = Column(Text)

    # Chatwoot
    chatwoot_url = Column(Text)
    chatwoot_account_id = Column(String(50))
    chatwoot_token = Column(Text)
    chatwoot_inbox_id = Column(String(50))

    # Loja
    store_address = Column(Text)
    store_hours = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
