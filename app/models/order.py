"""
Modelos de pedidos e carrinhos
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text, DECIMAL
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.core.database import Base


class Order(Base):
    """
    Pedidos da loja (itens gravados como JSON no momento da compra)
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Cliente (pedido de convidado quando user_id é nulo)
    user_id = Column(String(100), index=True)
    user_name = Column(String(255))
    user_email = Column(String(255), index=True)
    user_phone = Column(String(50))

    items = Column(JSONB, nullable=False, server_default="[]")

    # Valores
    subtotal = Column(DECIMAL(12, 2), nullable=False, server_default="0")
    discount_amount = Column(DECIMAL(12, 2), nullable=False, server_default="0")
    coupon_code = Column(String(100))
    shipping_cost = Column(DECIMAL(12, 2), nullable=False, server_default="0")
    total = Column(DECIMAL(12, 2), nullable=False)

    # Estado e pagamento
    status = Column(String(50), nullable=False, server_default="pending", index=True)
    payment_id = Column(String(100))
    payment_method = Column(String(50), server_default="credit_card")

    shipping_address = Column(JSONB)
    channel = Column(String(50), server_default="ecommerce")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Cart(Base):
    """
    Carrinhos sincronizados pelo storefront (um por sessão)
    """
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(100), nullable=False, unique=True)

    items = Column(JSONB, nullable=False, server_default="[]")
    total = Column(DECIMAL(12, 2), nullable=False, server_default="0")

    user_email = Column(String(255))
    user_phone = Column(String(50))

    # open | abandoned | converted
    status = Column(String(20), nullable=False, server_default="open", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), index=True)


class AdminUser(Base):
    """
    Usuários do painel administrativo
    """
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    name = Column(String(255))
    role = Column(String(20), nullable=False, server_default="admin")
    is_active = Column(Boolean, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
