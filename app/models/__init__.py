"""
Modelos de banco de dados (definição das tabelas)
"""
from .catalog import Brand, Category, Product, Promotion
from .commerce import Coupon, IntegrationSettings, Partner, ShippingRate
from .order import AdminUser, Cart, Order

__all__ = [
    "Brand",
    "Category",
    "Product",
    "Promotion",
    "Coupon",
    "IntegrationSettings",
    "Partner",
    "ShippingRate",
    "AdminUser",
    "Cart",
    "Order",
]
