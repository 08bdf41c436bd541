"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.product import Product
from app.domain.catalog import Category, Brand, Promotion
from app.domain.order import Order, OrderItem, OrderStatus
from app.domain.coupon import Coupon, CouponValidation, DiscountBreakdown
from app.domain.partner import Partner
from app.domain.shipping import ShippingRate
from app.domain.cart import Cart
from app.domain.integration import IntegrationSettings
from app.domain.checkout import CheckoutRequest, CheckoutResult

__all__ = [
    'Product',
    'Category',
    'Brand',
    'Promotion',
    'Order',
    'OrderItem',
    'OrderStatus',
    'Coupon',
    'CouponValidation',
    'DiscountBreakdown',
    'Partner',
    'ShippingRate',
    'Cart',
    'IntegrationSettings',
    'CheckoutRequest',
    'CheckoutResult',
]
