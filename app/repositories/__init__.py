"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.category_repository import CategoryRepository
from app.repositories.brand_repository import BrandRepository
from app.repositories.promotion_repository import PromotionRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.coupon_repository import CouponRepository
from app.repositories.partner_repository import PartnerRepository
from app.repositories.shipping_repository import ShippingRepository
from app.repositories.integration_repository import IntegrationRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.admin_user_repository import AdminUserRepository

__all__ = [
    'ProductRepository',
    'CategoryRepository',
    'BrandRepository',
    'PromotionRepository',
    'OrderRepository',
    'CouponRepository',
    'PartnerRepository',
    'ShippingRepository',
    'IntegrationRepository',
    'CartRepository',
    'AdminUserRepository',
]
