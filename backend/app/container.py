from dataclasses import dataclass
from typing import Optional

from .cache import RedisCache
from .db import Database
from .repositories.categories import CategoryRepository
from .repositories.orders import OrderRepository
from .repositories.payments import PaymentRepository
from .repositories.products import ProductRepository
from .repositories.users import UserRepository
from .services.auth import AuthService
from .services.category import CategoryService
from .services.order import OrderService
from .services.payment import PaymentService
from .services.product import ProductService
from .services.user import UserService
from .tokens import TokenService


@dataclass
class Services:
    db: Optional[Database]
    cache: Optional[RedisCache]
    tokens: TokenService
    auth: AuthService
    users: UserService
    payments: PaymentService
    categories: CategoryService
    products: ProductService
    orders: OrderService


def build_services(db: Database, cache: RedisCache, tokens: TokenService, cache_write_strict: Optional[bool] = None) -> Services:
    """Wire repositories and services around one pool and one cache client."""
    category_repo = CategoryRepository(db)
    payment_repo = PaymentRepository(db)
    product_repo = ProductRepository(db)
    user_repo = UserRepository(db)
    order_repo = OrderRepository(db)
    return Services(
        db=db,
        cache=cache,
        tokens=tokens,
        auth=AuthService(user_repo, tokens),
        users=UserService(user_repo, cache, cache_write_strict),
        payments=PaymentService(payment_repo, cache, cache_write_strict),
        categories=CategoryService(category_repo, cache, cache_write_strict),
        products=ProductService(product_repo, category_repo, cache, cache_write_strict),
        orders=OrderService(order_repo, product_repo, category_repo, user_repo, payment_repo, cache, cache_write_strict),
    )
