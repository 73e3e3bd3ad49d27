import os
import sys
from datetime import timedelta
from decimal import Decimal

import pytest


# Allow running pytest from either the repo root or from within `backend/`.
# Tests import `backend.*`, which requires the repo root on sys.path.
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from backend.app.cache import RedisCache  # noqa: E402
from backend.app.container import Services  # noqa: E402
from backend.app.services.auth import AuthService  # noqa: E402
from backend.app.services.category import CategoryService  # noqa: E402
from backend.app.services.order import OrderService  # noqa: E402
from backend.app.services.payment import PaymentService  # noqa: E402
from backend.app.services.product import ProductService  # noqa: E402
from backend.app.services.user import UserService  # noqa: E402
from backend.app.tokens import TokenService  # noqa: E402
from backend.tests.fakes import (  # noqa: E402
    FakeCategoryRepository,
    FakeOrderRepository,
    FakePaymentRepository,
    FakeProductRepository,
    FakeRedis,
    FakeUserRepository,
)

TEST_TOKEN_KEY = "k" * 32


@pytest.fixture
def redis_client():
    return FakeRedis()


@pytest.fixture
def cache(redis_client):
    return RedisCache(redis_client)


@pytest.fixture
def repos():
    products = FakeProductRepository()
    return {
        "categories": FakeCategoryRepository(),
        "payments": FakePaymentRepository(),
        "users": FakeUserRepository(),
        "products": products,
        "orders": FakeOrderRepository(products),
    }


@pytest.fixture
def tokens():
    return TokenService(TEST_TOKEN_KEY, timedelta(minutes=15))


@pytest.fixture
def services(repos, cache, tokens):
    return Services(
        db=None,
        cache=cache,
        tokens=tokens,
        auth=AuthService(repos["users"], tokens),
        users=UserService(repos["users"], cache, True),
        payments=PaymentService(repos["payments"], cache, True),
        categories=CategoryService(repos["categories"], cache, True),
        products=ProductService(repos["products"], repos["categories"], cache, True),
        orders=OrderService(
            repos["orders"],
            repos["products"],
            repos["categories"],
            repos["users"],
            repos["payments"],
            cache,
            True,
        ),
    )


@pytest.fixture
def shop(repos):
    """A cashier, one payment method and two products in one category."""
    category = repos["categories"].create_category("Drinks")
    return {
        "category": category,
        "user": repos["users"].create_user("Cashier", "cashier@pos.local", "x", "cashier"),
        "payment": repos["payments"].create_payment("Cash", "CASH"),
        "tea": repos["products"].create_product(category.id, "Tea", Decimal("5.00"), 10),
        "coffee": repos["products"].create_product(category.id, "Coffee", Decimal("7.50"), 3),
    }
