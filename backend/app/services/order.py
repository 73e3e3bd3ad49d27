"""
Order creation and read aggregation.

Stock is checked twice: an optimistic pre-check here for a fast, friendly
error, then the authoritative conditional decrement inside the repository's
transaction. Only the second one guarantees no overselling under concurrent
orders; the first may race.
"""

from collections import Counter
from decimal import Decimal
from typing import Callable, Dict, List

from ..cache import cache_key, cache_key_params
from ..errors import InsufficientPayment, InsufficientStock
from ..models import Order
from ..repositories.categories import CategoryRepository
from ..repositories.orders import OrderRepository
from ..repositories.payments import PaymentRepository
from ..repositories.products import ProductRepository
from ..repositories.users import UserRepository
from .base import CachedService, service_errors


def _memo(seen: Dict, key, load: Callable):
    if key not in seen:
        seen[key] = load(key)
    return seen[key]


class OrderService(CachedService):
    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        user_repo: UserRepository,
        payment_repo: PaymentRepository,
        cache,
        cache_write_strict=None,
    ):
        super().__init__(cache, cache_write_strict)
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.user_repo = user_repo
        self.payment_repo = payment_repo

    def create_order(self, order: Order) -> Order:
        with service_errors("order.create"):
            requested = Counter()
            for line in order.lines:
                requested[line.product_id] += line.quantity

            total_price = Decimal("0")
            for line in order.lines:
                product = self.product_repo.get_product_by_id(line.product_id)
                if product.stock < requested[line.product_id]:
                    raise InsufficientStock()
                # Price is frozen on the line at order time.
                line.total_price = product.price * line.quantity
                total_price += line.total_price

            if order.total_paid < total_price:
                raise InsufficientPayment()

            order.total_price = total_price
            order.total_return = order.total_paid - total_price

            created = self.order_repo.create_order(order)

            # Committed: drop stale pages before anything else can fail.
            self._cache_invalidate("orders:")
            # Stock moved for every ordered product.
            for product_id in sorted(requested):
                self._cache_evict(cache_key("product", product_id))
            self._cache_invalidate("products:")

            self._hydrate([created])
            self._cache_set(cache_key("order", created.id), created)
            return created

    def get_order(self, order_id: int) -> Order:
        key = cache_key("order", order_id)
        cached = self._cache_get(key, Order)
        if cached is not None:
            return cached
        with service_errors("order.get"):
            order = self.order_repo.get_order_by_id(order_id)
            self._hydrate([order])
            self._cache_set(key, order)
            return order

    def list_orders(self, skip: int, limit: int) -> List[Order]:
        key = cache_key("orders", cache_key_params(skip, limit))
        cached = self._cache_get(key, List[Order])
        if cached is not None:
            return cached
        with service_errors("order.list"):
            orders = self.order_repo.list_orders(skip, limit)
            self._hydrate(orders)
            self._cache_set(key, orders, List[Order])
            return orders

    def _hydrate(self, orders: List[Order]) -> None:
        """Attach user, payment and each line's product (with category) in memory only."""
        users: Dict = {}
        payments: Dict = {}
        products: Dict = {}
        categories: Dict = {}
        for order in orders:
            order.user = _memo(users, order.user_id, self.user_repo.get_user_by_id)
            order.payment = _memo(payments, order.payment_id, self.payment_repo.get_payment_by_id)
            for line in order.lines:
                product = _memo(products, line.product_id, self.product_repo.get_product_by_id)
                product.category = _memo(categories, product.category_id, self.category_repo.get_category_by_id)
                line.product = product
