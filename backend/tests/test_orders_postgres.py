"""
Order repository against a real Postgres.

Runs only when POS_TEST_DATABASE_URL is set. Each test gets a throwaway schema
loaded from the migration file and dropped afterwards.
"""

import os
import threading
import uuid
from decimal import Decimal
from pathlib import Path

import psycopg
import pytest
from psycopg.conninfo import make_conninfo

from backend.app.db import Database
from backend.app.errors import InsufficientStock
from backend.app.models import Order, OrderLine
from backend.app.repositories.categories import CategoryRepository
from backend.app.repositories.orders import OrderRepository
from backend.app.repositories.payments import PaymentRepository
from backend.app.repositories.products import ProductRepository
from backend.app.repositories.users import UserRepository

DB_URL = os.getenv("POS_TEST_DATABASE_URL")
SCHEMA_SQL = Path(__file__).resolve().parents[1] / "db" / "migrations" / "001_init.sql"

pytestmark = pytest.mark.skipif(not DB_URL, reason="POS_TEST_DATABASE_URL is not set")


@pytest.fixture
def db():
    schema = f"pos_test_{uuid.uuid4().hex[:12]}"
    with psycopg.connect(DB_URL, autocommit=True) as conn:
        conn.execute(f"CREATE SCHEMA {schema}")
        conn.execute(f"SET search_path TO {schema}, public")
        conn.execute(SCHEMA_SQL.read_text())
    database = Database(make_conninfo(DB_URL, options=f"-c search_path={schema},public"), min_size=1, max_size=4)
    database.open()
    try:
        yield database
    finally:
        database.close()
        with psycopg.connect(DB_URL, autocommit=True) as conn:
            conn.execute(f"DROP SCHEMA {schema} CASCADE")


def _seed(db, stock):
    category = CategoryRepository(db).create_category("Drinks")
    product = ProductRepository(db).create_product(category.id, "Coffee", Decimal("7.50"), stock)
    user = UserRepository(db).create_user("Cashier", "cashier@pos.local", "x")
    payment = PaymentRepository(db).create_payment("Cash", "CASH")
    return product, user, payment


def _order(product, user, payment, qty):
    price = product.price * qty
    return Order(
        user_id=user.id,
        payment_id=payment.id,
        customer_name="Walk-in",
        total_price=price,
        total_paid=price,
        total_return=Decimal("0"),
        lines=[OrderLine(product_id=product.id, quantity=qty, total_price=price)],
    )


def test_concurrent_orders_never_oversell(db):
    product, user, payment = _seed(db, stock=3)
    repo = OrderRepository(db)
    barrier = threading.Barrier(2, timeout=5)
    outcomes = []

    def place():
        barrier.wait()
        try:
            repo.create_order(_order(product, user, payment, 2))
            outcomes.append("ok")
        except InsufficientStock:
            outcomes.append("stock")

    threads = [threading.Thread(target=place) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=15)

    assert sorted(outcomes) == ["ok", "stock"]
    assert ProductRepository(db).get_product_by_id(product.id).stock == 1
    assert len(repo.list_orders(0, 10)) == 1


def test_failed_line_rolls_back_whole_order(db):
    product, user, payment = _seed(db, stock=5)
    other = ProductRepository(db).create_product(product.category_id, "Tea", Decimal("5.00"), 1)
    draft = _order(product, user, payment, 2)
    draft.lines.append(OrderLine(product_id=other.id, quantity=2, total_price=Decimal("10.00")))
    draft.total_price = draft.total_paid = Decimal("25.00")

    with pytest.raises(InsufficientStock):
        OrderRepository(db).create_order(draft)

    products = ProductRepository(db)
    assert products.get_product_by_id(product.id).stock == 5
    assert products.get_product_by_id(other.id).stock == 1
    assert OrderRepository(db).list_orders(0, 10) == []
