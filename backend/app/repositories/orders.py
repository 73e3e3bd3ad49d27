from typing import Dict, List

from psycopg import errors as pg_errors

from ..db import Database
from ..errors import DataNotFound, InsufficientPayment, InsufficientStock
from ..models import Order, OrderLine
from .helpers import page_params, select_list

ORDER_COLUMNS = (
    "id", "user_id", "payment_id", "customer_name", "total_price", "total_paid",
    "total_return", "receipt_code", "created_at", "updated_at",
)
LINE_COLUMNS = ("id", "order_id", "product_id", "quantity", "total_price", "created_at", "updated_at")


class OrderRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_order(self, order: Order) -> Order:
        """
        Insert the order, its lines and every stock decrement in one transaction.

        The conditional decrement is the authoritative stock check: when any
        product would go negative the whole transaction is rolled back and
        `InsufficientStock` is raised.
        """
        try:
            with self.db.connection() as conn:
                with conn.transaction():
                    with conn.cursor() as cur:
                        cur.execute(
                            f"""
                            INSERT INTO orders (user_id, payment_id, customer_name, total_price, total_paid, total_return)
                            VALUES (%s, %s, %s, %s, %s, %s)
                            RETURNING {select_list(ORDER_COLUMNS)}
                            """,
                            (
                                order.user_id,
                                order.payment_id,
                                order.customer_name,
                                order.total_price,
                                order.total_paid,
                                order.total_return,
                            ),
                        )
                        created = Order.model_validate(cur.fetchone())

                        for line in order.lines:
                            cur.execute(
                                f"""
                                INSERT INTO order_lines (order_id, product_id, quantity, total_price)
                                VALUES (%s, %s, %s, %s)
                                RETURNING {select_list(LINE_COLUMNS)}
                                """,
                                (created.id, line.product_id, line.quantity, line.total_price),
                            )
                            created.lines.append(OrderLine.model_validate(cur.fetchone()))

                            cur.execute(
                                """
                                UPDATE products
                                SET stock = stock - %s,
                                    updated_at = now()
                                WHERE id = %s
                                RETURNING stock
                                """,
                                (line.quantity, line.product_id),
                            )
                            row = cur.fetchone()
                            if not row:
                                raise DataNotFound()
                            if row["stock"] < 0:
                                raise InsufficientStock()
        except pg_errors.CheckViolation as exc:
            if exc.diag.constraint_name == "orders_paid_covers_price":
                raise InsufficientPayment() from exc
            # products_stock_non_negative
            raise InsufficientStock() from exc
        except pg_errors.ForeignKeyViolation as exc:
            raise DataNotFound() from exc
        return created

    def get_order_by_id(self, order_id: int) -> Order:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {select_list(ORDER_COLUMNS)} FROM orders WHERE id = %s",
                    (order_id,),
                )
                row = cur.fetchone()
                if not row:
                    raise DataNotFound()
                order = Order.model_validate(row)
                order.lines = self._lines_for(cur, [order.id]).get(order.id, [])
                return order

    def list_orders(self, skip: int, limit: int) -> List[Order]:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {select_list(ORDER_COLUMNS)}
                    FROM orders
                    ORDER BY id
                    LIMIT %s OFFSET %s
                    """,
                    page_params(skip, limit),
                )
                orders = [Order.model_validate(r) for r in cur.fetchall()]
                if not orders:
                    return []
                lines = self._lines_for(cur, [o.id for o in orders])
                for o in orders:
                    o.lines = lines.get(o.id, [])
                return orders

    def _lines_for(self, cur, order_ids: List[int]) -> Dict[int, List[OrderLine]]:
        cur.execute(
            f"""
            SELECT {select_list(LINE_COLUMNS)}
            FROM order_lines
            WHERE order_id = ANY(%s)
            ORDER BY id
            """,
            (order_ids,),
        )
        out: Dict[int, List[OrderLine]] = {}
        for r in cur.fetchall():
            line = OrderLine.model_validate(r)
            out.setdefault(line.order_id, []).append(line)
        return out
