from typing import List, Mapping, Optional

from ..db import Database
from ..errors import DataNotFound
from ..models import Payment
from .helpers import delete_row, page_params, select_list, update_row, write_errors

COLUMNS = ("id", "name", "type", "logo", "created_at", "updated_at")


class PaymentRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_payment(self, name: str, type: str, logo: Optional[str] = None) -> Payment:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO payments (name, type, logo)
                        VALUES (%s, %s, %s)
                        RETURNING {select_list(COLUMNS)}
                        """,
                        (name, type, logo),
                    )
                    return Payment.model_validate(cur.fetchone())

    def get_payment_by_id(self, payment_id: int) -> Payment:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {select_list(COLUMNS)} FROM payments WHERE id = %s",
                    (payment_id,),
                )
                row = cur.fetchone()
                if not row:
                    raise DataNotFound()
                return Payment.model_validate(row)

    def list_payments(self, skip: int, limit: int) -> List[Payment]:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {select_list(COLUMNS)}
                    FROM payments
                    ORDER BY id
                    LIMIT %s OFFSET %s
                    """,
                    page_params(skip, limit),
                )
                return [Payment.model_validate(r) for r in cur.fetchall()]

    def update_payment(self, payment_id: int, patch: Mapping) -> Payment:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    return Payment.model_validate(update_row(cur, "payments", payment_id, patch, COLUMNS))

    def delete_payment(self, payment_id: int) -> None:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    delete_row(cur, "payments", payment_id)
