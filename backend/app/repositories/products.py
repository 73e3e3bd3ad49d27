from decimal import Decimal
from typing import List, Mapping, Optional

from ..db import Database
from ..errors import DataNotFound
from ..models import Product
from .helpers import delete_row, like_escape, page_params, select_list, update_row, write_errors

COLUMNS = ("id", "category_id", "sku", "name", "stock", "price", "image", "created_at", "updated_at")


class ProductRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_product(
        self,
        category_id: int,
        name: str,
        price: Decimal,
        stock: int,
        image: Optional[str] = None,
    ) -> Product:
        # sku is generated by the database and never written afterwards.
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO products (category_id, name, image, price, stock)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {select_list(COLUMNS)}
                        """,
                        (category_id, name, image, price, stock),
                    )
                    return Product.model_validate(cur.fetchone())

    def get_product_by_id(self, product_id: int) -> Product:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {select_list(COLUMNS)} FROM products WHERE id = %s",
                    (product_id,),
                )
                row = cur.fetchone()
                if not row:
                    raise DataNotFound()
                return Product.model_validate(row)

    def list_products(
        self,
        skip: int,
        limit: int,
        category_id: Optional[int] = None,
        search: str = "",
    ) -> List[Product]:
        where = []
        params: list = []
        if category_id:
            where.append("category_id = %s")
            params.append(category_id)
        if search:
            where.append("name ILIKE %s ESCAPE '\\'")
            params.append(f"%{like_escape(search)}%")
        params.extend(page_params(skip, limit))
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {select_list(COLUMNS)}
                    FROM products
                    {('WHERE ' + ' AND '.join(where)) if where else ''}
                    ORDER BY id
                    LIMIT %s OFFSET %s
                    """,
                    params,
                )
                return [Product.model_validate(r) for r in cur.fetchall()]

    def update_product(self, product_id: int, patch: Mapping) -> Product:
        if "sku" in patch:
            raise ValueError("sku is immutable")
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    return Product.model_validate(update_row(cur, "products", product_id, patch, COLUMNS))

    def delete_product(self, product_id: int) -> None:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    delete_row(cur, "products", product_id)
