from typing import List, Mapping

from ..db import Database
from ..errors import DataNotFound
from ..models import Category
from .helpers import delete_row, page_params, select_list, update_row, write_errors

COLUMNS = ("id", "name", "created_at", "updated_at")


class CategoryRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_category(self, name: str) -> Category:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO categories (name)
                        VALUES (%s)
                        RETURNING {select_list(COLUMNS)}
                        """,
                        (name,),
                    )
                    return Category.model_validate(cur.fetchone())

    def get_category_by_id(self, category_id: int) -> Category:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {select_list(COLUMNS)} FROM categories WHERE id = %s",
                    (category_id,),
                )
                row = cur.fetchone()
                if not row:
                    raise DataNotFound()
                return Category.model_validate(row)

    def list_categories(self, skip: int, limit: int) -> List[Category]:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {select_list(COLUMNS)}
                    FROM categories
                    ORDER BY id
                    LIMIT %s OFFSET %s
                    """,
                    page_params(skip, limit),
                )
                return [Category.model_validate(r) for r in cur.fetchall()]

    def update_category(self, category_id: int, patch: Mapping) -> Category:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    return Category.model_validate(update_row(cur, "categories", category_id, patch, COLUMNS))

    def delete_category(self, category_id: int) -> None:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    delete_row(cur, "categories", category_id)
