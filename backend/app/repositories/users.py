from typing import List, Mapping

from ..db import Database
from ..errors import DataNotFound
from ..models import User
from .helpers import delete_row, page_params, select_list, update_row, write_errors

COLUMNS = ("id", "name", "email", "password", "role", "created_at", "updated_at")


class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_user(self, name: str, email: str, hashed_password: str, role: str = "cashier") -> User:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO users (name, email, password, role)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {select_list(COLUMNS)}
                        """,
                        (name, email, hashed_password, role),
                    )
                    return User.model_validate(cur.fetchone())

    def get_user_by_id(self, user_id: int) -> User:
        return self._get_one("id", user_id)

    def get_user_by_email(self, email: str) -> User:
        return self._get_one("email", email)

    def _get_one(self, column: str, value) -> User:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {select_list(COLUMNS)} FROM users WHERE {column} = %s",
                    (value,),
                )
                row = cur.fetchone()
                if not row:
                    raise DataNotFound()
                return User.model_validate(row)

    def list_users(self, skip: int, limit: int) -> List[User]:
        with self.db.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {select_list(COLUMNS)}
                    FROM users
                    ORDER BY id
                    LIMIT %s OFFSET %s
                    """,
                    page_params(skip, limit),
                )
                return [User.model_validate(r) for r in cur.fetchall()]

    def update_user(self, user_id: int, patch: Mapping) -> User:
        """`patch["password"]`, when present, must already be hashed."""
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    return User.model_validate(update_row(cur, "users", user_id, patch, COLUMNS))

    def delete_user(self, user_id: int) -> None:
        with write_errors():
            with self.db.connection() as conn:
                with conn.cursor() as cur:
                    delete_row(cur, "users", user_id)
