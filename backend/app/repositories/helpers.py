from contextlib import contextmanager
from typing import Iterable, Mapping

from psycopg import errors as pg_errors

from ..errors import ConflictingData, DataNotFound


@contextmanager
def write_errors():
    """Map constraint violations raised by a write to domain errors."""
    try:
        yield
    except pg_errors.UniqueViolation as exc:
        raise ConflictingData() from exc
    except pg_errors.ForeignKeyViolation as exc:
        # Deleting a row that is still referenced (e.g. a category with products).
        raise ConflictingData("data is still referenced by other records") from exc


def select_list(columns: Iterable[str]) -> str:
    return ", ".join(columns)


def update_row(cur, table: str, row_id: int, patch: Mapping, columns: Iterable[str]):
    """
    Apply an explicit partial update: only keys present in `patch` are written,
    so a field can be set to NULL/zero on purpose. Returns the updated row.
    """
    allowed = set(columns)
    fields = []
    params = []
    for name, value in patch.items():
        if name not in allowed or name in {"id", "created_at", "updated_at"}:
            raise ValueError(f"column {name!r} cannot be updated on {table}")
        fields.append(f"{name} = %s")
        params.append(value)
    if not fields:
        raise ValueError("empty patch")
    fields.append("updated_at = now()")
    params.append(row_id)
    cur.execute(
        f"""
        UPDATE {table}
        SET {', '.join(fields)}
        WHERE id = %s
        RETURNING {select_list(columns)}
        """,
        params,
    )
    row = cur.fetchone()
    if not row:
        raise DataNotFound()
    return row


def delete_row(cur, table: str, row_id: int) -> None:
    cur.execute(f"DELETE FROM {table} WHERE id = %s RETURNING id", (row_id,))
    if not cur.fetchone():
        raise DataNotFound()


def page_params(skip: int, limit: int) -> tuple:
    return (max(int(limit), 0), max(int(skip), 0))


def like_escape(text: str) -> str:
    """Make `%` and `_` match literally inside a LIKE pattern (escape char `\\`)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
