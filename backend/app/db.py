from contextlib import contextmanager

from psycopg.rows import dict_row

# psycopg3 connection pooling lives in a separate package.
from psycopg_pool import ConnectionPool

from .config import settings


class Database:
    """
    Process-wide connection pool. Created once at startup and handed to every
    repository; nothing else opens connections.
    """

    def __init__(
        self,
        conninfo: str,
        min_size: int = 1,
        max_size: int = 10,
        statement_timeout_ms: int = 0,
    ):
        kwargs = {"row_factory": dict_row}
        if statement_timeout_ms > 0:
            kwargs["options"] = f"-c statement_timeout={int(statement_timeout_ms)}"
        # Opened explicitly by `open()` so importing this module never touches the network.
        self.pool = ConnectionPool(
            conninfo=conninfo,
            min_size=min_size,
            max_size=max_size,
            kwargs=kwargs,
            open=False,
        )

    @classmethod
    def from_settings(cls) -> "Database":
        return cls(
            settings.db_url,
            min_size=settings.db_pool_min,
            max_size=settings.db_pool_max,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )

    def open(self) -> None:
        self.pool.open()

    @contextmanager
    def connection(self):
        # `pool.connection()` commits on success, rolls back on exception and
        # returns the connection to the pool.
        with self.pool.connection() as conn:
            yield conn

    def ping(self) -> None:
        with self.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                cur.fetchone()

    def close(self) -> None:
        self.pool.close()
