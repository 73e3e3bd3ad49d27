from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BeforeValidator, StringConstraints


def _to_upper_str(v):
    if v is None:
        return v
    return str(v).strip().upper()


def _to_lower_str(v):
    if v is None:
        return v
    return str(v).strip().lower()


def _strip_str(v):
    if v is None:
        return v
    return str(v).strip()


# Canonical codes mirror Postgres enums in `backend/db/migrations/001_init.sql`.
PaymentType = Annotated[Literal["CASH", "E-WALLET", "EDC"], BeforeValidator(_to_upper_str)]
UserRole = Annotated[Literal["admin", "cashier"], BeforeValidator(_to_lower_str)]

Email = Annotated[
    str,
    BeforeValidator(_to_lower_str),
    StringConstraints(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"),
]

# Names are stored trimmed; blank names are rejected.
Name = Annotated[str, BeforeValidator(_strip_str), StringConstraints(min_length=1, max_length=255)]

Password = Annotated[str, StringConstraints(min_length=8, max_length=128)]
