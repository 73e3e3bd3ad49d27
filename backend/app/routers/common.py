from typing import Iterable

from pydantic import BaseModel


def list_response(key: str, items: Iterable[BaseModel], skip: int, limit: int) -> dict:
    rows = [i.model_dump(mode="json") for i in items]
    return {
        "meta": {"total": len(rows), "limit": limit, "skip": skip},
        key: rows,
    }
