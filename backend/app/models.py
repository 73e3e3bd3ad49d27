"""
Domain models shared by repositories, services, the cache and the HTTP layer.

Relations are id-only; the nested `category`, `user`, `payment` and
`product` attachments are filled at read time and are never written back to
the database.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .validation import PaymentType, UserRole


class Category(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Payment(BaseModel):
    id: int
    name: str
    type: PaymentType
    logo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Product(BaseModel):
    id: int
    category_id: int
    sku: uuid.UUID
    name: str
    stock: int
    price: Decimal
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[Category] = None


class User(BaseModel):
    id: int
    name: str
    email: str
    # Bcrypt hash; kept out of every serialized form (responses and cache entries).
    password: str = Field(default="", exclude=True, repr=False)
    role: UserRole = "cashier"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderLine(BaseModel):
    id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: int
    quantity: int = Field(gt=0)
    total_price: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[Product] = None


class Order(BaseModel):
    id: Optional[int] = None
    user_id: int
    payment_id: int
    customer_name: str
    total_price: Decimal = Decimal("0")
    total_paid: Decimal
    total_return: Decimal = Decimal("0")
    receipt_code: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[User] = None
    payment: Optional[Payment] = None
    lines: List[OrderLine] = Field(default_factory=list)


class TokenPayload(BaseModel):
    id: uuid.UUID
    user_id: int
    role: UserRole
