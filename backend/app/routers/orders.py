from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from typing import List

from ..container import Services
from ..deps import get_auth_payload, get_services
from ..models import Order, OrderLine, TokenPayload
from ..validation import Name
from .common import list_response

router = APIRouter(prefix="/v1/orders", tags=["orders"])


class OrderLineIn(BaseModel):
    product_id: int = Field(ge=1)
    qty: int = Field(gt=0)


class OrderIn(BaseModel):
    payment_id: int = Field(ge=1)
    customer_name: Name
    total_paid: Decimal = Field(ge=0)
    products: List[OrderLineIn] = Field(min_length=1)


@router.post("")
def create_order(
    data: OrderIn,
    payload: TokenPayload = Depends(get_auth_payload),
    services: Services = Depends(get_services),
):
    draft = Order(
        user_id=payload.user_id,
        payment_id=data.payment_id,
        customer_name=data.customer_name,
        total_paid=data.total_paid,
        lines=[OrderLine(product_id=p.product_id, quantity=p.qty) for p in data.products],
    )
    order = services.orders.create_order(draft)
    return {"order": order.model_dump(mode="json")}


@router.get("", dependencies=[Depends(get_auth_payload)])
def list_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    return list_response("orders", services.orders.list_orders(skip, limit), skip, limit)


@router.get("/{order_id}", dependencies=[Depends(get_auth_payload)])
def get_order(order_id: int, services: Services = Depends(get_services)):
    return {"order": services.orders.get_order(order_id).model_dump(mode="json")}
