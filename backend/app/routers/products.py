from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from typing import Optional

from ..container import Services
from ..deps import get_auth_payload, get_services, require_admin
from ..validation import Name
from .common import list_response

router = APIRouter(prefix="/v1/products", tags=["products"])


class ProductIn(BaseModel):
    category_id: int = Field(ge=1)
    name: Name
    image: Optional[str] = None
    price: Decimal = Field(ge=0)
    stock: int = Field(ge=0)


class ProductUpdate(BaseModel):
    category_id: Optional[int] = Field(default=None, ge=1)
    name: Optional[Name] = None
    # Explicit null clears the image.
    image: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)


@router.post("", dependencies=[Depends(require_admin)])
def create_product(data: ProductIn, services: Services = Depends(get_services)):
    product = services.products.create_product(data.category_id, data.name, data.price, data.stock, data.image)
    return {"product": product.model_dump(mode="json")}


@router.get("", dependencies=[Depends(get_auth_payload)])
def list_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    category_id: Optional[int] = Query(None, ge=1),
    q: str = Query(""),
    services: Services = Depends(get_services),
):
    products = services.products.list_products(skip, limit, category_id=category_id, search=q.strip())
    return list_response("products", products, skip, limit)


@router.get("/{product_id}", dependencies=[Depends(get_auth_payload)])
def get_product(product_id: int, services: Services = Depends(get_services)):
    return {"product": services.products.get_product(product_id).model_dump(mode="json")}


@router.put("/{product_id}", dependencies=[Depends(require_admin)])
def update_product(product_id: int, data: ProductUpdate, services: Services = Depends(get_services)):
    patch = data.model_dump(exclude_unset=True)
    for required in ("category_id", "name", "price", "stock"):
        if required in patch and patch[required] is None:
            patch.pop(required)
    product = services.products.update_product(product_id, patch)
    return {"product": product.model_dump(mode="json")}


@router.delete("/{product_id}", dependencies=[Depends(require_admin)])
def delete_product(product_id: int, services: Services = Depends(get_services)):
    services.products.delete_product(product_id)
    return {"ok": True}
