from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import Optional

from ..container import Services
from ..deps import get_auth_payload, get_services, require_admin
from ..validation import Name
from .common import list_response

router = APIRouter(prefix="/v1/categories", tags=["categories"])


class CategoryIn(BaseModel):
    name: Name


class CategoryUpdate(BaseModel):
    name: Optional[Name] = None


@router.post("", dependencies=[Depends(require_admin)])
def create_category(data: CategoryIn, services: Services = Depends(get_services)):
    category = services.categories.create_category(data.name)
    return {"category": category.model_dump(mode="json")}


@router.get("", dependencies=[Depends(get_auth_payload)])
def list_categories(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    return list_response("categories", services.categories.list_categories(skip, limit), skip, limit)


@router.get("/{category_id}", dependencies=[Depends(get_auth_payload)])
def get_category(category_id: int, services: Services = Depends(get_services)):
    return {"category": services.categories.get_category(category_id).model_dump(mode="json")}


@router.put("/{category_id}", dependencies=[Depends(require_admin)])
def update_category(category_id: int, data: CategoryUpdate, services: Services = Depends(get_services)):
    patch = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    category = services.categories.update_category(category_id, patch)
    return {"category": category.model_dump(mode="json")}


@router.delete("/{category_id}", dependencies=[Depends(require_admin)])
def delete_category(category_id: int, services: Services = Depends(get_services)):
    services.categories.delete_category(category_id)
    return {"ok": True}
