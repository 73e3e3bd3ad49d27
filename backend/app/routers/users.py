from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import Optional

from ..container import Services
from ..deps import get_auth_payload, get_services, require_admin
from ..validation import Email, Name, Password, UserRole
from .common import list_response

router = APIRouter(prefix="/v1/users", tags=["users"])


class RegisterIn(BaseModel):
    name: Name
    email: Email
    password: Password


class UserUpdate(BaseModel):
    name: Optional[Name] = None
    email: Optional[Email] = None
    password: Optional[Password] = None
    role: Optional[UserRole] = None


@router.post("")
def register(data: RegisterIn, services: Services = Depends(get_services)):
    user = services.users.register(data.name, data.email, data.password)
    return {"user": user.model_dump(mode="json")}


@router.get("", dependencies=[Depends(get_auth_payload)])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    users = services.users.list_users(skip, limit)
    return list_response("users", users, skip, limit)


@router.get("/{user_id}", dependencies=[Depends(get_auth_payload)])
def get_user(user_id: int, services: Services = Depends(get_services)):
    return {"user": services.users.get_user(user_id).model_dump(mode="json")}


@router.put("/{user_id}", dependencies=[Depends(require_admin)])
def update_user(user_id: int, data: UserUpdate, services: Services = Depends(get_services)):
    patch = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    user = services.users.update_user(user_id, patch)
    return {"user": user.model_dump(mode="json")}


@router.delete("/{user_id}", dependencies=[Depends(require_admin)])
def delete_user(user_id: int, services: Services = Depends(get_services)):
    services.users.delete_user(user_id)
    return {"ok": True}
