from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..container import Services
from ..deps import get_services
from ..validation import Email, Password

router = APIRouter(prefix="/v1/users", tags=["auth"])


class LoginIn(BaseModel):
    email: Email
    password: Password


@router.post("/login")
def login(data: LoginIn, services: Services = Depends(get_services)):
    token = services.auth.login(data.email, data.password)
    return {"token": token}
