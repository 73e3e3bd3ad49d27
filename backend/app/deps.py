from fastapi import Depends, Header, Request
from typing import Optional

from .container import Services
from .errors import Forbidden, Unauthorized
from .models import TokenPayload

AUTHORIZATION_TYPE = "bearer"


def _extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthorized("authorization header is not provided")
    fields = authorization.split()
    if len(fields) != 2:
        raise Unauthorized("authorization header format is invalid")
    if fields[0].lower() != AUTHORIZATION_TYPE:
        raise Unauthorized("authorization type is not supported")
    return fields[1]


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_auth_payload(
    authorization: Optional[str] = Header(None),
    services: Services = Depends(get_services),
) -> TokenPayload:
    token = _extract_bearer_token(authorization)
    return services.tokens.verify_token(token)


def require_admin(payload: TokenPayload = Depends(get_auth_payload)) -> TokenPayload:
    if payload.role != "admin":
        raise Forbidden()
    return payload
