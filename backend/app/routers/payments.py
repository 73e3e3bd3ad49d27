from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import Optional

from ..container import Services
from ..deps import get_auth_payload, get_services, require_admin
from ..validation import Name, PaymentType
from .common import list_response

router = APIRouter(prefix="/v1/payments", tags=["payments"])


class PaymentIn(BaseModel):
    name: Name
    type: PaymentType
    logo: Optional[str] = None


class PaymentUpdate(BaseModel):
    name: Optional[Name] = None
    type: Optional[PaymentType] = None
    # Explicit null clears the logo.
    logo: Optional[str] = None


@router.post("", dependencies=[Depends(require_admin)])
def create_payment(data: PaymentIn, services: Services = Depends(get_services)):
    payment = services.payments.create_payment(data.name, data.type, data.logo)
    return {"payment": payment.model_dump(mode="json")}


@router.get("", dependencies=[Depends(get_auth_payload)])
def list_payments(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    services: Services = Depends(get_services),
):
    return list_response("payments", services.payments.list_payments(skip, limit), skip, limit)


@router.get("/{payment_id}", dependencies=[Depends(get_auth_payload)])
def get_payment(payment_id: int, services: Services = Depends(get_services)):
    return {"payment": services.payments.get_payment(payment_id).model_dump(mode="json")}


@router.put("/{payment_id}", dependencies=[Depends(require_admin)])
def update_payment(payment_id: int, data: PaymentUpdate, services: Services = Depends(get_services)):
    patch = data.model_dump(exclude_unset=True)
    for required in ("name", "type"):
        if required in patch and patch[required] is None:
            patch.pop(required)
    payment = services.payments.update_payment(payment_id, patch)
    return {"payment": payment.model_dump(mode="json")}


@router.delete("/{payment_id}", dependencies=[Depends(require_admin)])
def delete_payment(payment_id: int, services: Services = Depends(get_services)):
    services.payments.delete_payment(payment_id)
    return {"ok": True}
