from typing import Optional

import pytest
from pydantic import BaseModel, ValidationError

from backend.app.validation import Email, Name, Password, PaymentType, UserRole


class _M(BaseModel):
    type: PaymentType
    role: UserRole
    email: Email
    name: Name
    password: Optional[Password] = None


def test_validation_types_normalize_case():
    m = _M(type=" e-wallet ", role="ADMIN", email=" Ana@POS.local ", name="  Ana  ")
    assert m.type == "E-WALLET"
    assert m.role == "admin"
    assert m.email == "ana@pos.local"
    assert m.name == "Ana"


@pytest.mark.parametrize(
    "field,value",
    [
        ("type", "CHEQUE"),
        ("role", "owner"),
        ("email", "not-an-email"),
        ("name", "   "),
        ("password", "short"),
    ],
)
def test_validation_rejects_bad_values(field, value):
    data = {"type": "CASH", "role": "cashier", "email": "a@b.co", "name": "Ana"}
    data[field] = value
    with pytest.raises(ValidationError):
        _M(**data)
