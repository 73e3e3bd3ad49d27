"""
Error kinds surfaced by services.

Domain kinds are propagated verbatim to the HTTP boundary; everything else is
normalized to `Internal` before it leaves a service.
"""


class DomainError(Exception):
    status_code = 500
    message = "internal error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class DataNotFound(DomainError):
    status_code = 404
    message = "data not found"


class ConflictingData(DomainError):
    status_code = 409
    message = "data conflicts with existing data in unique column"


class NoUpdatedData(DomainError):
    status_code = 400
    message = "no data to update"


class InsufficientStock(DomainError):
    status_code = 400
    message = "product stock is not enough"


class InsufficientPayment(DomainError):
    status_code = 400
    message = "total paid is less than total price"


class InvalidCredentials(DomainError):
    status_code = 401
    message = "invalid email or password"


class Unauthorized(DomainError):
    status_code = 401
    message = "authorization header is not provided"


class InvalidToken(Unauthorized):
    message = "access token is invalid"


class ExpiredToken(Unauthorized):
    message = "access token has expired"


class Forbidden(DomainError):
    status_code = 403
    message = "user is not allowed to access the resource"


class Internal(DomainError):
    status_code = 500
    message = "internal server error"
