"""
Domain exceptions raised by services

Routers translate them into HTTP responses:
- NotFoundError -> 404
- DuplicateCodeError -> 409
- ValidationError / PaymentConfigError -> 400
"""


class DarkStoreError(Exception):
    """Base class for business rule errors"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DarkStoreError):
    status_code = 404


class DuplicateCodeError(DarkStoreError):
    status_code = 409


class ValidationError(DarkStoreError):
    status_code = 400


class PaymentConfigError(DarkStoreError):
    """Payment gateway is not configured (missing access token)"""
    status_code = 400
