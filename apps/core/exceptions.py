"""
Custom exceptions for the Storefront API
"""


class StoreException(Exception):
    """Base exception for all storefront errors"""
    status_code = 500

    def __init__(self, message: str, code: str = "STORE_ERROR", status_code: int = None):
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationException(StoreException):
    """Exception raised for malformed or missing input"""
    status_code = 400

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR"
        )


class ConflictException(StoreException):
    """Exception raised when a record would duplicate an existing one"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFLICT")


class AuthenticationException(StoreException):
    """Exception raised for bad credentials or tokens"""
    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message=message, code="UNAUTHORIZED")


class PermissionException(StoreException):
    """Exception raised when the caller lacks a capability"""
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message=message, code="FORBIDDEN")


class NotFoundException(StoreException):
    """Exception raised when a record is missing or not owned by the caller"""
    status_code = 404

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(message=f"{resource} not found", code="NOT_FOUND")


class InsufficientStockException(ValidationException):
    """Exception raised when a requested quantity exceeds available stock"""

    def __init__(self, product_name: str = None):
        self.product_name = product_name
        message = f"Insufficient stock for {product_name}" if product_name else "Insufficient stock"
        super().__init__(message=message, field="quantity")
        self.code = "INSUFFICIENT_STOCK"


class PaymentGatewayException(StoreException):
    """Exception raised when the payment gateway call fails"""
    status_code = 500

    def __init__(self, message: str, provider: str = None):
        self.provider = provider
        super().__init__(
            message=f"Payment error: {message}",
            code="PAYMENT_ERROR"
        )
