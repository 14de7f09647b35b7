# storefront/domain/errors.py


class AuthError(Exception):
    """Invalid or expired code, or no session where one is required."""


class BackendError(RuntimeError):
    """A table or storage operation failed."""


class PartialOrderError(BackendError):
    """The order was written but a later checkout step failed."""

    def __init__(self, message: str, order_id: str):
        super().__init__(message)
        self.order_id = order_id


class EmptyCartError(ValueError):
    pass
