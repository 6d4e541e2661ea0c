class PosError(Exception):
    """Base error for the invoicing service. `status_code` is the HTTP status the API answers with."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PosError):
    status_code = 404


class EmptyCartError(PosError):
    status_code = 400

    def __init__(self, message: str = "Cart is empty."):
        super().__init__(message)


class CartIndexError(PosError, IndexError):
    status_code = 422


class StoreError(PosError):
    """A store operation failed. The message is the driver's, unmodified."""
    status_code = 502


class ConflictError(StoreError):
    status_code = 409
