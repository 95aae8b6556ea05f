"""Domain errors raised by the cart, checkout and order lifecycle services.

Each error carries the HTTP status the API layer answers with; the handler
registered in ``storefront.main`` turns them into ``{"detail": ...}`` bodies.
"""


class StoreError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(StoreError):
    """Rejected input; nothing was mutated."""
    status_code = 400


class ForbiddenError(StoreError):
    status_code = 403


class NotFoundError(StoreError):
    status_code = 404


class ConflictError(StoreError):
    """Refused before any collaborator was called (empty cart, double submit)."""
    status_code = 409


class TransportError(StoreError):
    """A persistence collaborator failed; caller state is left unchanged."""
    status_code = 503
