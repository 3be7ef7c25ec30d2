"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
The exception type is the failure tag for a checkout attempt.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class UnauthorizedError(DomainException):
    """The caller is not authenticated, is blocked, or lacks the role."""


class SkuNotFoundError(EntityNotFoundError):
    def __init__(self, sku_id: str) -> None:
        super().__init__(f"Product '{sku_id}' not found")
        self.sku_id = sku_id


class NoValidItemsError(DomainException):
    """None of the cart lines reference an existing product."""


class InsufficientStockError(DomainException):
    def __init__(self, sku_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product '{sku_id}' "
            f"(need {requested}, have {available})"
        )
        self.sku_id = sku_id
        self.requested = requested
        self.available = available


class WriteConflictError(DomainException):
    """A stock commit lost an optimistic-concurrency race."""


class TransactionAbortedError(DomainException):
    """A stock transaction kept conflicting and gave up."""


class PaymentFailedError(DomainException):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Payment failed: {reason}")
        self.reason = reason


class OrderWriteFailedError(DomainException):
    """Stock and payment succeeded but the order could not be stored."""


class NotificationFailedError(DomainException):
    """A confirmation email or invoice could not be delivered."""
