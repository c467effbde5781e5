"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Validation failures (ProductNotFoundError, ItemNotFoundError, EmptyCartError,
InvalidTransitionError) are never retried: retrying does not change the
outcome.  ConcurrencyConflictError is the only transient error and is
retried inside the cart transaction.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class NotAuthenticatedError(DomainException):
    """An identity-scoped operation was called without a shopper identity."""


class NotAuthorizedError(DomainException):
    """An admin-only operation was called without the admin flag."""


class ProductNotFoundError(EntityNotFoundError):
    """The product does not exist in the catalog."""


class ItemNotFoundError(EntityNotFoundError):
    """The product has no line item in the cart."""


class OrderNotFoundError(EntityNotFoundError):
    """The order does not exist or is not visible to the caller."""


class EmptyCartError(ValidationError):
    """Checkout was attempted on a cart with no items."""


class InvalidTransitionError(ValidationError):
    """An order status (or payment status) change is not allowed."""


class StoreUnavailableError(DomainException):
    """The underlying store failed, timed out, or kept conflicting."""


class ConcurrencyConflictError(DomainException):
    """A compare-and-set write lost against a concurrent writer."""


class WebhookVerificationError(DomainException):
    """A payment notification failed signature verification or decoding."""


class DuplicatePaymentEventError(DomainException):
    """The payment event id was already processed (benign)."""
