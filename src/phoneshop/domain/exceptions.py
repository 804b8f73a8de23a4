"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Every subclass carries a stable ``code`` so callers can branch on the
cause of a failure instead of parsing messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainException):
    """Structurally invalid input (bad amount, missing debtor, ...)."""

    code = "VALIDATION_ERROR"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "NOT_FOUND"


class InvalidTransitionError(DomainException):
    """The operation is not allowed from the entity's current state."""

    code = "INVALID_TRANSITION"


class NoOutstandingObligationsError(DomainException):
    """A payment was applied to a debtor who owes nothing."""

    code = "NO_OUTSTANDING_OBLIGATIONS"


class OverAllocationError(DomainException):
    """A payment exceeds the debtor's total outstanding debt."""

    code = "OVER_ALLOCATION"


class ConcurrencyConflictError(DomainException):
    """The store detected a conflicting concurrent write."""

    code = "CONCURRENCY_CONFLICT"
