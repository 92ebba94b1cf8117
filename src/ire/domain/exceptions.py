"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Only ConcurrencyConflictError is retried internally; everything else is
terminal and reaches the caller unchanged.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AlreadyExistsError(DomainException):
    """An entity with the same identity is already tracked."""


class InsufficientStockError(DomainException):
    """A reservation asked for more than the available stock."""


class WouldUnderflowError(DomainException):
    """A stock change would push on-hand below zero or below the reserved amount."""


class QuantityMismatchError(DomainException):
    """A commit quantity is inconsistent with its reservation."""


class AlreadyCommittedError(DomainException):
    """The reservation has already been committed."""


class AlreadyAcknowledgedError(DomainException):
    """The alert has already been acknowledged."""


class OutstandingReservationsError(DomainException):
    """Stock tracking cannot be removed while reservations are outstanding."""


class ConcurrencyConflictError(DomainException):
    """A concurrent writer changed the record first. Safe to retry."""


class TransientConflictError(DomainException):
    """Contention did not clear within the retry budget. The caller may retry."""
