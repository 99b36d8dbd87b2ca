"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class NotFoundError(DomainException):
    """A requested invoice or tax region does not exist."""


class PersistenceError(DomainException):
    """A file could not be read, written or encoded."""


class ConfigurationError(DomainException):
    """The tax table is missing or malformed."""


class RenderingError(DomainException):
    """The document renderer could not produce output."""
