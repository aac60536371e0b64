"""Domain-specific exceptions"""

from typing import Iterable


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Required input is missing or empty"""

    def __init__(self, message: str, fields: Iterable[str] = ()):
        self.fields = list(fields)
        if self.fields:
            message = f"{message}: {', '.join(self.fields)}"
        super().__init__(message)


class EncodingError(DomainException):
    """A value or sub-document cannot be serialized for the gateway"""

    pass


class MissingFieldError(DomainException):
    """A required fingerprint position has no value"""

    def __init__(self, field: str, ordering: str):
        self.field = field
        self.ordering = ordering
        super().__init__(f"Missing field '{field}' for {ordering} fingerprint")


class ConfigurationError(DomainException):
    """Gateway credentials are not configured"""

    pass
