"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Principal, rate, term or payment is malformed or out of range"""

    pass


class DuplicateEntityError(DomainException):
    """A record with the same natural key already exists"""

    pass
