"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction data is missing a required field or has the wrong type"""

    pass


class ScoringServiceError(DomainException):
    """Remote scoring service returned an error or is unavailable"""

    pass
