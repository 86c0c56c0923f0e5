"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLedgerEntryError(DomainException):
    """Ledger entry amount cannot be coerced to a finite decimal"""

    pass
