"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidLedgerError(DomainException):
    """Ledger snapshot violates the data model"""

    pass


class TalentNotFoundError(DomainException):
    """Requested talent is not part of the ledger snapshot"""

    pass


class ManagerNotFoundError(DomainException):
    """Requested manager is not part of the ledger snapshot"""

    pass


class UserNotFoundError(DomainException):
    """Requested user is not part of the ledger snapshot"""

    pass
