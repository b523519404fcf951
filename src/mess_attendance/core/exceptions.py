class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the target row does not exist."""


class AttendanceLocked(DomainError):
    """Raised when a student tries to change an already marked day."""


class PartialUserCreation(DomainError):
    """The account was created but the role row could not be written."""

    def __init__(self, message: str, *, user_id: str):
        super().__init__(message)
        self.user_id = user_id
