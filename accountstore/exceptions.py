"""Exceptions raised by the account store."""

from typing import Any


class AccountStoreError(RuntimeError):
    """
    Base class for account store failures.

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    context : kwargs
        Structured details about the failure, e.g. ``user_id`` or ``field``.

    """

    def __init__(self, message: str, **context: Any) -> None:
        super(AccountStoreError, self).__init__(message)
        self.message = message
        self.context = context


class ValidationFailed(AccountStoreError):
    """Request data is invalid."""


class PasswordMismatch(ValidationFailed):
    """Password and password confirmation do not match."""


class RegistrationConflict(AccountStoreError):
    """A unique attribute of the new user is already in use."""


class EmailAlreadyRegistered(RegistrationConflict):
    """Another user is registered with this email address."""


class UsernameTaken(RegistrationConflict):
    """Another user is registered with this username."""


class RegistrationFailed(AccountStoreError):
    """Could not create the user for an unexpected reason."""


class NoSuchUser(AccountStoreError):
    """User does not exist."""


class PasswordAuthenticationFailed(AccountStoreError):
    """Password is not correct."""


class UpdateFailed(AccountStoreError):
    """Could not update a list attribute of a user."""


class ListFull(UpdateFailed):
    """The list attribute has reached its maximum size."""


class ConnectionFailed(AccountStoreError):
    """The document store is unreachable or the connection was lost."""
