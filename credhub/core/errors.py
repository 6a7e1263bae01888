"""
CredHub client errors.

Path: credhub/core/errors.py

Every failure raised by the client derives from CredHubError so callers
can catch the whole family at once, or branch on NotFound which is the
case they usually care about.
"""

from typing import Optional


class CredHubError(Exception):
    """Base class for all client errors."""


class DecodingError(CredHubError):
    """Response payload does not match the shape declared by its type tag."""


class ValueTypeError(CredHubError, TypeError):
    """A credential value was accessed as the wrong variant."""


class UnexpectedStatus(CredHubError):
    """The store answered with a status code outside the expected one."""

    def __init__(self, expected: int, actual: int, body: Optional[str] = None,
                 message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.body = body
        super().__init__(message or f"expected return code {expected}, got {actual}")


class NotFound(UnexpectedStatus):
    """The requested name, id or path does not exist in the store."""


class TransportError(CredHubError):
    """The authenticated transport failed before a response was received."""


class AuthenticationError(TransportError):
    """The transport could not obtain an access token."""
