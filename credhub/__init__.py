"""
credhub - Python client for the CredHub credential management API.

Usage:
    from credhub import Client, Credential, PasswordValue, OverwriteMode

    client = Client(url, authenticated_session)
    client.set(Credential("/team/db-password", PasswordValue("s3cret")),
               OverwriteMode.CONVERGE)
"""

__version__ = "0.1.0"

from credhub.core.config import Config, get_config
from credhub.core.errors import (
    CredHubError,
    DecodingError,
    ValueTypeError,
    UnexpectedStatus,
    NotFound,
    TransportError,
    AuthenticationError,
)
from credhub.core.transport import Transport
from credhub.core.auth import UAAEndpoint, uaa_endpoint, ClientCredentialsSession
from credhub.core.client import Client
from credhub.credentials import (
    CredentialType,
    Value,
    PasswordValue,
    JSONValue,
    UserValue,
    SSHValue,
    RSAValue,
    CertificateValue,
    Credential,
    CredentialSummary,
    OverwriteMode,
    Permission,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "get_config",
    # Errors
    "CredHubError",
    "DecodingError",
    "ValueTypeError",
    "UnexpectedStatus",
    "NotFound",
    "TransportError",
    "AuthenticationError",
    # Transport / auth
    "Transport",
    "UAAEndpoint",
    "uaa_endpoint",
    "ClientCredentialsSession",
    # Client
    "Client",
    # Credentials
    "CredentialType",
    "Value",
    "PasswordValue",
    "JSONValue",
    "UserValue",
    "SSHValue",
    "RSAValue",
    "CertificateValue",
    "Credential",
    "CredentialSummary",
    "OverwriteMode",
    "Permission",
]
