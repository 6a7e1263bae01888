"""Credential data model and write-conflict policy."""

from credhub.credentials.values import (
    CredentialType,
    Value,
    PasswordValue,
    JSONValue,
    UserValue,
    SSHValue,
    RSAValue,
    CertificateValue,
    decode_value,
    encode_value,
    values_equal,
)
from credhub.credentials.models import (
    Credential,
    CredentialSummary,
    OverwriteMode,
    Permission,
)
from credhub.credentials.resolver import WriteAction, WriteDecision, resolve_write

__all__ = [
    "CredentialType",
    "Value",
    "PasswordValue",
    "JSONValue",
    "UserValue",
    "SSHValue",
    "RSAValue",
    "CertificateValue",
    "decode_value",
    "encode_value",
    "values_equal",
    "Credential",
    "CredentialSummary",
    "OverwriteMode",
    "Permission",
    "WriteAction",
    "WriteDecision",
    "resolve_write",
]
