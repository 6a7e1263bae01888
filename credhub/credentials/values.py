"""
Typed credential values.

Path: credhub/credentials/values.py

One frozen dataclass per credential type. The store sends values as an
untyped JSON payload next to a type tag; decode_value() turns that pair
into the matching dataclass and encode_value() goes the other way.
The variant is chosen from the tag alone, never from the payload shape.

Usage:
    from credhub.credentials.values import CredentialType, decode_value

    value = decode_value("user", {"username": "me", "password": "s3cret"})
    value.password            # "s3cret"
    encode_value(value)       # {"username": "me", "password": "s3cret", ...}
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional, Union

from credhub.core.errors import DecodingError


class CredentialType(str, Enum):
    """Credential type tags - match the store's `type` field."""
    VALUE = "value"
    PASSWORD = "password"
    JSON = "json"
    USER = "user"
    SSH = "ssh"
    RSA = "rsa"
    CERTIFICATE = "certificate"

    @classmethod
    def parse(cls, tag: Any) -> "CredentialType":
        """Resolve a wire tag, raising DecodingError for unknown ones."""
        try:
            return cls(tag)
        except ValueError:
            raise DecodingError(f"Unknown credential type: {tag!r}") from None


# =============================================================================
# Value variants
# =============================================================================

@dataclass(frozen=True)
class Value:
    """Opaque string value."""
    value: str

    type = CredentialType.VALUE


@dataclass(frozen=True)
class PasswordValue:
    """Password string. Same shape as Value, different generation policy."""
    value: str

    type = CredentialType.PASSWORD


@dataclass(frozen=True)
class JSONValue:
    """
    Arbitrary JSON document, kept as the decoded tree.

    Unhashable: the tree is usually a dict or list, and equal trees
    (1 and 1.0) have no common canonical form to hash.
    """
    value: Any

    type = CredentialType.JSON
    __hash__ = None


@dataclass(frozen=True)
class UserValue:
    """Username/password pair. The store fills in password_hash."""
    username: str
    password: str
    password_hash: Optional[str] = None

    type = CredentialType.USER


@dataclass(frozen=True)
class SSHValue:
    """SSH keypair."""
    public_key: Optional[str] = None
    private_key: Optional[str] = None
    public_key_fingerprint: Optional[str] = None

    type = CredentialType.SSH


@dataclass(frozen=True)
class RSAValue:
    """RSA keypair, PEM encoded."""
    public_key: Optional[str] = None
    private_key: Optional[str] = None

    type = CredentialType.RSA


@dataclass(frozen=True)
class CertificateValue:
    """X.509 certificate with its CA and private key, PEM encoded."""
    ca: Optional[str] = None
    certificate: Optional[str] = None
    private_key: Optional[str] = None

    type = CredentialType.CERTIFICATE


TypedValue = Union[
    Value, PasswordValue, JSONValue, UserValue, SSHValue, RSAValue, CertificateValue
]

VALUE_CLASSES = {
    CredentialType.VALUE: Value,
    CredentialType.PASSWORD: PasswordValue,
    CredentialType.JSON: JSONValue,
    CredentialType.USER: UserValue,
    CredentialType.SSH: SSHValue,
    CredentialType.RSA: RSAValue,
    CredentialType.CERTIFICATE: CertificateValue,
}

# Fields that must be present in an object payload
_REQUIRED_FIELDS = {
    CredentialType.USER: ("username", "password"),
}


# =============================================================================
# Decoding / encoding
# =============================================================================

def _decode_string(cred_type: CredentialType, payload: Any) -> str:
    if not isinstance(payload, str):
        raise DecodingError(
            f"'{cred_type.value}' value must be a string, got {type(payload).__name__}"
        )
    return payload


def _decode_object(cred_type: CredentialType, payload: Any) -> TypedValue:
    if not isinstance(payload, dict):
        raise DecodingError(
            f"'{cred_type.value}' value must be an object, got {type(payload).__name__}"
        )

    cls = VALUE_CLASSES[cred_type]
    for name in _REQUIRED_FIELDS.get(cred_type, ()):
        if payload.get(name) is None:
            raise DecodingError(f"'{cred_type.value}' value is missing '{name}'")

    kwargs = {}
    for f in fields(cls):
        item = payload.get(f.name)
        if item is not None and not isinstance(item, str):
            raise DecodingError(
                f"'{cred_type.value}' field '{f.name}' must be a string, "
                f"got {type(item).__name__}"
            )
        kwargs[f.name] = item
    return cls(**kwargs)


def decode_value(tag: Union[str, CredentialType], payload: Any) -> TypedValue:
    """
    Build the typed value for a wire payload.

    Args:
        tag: The credential's type tag.
        payload: The untyped `value` field of the response.

    Returns:
        The dataclass matching the tag.

    Raises:
        DecodingError: If the tag is unknown or the payload does not fit it.
    """
    cred_type = CredentialType.parse(tag)

    if cred_type is CredentialType.VALUE:
        return Value(_decode_string(cred_type, payload))
    if cred_type is CredentialType.PASSWORD:
        return PasswordValue(_decode_string(cred_type, payload))
    if cred_type is CredentialType.JSON:
        return JSONValue(payload)
    if cred_type in (CredentialType.USER, CredentialType.SSH,
                     CredentialType.RSA, CredentialType.CERTIFICATE):
        return _decode_object(cred_type, payload)

    raise DecodingError(f"No decoder for credential type: {cred_type.value}")


def encode_value(value: TypedValue) -> Any:
    """
    Produce the wire payload for a typed value.

    Scalar variants encode to their string (or JSON tree); object
    variants encode to a dict, leaving out fields that are None.
    """
    if isinstance(value, (Value, PasswordValue, JSONValue)):
        return value.value
    if isinstance(value, (UserValue, SSHValue, RSAValue, CertificateValue)):
        return {
            f.name: getattr(value, f.name)
            for f in fields(value)
            if getattr(value, f.name) is not None
        }
    raise TypeError(f"Not a credential value: {value!r}")


def values_equal(a: TypedValue, b: TypedValue) -> bool:
    """
    Deep, variant-aware equality used by the converge policy.

    Different variants never compare equal, even when the payloads
    match (a Value and a PasswordValue holding the same string differ).
    JSON values compare as decoded trees, so key order does not matter
    but 1 and True stay distinct.
    """
    if type(a) is not type(b):
        return False
    if isinstance(a, JSONValue):
        return _json_equal(a.value, b.value)
    return a == b


def _json_equal(a: Any, b: Any) -> bool:
    # bool is an int subclass; keep true/1 and false/0 apart
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(_json_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(_json_equal(x, y) for x, y in zip(a, b))
    return a == b
