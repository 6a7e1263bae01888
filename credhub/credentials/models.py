"""
Credential data models.

Dataclasses representing credentials as exchanged with the store.
Every instance is a snapshot of one version; nothing here talks to the
network.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from credhub.core.errors import DecodingError, ValueTypeError
from credhub.credentials.values import (
    CredentialType,
    TypedValue,
    decode_value,
    encode_value,
)

V = TypeVar("V")


class OverwriteMode(str, Enum):
    """Write-conflict policy for Set - matches the store's `mode` strings."""
    OVERWRITE = "overwrite"
    NO_OVERWRITE = "no-overwrite"
    CONVERGE = "converge"


def _require(data: Dict[str, Any], key: str, what: str) -> Any:
    if key not in data:
        raise DecodingError(f"{what} is missing '{key}'")
    return data[key]


@dataclass(frozen=True)
class Credential:
    """
    One version of a named credential.

    Hashable when its value is; credentials holding a JSONValue are not.
    """

    name: str
    value: TypedValue
    id: Optional[str] = None
    created: Optional[str] = None  # version_created_at, set by the store

    @property
    def type(self) -> CredentialType:
        """Type tag, always the one of the carried value."""
        return self.value.type

    def value_as(self, cls: Type[V]) -> V:
        """
        Return the value as a specific variant.

        Raises:
            ValueTypeError: If the credential holds a different variant.
        """
        if not isinstance(self.value, cls):
            raise ValueTypeError(
                f"{self.name} is a '{self.type.value}' credential, "
                f"not {cls.__name__}"
            )
        return self.value

    @classmethod
    def from_dict(cls, data: Any) -> "Credential":
        """Decode a credential object from a response body."""
        if not isinstance(data, dict):
            raise DecodingError(f"Credential must be an object, got {type(data).__name__}")

        name = _require(data, "name", "Credential")
        tag = _require(data, "type", f"Credential {name}")
        payload = _require(data, "value", f"Credential {name}")
        try:
            value = decode_value(tag, payload)
        except DecodingError as e:
            raise DecodingError(f"{name}: {e}") from e

        return cls(
            name=name,
            value=value,
            id=data.get("id"),
            created=data.get("version_created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form used in write requests. Store-assigned fields are left out."""
        return {
            "name": self.name,
            "type": self.type.value,
            "value": encode_value(self.value),
        }


@dataclass(frozen=True)
class CredentialSummary:
    """Name and timestamp pair returned by the find operations."""

    name: str
    created: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CredentialSummary":
        if not isinstance(data, dict):
            raise DecodingError(f"Credential summary must be an object, got {type(data).__name__}")
        return cls(
            name=_require(data, "name", "Credential summary"),
            created=data.get("version_created_at"),
        )


@dataclass(frozen=True)
class Permission:
    """Access grant attached to a credential at creation time."""

    actor: str
    operations: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "operations", tuple(self.operations))

    def to_dict(self) -> Dict[str, Any]:
        return {"actor": self.actor, "operations": list(self.operations)}
