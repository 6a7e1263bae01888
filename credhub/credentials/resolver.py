"""
Write-conflict resolution for Set.

Path: credhub/credentials/resolver.py

Given a proposed credential, an overwrite mode and the latest version
already stored under the same name (if any), decide whether the store
should create a new version or hand back the existing one.

The store normally applies this policy itself when it receives the
`mode` field. The client uses resolve_write() when it is configured
with conflict_resolution="client", for stores that ignore `mode`.

Usage:
    decision = resolve_write(proposed, OverwriteMode.CONVERGE, latest)
    if decision.action is WriteAction.KEEP:
        return decision.credential
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from credhub.credentials.models import Credential, OverwriteMode
from credhub.credentials.values import SSHValue, TypedValue, UserValue, values_equal


logger = logging.getLogger(__name__)


class WriteAction(Enum):
    """Outcome of a conflict check."""
    CREATE = "create"
    KEEP = "keep"


@dataclass(frozen=True)
class WriteDecision:
    """What to do with a proposed write."""
    action: WriteAction
    credential: Optional[Credential] = None  # the existing version for KEEP

    @property
    def creates(self) -> bool:
        return self.action is WriteAction.CREATE


CREATE = WriteDecision(WriteAction.CREATE)

# Fields the store computes when a write leaves them out
DERIVED_FIELDS = {
    UserValue: ("password_hash",),
    SSHValue: ("public_key_fingerprint",),
}


def with_derived_fields(proposed: TypedValue, existing: TypedValue) -> TypedValue:
    """
    Copy store-computed fields the proposal left unset from the existing value.

    A proposal that sets them explicitly is compared as given.
    """
    if type(proposed) is not type(existing):
        return proposed
    missing = {
        name: getattr(existing, name)
        for name in DERIVED_FIELDS.get(type(proposed), ())
        if getattr(proposed, name) is None
    }
    return replace(proposed, **missing) if missing else proposed


def resolve_write(proposed: Credential, mode: OverwriteMode,
                  existing: Optional[Credential]) -> WriteDecision:
    """
    Apply an overwrite mode to a proposed credential.

    Args:
        proposed: The credential the caller wants to store.
        mode: Overwrite policy.
        existing: Most recent stored version under the same name, or None.

    Returns:
        WriteDecision. KEEP carries the existing credential unchanged.
    """
    mode = OverwriteMode(mode)

    if existing is None or mode is OverwriteMode.OVERWRITE:
        return CREATE

    if mode is OverwriteMode.NO_OVERWRITE:
        logger.debug(f"{proposed.name}: exists, keeping version {existing.id} (no-overwrite)")
        return WriteDecision(WriteAction.KEEP, existing)

    # Converge
    if values_equal(with_derived_fields(proposed.value, existing.value), existing.value):
        logger.debug(f"{proposed.name}: value unchanged, keeping version {existing.id}")
        return WriteDecision(WriteAction.KEEP, existing)

    logger.debug(f"{proposed.name}: value changed, creating new version")
    return CREATE
