"""
CredHub API client.

Path: credhub/core/client.py

Every operation is one request through the injected transport: build the
path and query/body, check the status code, decode the body into typed
credentials. The client holds no state besides its base URL, transport
and settings, so one instance can be shared between threads whenever
the transport can.

Usage:
    from credhub import Client, Credential, UserValue, OverwriteMode

    with Client.from_config() as client:
        cred = client.set(
            Credential(name="/sample-set", value=UserValue("me", "super-secret")),
            OverwriteMode.CONVERGE,
        )
        latest = client.get_latest_by_name("/sample-set")
        client.delete("/sample-set")
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import quote

from credhub.core.auth import ClientCredentialsSession, uaa_endpoint
from credhub.core.config import CONFLICT_RESOLUTION_CHOICES, Config, get_config
from credhub.core.errors import DecodingError, NotFound, UnexpectedStatus
from credhub.core.transport import Response, Transport, send
from credhub.credentials.models import (
    Credential,
    CredentialSummary,
    OverwriteMode,
    Permission,
)
from credhub.credentials.resolver import resolve_write
from credhub.credentials.values import CredentialType


logger = logging.getLogger(__name__)

DATA_PATH = "/api/v1/data"
REGENERATE_PATH = "/api/v1/regenerate"


class Client:
    """
    Client for the CredHub credential API.

    Args:
        url: Base URL of the CredHub server.
        transport: Authenticated transport, e.g. a requests Session that
                   attaches bearer tokens.
        conflict_resolution: "server" sends the overwrite mode to the store;
                             "client" reads the latest version and applies
                             the mode locally before writing.
        timeout: Per-request timeout passed to the transport.
    """

    def __init__(self, url: str, transport: Transport,
                 conflict_resolution: str = "server",
                 timeout: Optional[float] = None):
        if conflict_resolution not in CONFLICT_RESOLUTION_CHOICES:
            raise ValueError(
                f"Invalid conflict_resolution '{conflict_resolution}'. "
                f"Choose one of: {', '.join(CONFLICT_RESOLUTION_CHOICES)}"
            )
        self.url = url.rstrip("/")
        self.transport = transport
        self.conflict_resolution = conflict_resolution
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "Client":
        """
        Build a client authenticated with the client-credentials grant.

        Discovers the token endpoint from the server's /info document.
        """
        config = config or get_config()
        if not config.url:
            raise ValueError("No CredHub url configured (set 'url' or CREDHUB_URL)")
        if not config.client_id or not config.client_secret:
            raise ValueError(
                "No client credentials configured "
                "(set client_id/client_secret or CREDHUB_CLIENT/CREDHUB_SECRET)"
            )

        endpoint = uaa_endpoint(config.url, verify=config.verify, timeout=config.timeout)
        session = ClientCredentialsSession(
            endpoint.token_url,
            config.client_id,
            config.client_secret,
            scopes=config.scopes,
            verify=config.verify,
        )
        return cls(
            config.url,
            session,
            conflict_resolution=config.conflict_resolution,
            timeout=config.timeout,
        )

    def close(self):
        """Close the transport if it supports it."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # =========================================================================
    # Request plumbing
    # =========================================================================

    def _request(self, method: str, path: str, expected: int,
                 params: Optional[Dict[str, Any]] = None,
                 body: Any = None) -> Response:
        response = send(
            self.transport, method, self.url + path,
            params=params, json=body, timeout=self.timeout,
        )
        if response.status_code != expected:
            error = NotFound if response.status_code == 404 else UnexpectedStatus
            raise error(expected, response.status_code, response.text)
        return response

    @staticmethod
    def _json(response: Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodingError(f"Response body is not JSON: {e}") from e

    def _envelope(self, response: Response, key: str) -> List[Any]:
        body = self._json(response)
        if not isinstance(body, dict) or not isinstance(body.get(key), list):
            raise DecodingError(f"Response has no '{key}' list")
        return body[key]

    def _credentials(self, response: Response) -> List[Credential]:
        return [Credential.from_dict(item) for item in self._envelope(response, "data")]

    def _summaries(self, response: Response) -> List[CredentialSummary]:
        return [
            CredentialSummary.from_dict(item)
            for item in self._envelope(response, "credentials")
        ]

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_path(self, path: str) -> List[CredentialSummary]:
        """
        List credentials whose names live under a path.

        Raises:
            NotFound: If nothing lives under the path.
        """
        response = self._request("GET", DATA_PATH, 200, params={"path": path})
        summaries = self._summaries(response)
        if not summaries:
            raise NotFound(200, response.status_code, response.text,
                           message=f"no credentials found under path {path}")
        return summaries

    def find_by_partial_name(self, partial_name: str) -> List[CredentialSummary]:
        """List credentials whose name contains the given substring."""
        response = self._request("GET", DATA_PATH, 200, params={"name-like": partial_name})
        return self._summaries(response)

    def get_all_by_name(self, name: str) -> List[Credential]:
        """All versions of a credential, most recent first."""
        response = self._request("GET", DATA_PATH, 200, params={"name": name})
        creds = self._credentials(response)
        if not creds:
            raise NotFound(200, response.status_code, response.text,
                           message=f"no versions of {name}")
        return creds

    def get_latest_by_name(self, name: str) -> Credential:
        """The most recent version of a credential."""
        response = self._request("GET", DATA_PATH, 200,
                                 params={"name": name, "current": "true"})
        creds = self._credentials(response)
        if not creds:
            raise NotFound(200, response.status_code, response.text,
                           message=f"no versions of {name}")
        return creds[0]

    def get_versions_by_name(self, name: str, versions: int) -> List[Credential]:
        """
        The N most recent versions of a credential, most recent first.

        Fewer are returned when fewer exist.
        """
        if versions < 1:
            raise ValueError(f"versions must be at least 1, got {versions}")
        response = self._request("GET", DATA_PATH, 200,
                                 params={"name": name, "versions": str(versions)})
        return self._credentials(response)[:versions]

    def get_by_id(self, credential_id: str) -> Credential:
        """A single credential version by its id."""
        response = self._request("GET", f"{DATA_PATH}/{quote(credential_id, safe='')}", 200)
        return Credential.from_dict(self._json(response))

    def list_all_paths(self) -> List[str]:
        """Every path known to the store."""
        response = self._request("GET", DATA_PATH, 200, params={"paths": "true"})
        paths = []
        for item in self._envelope(response, "paths"):
            if not isinstance(item, dict) or "path" not in item:
                raise DecodingError(f"Malformed path entry: {item!r}")
            paths.append(item["path"])
        return paths

    # =========================================================================
    # Commands
    # =========================================================================

    def set(self, credential: Credential,
            mode: Union[OverwriteMode, str] = OverwriteMode.OVERWRITE,
            additional_permissions: Optional[Iterable[Permission]] = None) -> Credential:
        """
        Store a credential value under its name.

        Args:
            credential: Name and typed value to store. id/created are ignored.
            mode: What to do if the name already has versions.
            additional_permissions: Grants attached if a new credential is created.

        Returns:
            The new version, or the existing one when the mode keeps it.
        """
        mode = OverwriteMode(mode)
        wire_mode = mode

        if self.conflict_resolution == "client" and mode is not OverwriteMode.OVERWRITE:
            decision = resolve_write(credential, mode, self._latest_or_none(credential.name))
            if not decision.creates:
                return decision.credential
            wire_mode = OverwriteMode.OVERWRITE

        body = credential.to_dict()
        body["mode"] = wire_mode.value
        permissions = [p.to_dict() for p in additional_permissions or ()]
        if permissions:
            body["additional_permissions"] = permissions

        logger.debug(f"Setting {credential.name} ({credential.type.value}, {mode.value})")
        response = self._request("PUT", DATA_PATH, 200, body=body)
        return Credential.from_dict(self._json(response))

    def _latest_or_none(self, name: str) -> Optional[Credential]:
        try:
            return self.get_latest_by_name(name)
        except NotFound:
            return None

    def generate(self, name: str, cred_type: Union[CredentialType, str],
                 parameters: Optional[Dict[str, Any]] = None) -> Credential:
        """
        Have the store generate a new credential.

        Args:
            name: Credential name.
            cred_type: Type to generate (password, user, ssh, rsa, certificate).
            parameters: Generation options passed through unchanged,
                        e.g. {"length": 30}.
        """
        cred_type = CredentialType(cred_type)
        body = {
            "name": name,
            "type": cred_type.value,
            "parameters": dict(parameters or {}),
        }
        logger.debug(f"Generating {name} ({cred_type.value})")
        response = self._request("POST", DATA_PATH, 200, body=body)
        return Credential.from_dict(self._json(response))

    def regenerate(self, name: str) -> Credential:
        """Generate a new version with the parameters of the previous one."""
        logger.debug(f"Regenerating {name}")
        response = self._request("POST", REGENERATE_PATH, 200, body={"name": name})
        return Credential.from_dict(self._json(response))

    def delete(self, name: str):
        """
        Delete every version of a credential.

        Raises:
            NotFound: If the name has no versions.
        """
        logger.debug(f"Deleting {name}")
        self._request("DELETE", DATA_PATH, 204, params={"name": name})
