"""
Token endpoint discovery and a client-credentials transport.

Path: credhub/core/auth.py

A CredHub server advertises its authorization server (UAA) at /info.
uaa_endpoint() resolves it; ClientCredentialsSession is a requests
Session that obtains bearer tokens from that endpoint with the OAuth2
client-credentials grant and attaches them to every request.

Usage:
    endpoint = uaa_endpoint("https://credhub.example.com:8844")
    session = ClientCredentialsSession(
        endpoint.token_url, "my-client", "my-secret",
        scopes=["credhub.read", "credhub.write"],
    )
    client = Client("https://credhub.example.com:8844", session)
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Union

import requests

from credhub.core.errors import (
    AuthenticationError,
    DecodingError,
    TransportError,
    UnexpectedStatus,
)


logger = logging.getLogger(__name__)

# Refresh this many seconds before the token actually expires
TOKEN_EXPIRY_SKEW = 30

# Assumed lifetime when the token response has no expires_in
DEFAULT_TOKEN_LIFETIME = 300


@dataclass(frozen=True)
class UAAEndpoint:
    """Authorization server location for a CredHub instance."""
    auth_url: str
    token_url: str


def uaa_endpoint(credhub_url: str, verify: Union[bool, str] = True,
                 session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None) -> UAAEndpoint:
    """
    Look up the token endpoint of the server guarding a CredHub instance.

    Args:
        credhub_url: Base URL of the CredHub server.
        verify: requests TLS verification setting (False, CA bundle path, True).
        session: Optional session to use instead of a one-off request.
        timeout: Request timeout in seconds.

    Returns:
        UAAEndpoint with auth and token URLs.
    """
    url = credhub_url.rstrip("/") + "/info"
    getter = session.get if session is not None else requests.get

    try:
        response = getter(url, verify=verify, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"GET {url} failed: {e}") from e

    if response.status_code != 200:
        raise UnexpectedStatus(200, response.status_code, response.text)

    try:
        auth_url = response.json()["auth-server"]["url"]
    except (ValueError, KeyError, TypeError) as e:
        raise DecodingError(f"{url}: no auth-server url in response") from e

    auth_url = auth_url.rstrip("/")
    logger.debug(f"Discovered authorization server {auth_url}")
    return UAAEndpoint(auth_url=auth_url, token_url=auth_url + "/oauth/token")


class ClientCredentialsSession(requests.Session):
    """
    requests Session authenticating with the client-credentials grant.

    A token is fetched on first use and again once it is about to
    expire. Refresh is serialized so concurrent requests share a token.
    """

    def __init__(self, token_url: str, client_id: str, client_secret: str,
                 scopes: Optional[List[str]] = None,
                 verify: Union[bool, str] = True):
        super().__init__()
        self.token_url = token_url
        self.client_id = client_id
        self.scopes = list(scopes or [])
        self.verify = verify
        self._client_secret = client_secret
        self._token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    @property
    def token_valid(self) -> bool:
        return self._token is not None and time.monotonic() < self._expires_at

    def fetch_token(self) -> str:
        """Request a new access token from the token endpoint."""
        data = {"grant_type": "client_credentials"}
        if self.scopes:
            data["scope"] = " ".join(self.scopes)

        logger.debug(f"Requesting token for client '{self.client_id}'")
        response = super().request(
            "POST",
            self.token_url,
            data=data,
            auth=(self.client_id, self._client_secret),
            headers={"Accept": "application/json"},
        )

        if response.status_code != 200:
            raise AuthenticationError(
                f"Token request for client '{self.client_id}' failed "
                f"({response.status_code})"
            ) from UnexpectedStatus(200, response.status_code, response.text)

        try:
            body = response.json()
            token = body["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise AuthenticationError("Token response has no access_token") from e

        expires_in = body.get("expires_in")
        if expires_in is None:
            expires_in = DEFAULT_TOKEN_LIFETIME
        try:
            lifetime = float(expires_in)
        except (ValueError, TypeError) as e:
            raise AuthenticationError(
                f"Token response has invalid expires_in: {expires_in!r}"
            ) from e

        self._token = token
        self._expires_at = time.monotonic() + max(lifetime - TOKEN_EXPIRY_SKEW, 0)
        return token

    def _current_token(self) -> str:
        with self._lock:
            if not self.token_valid:
                return self.fetch_token()
            return self._token

    def request(self, method, url, *args, **kwargs):
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"bearer {self._current_token()}"
        return super().request(method, url, *args, headers=headers, **kwargs)
