"""
Authenticated transport contract.

Path: credhub/core/transport.py

The client never builds its own HTTP connection. It is handed an object
that can perform an authorized request and return a response; attaching
and refreshing bearer tokens, TLS and timeouts all belong to that object.
A plain requests.Session satisfies the contract, as does
credhub.core.auth.ClientCredentialsSession.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

import requests

from credhub.core.errors import TransportError


logger = logging.getLogger(__name__)


@runtime_checkable
class Response(Protocol):
    """The parts of a response the client reads."""

    status_code: int
    text: str

    def json(self) -> Any:
        ...


@runtime_checkable
class Transport(Protocol):
    """Anything that performs an authorized request, e.g. requests.Session."""

    def request(self, method: str, url: str, params: Optional[Mapping[str, Any]] = None,
                json: Any = None, headers: Optional[Dict[str, str]] = None,
                timeout: Optional[float] = None) -> Response:
        ...


def send(transport: Transport, method: str, url: str,
         params: Optional[Mapping[str, Any]] = None, json: Any = None,
         timeout: Optional[float] = None) -> Response:
    """
    Issue one request through the transport.

    Transport failures (connection, TLS, timeout) are re-raised as
    TransportError with the original exception chained.
    """
    headers = {"Accept": "application/json"}
    if json is not None:
        headers["Content-Type"] = "application/json"

    kwargs: Dict[str, Any] = {"params": params, "headers": headers}
    if json is not None:
        kwargs["json"] = json
    if timeout is not None:
        kwargs["timeout"] = timeout

    try:
        response = transport.request(method, url, **kwargs)
    except (requests.RequestException, OSError) as e:
        logger.debug(f"{method} {url}: transport failure: {e}")
        raise TransportError(f"{method} {url} failed: {e}") from e

    logger.debug(f"{method} {url} -> {response.status_code}")
    return response
