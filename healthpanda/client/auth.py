# -*- coding: utf-8 -*-
"""Client — bearer token stage of the HTTP pipeline."""

from __future__ import annotations

import logging
from typing import Generator, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    def get_token(self) -> Optional[str]: ...

    def clear(self) -> None: ...


class BearerTokenAuth(httpx.Auth):
    """Attach the stored token to every request and drop it on a 401.

    The 401 reaction is passive: stored credentials are cleared and the response is
    handed back to the caller unchanged. There is no refresh or retry. A 401 for a
    token that has since been replaced by a newer login leaves the newer one alone.
    """

    def __init__(self, credentials: CredentialProvider) -> None:
        self.credentials = credentials

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        token = self.credentials.get_token()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code != 401:
            return
        current = self.credentials.get_token()
        if current and current != token:
            logger.info("401 for a superseded token on %s %s, ignoring", request.method, request.url.path)
            return
        logger.info("401 from %s %s, clearing stored credentials", request.method, request.url.path)
        self.credentials.clear()
