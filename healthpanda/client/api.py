# -*- coding: utf-8 -*-
"""Client — typed wrappers around the Health Panda backend HTTP API."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..auth.models import LoginPayload, MessageResponse, RegisterPayload, TokenResponse
from ..config import settings
from ..errors import (
    GENERIC_FAILURE,
    RequestTimeout,
    ServerError,
    TransportError,
    UnauthorizedError,
    message_from_payload,
)
from ..food.models import FoodEntriesResponse, FoodEntry, FoodScanResult
from ..profile.models import ProfilePayload, UserProfile
from .auth import BearerTokenAuth, CredentialProvider

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ImageSource = Union[str, Path, bytes]

DEFAULT_IMAGE_NAME = "photo.jpg"
_EXT_RE = re.compile(r"\.(\w+)$")


def image_mime_type(filename: str) -> str:
    match = _EXT_RE.search(filename)
    if not match:
        return "image/jpeg"
    ext = match.group(1).lower()
    return "image/jpeg" if ext == "jpg" else f"image/{ext}"


def _image_part(image: ImageSource, filename: Optional[str]) -> Tuple[str, bytes, str]:
    if isinstance(image, (bytes, bytearray)):
        name = filename or DEFAULT_IMAGE_NAME
        data = bytes(image)
    else:
        path = Path(image).expanduser()
        name = filename or path.name or DEFAULT_IMAGE_NAME
        data = path.read_bytes()
    return name, data, image_mime_type(name)


def _body(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


class ApiClient:
    """Single point of HTTP egress.

    Every request goes through :class:`BearerTokenAuth`; errors come back as the
    :mod:`healthpanda.errors` hierarchy. No caching, batching or retries.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        logout_path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = float(timeout if timeout is not None else settings.request_timeout)
        self.logout_path = settings.logout_path if logout_path is None else logout_path
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            auth=BearerTokenAuth(credentials),
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Tuple[str, bytes, str]]] = None,
    ) -> Any:
        try:
            resp = await self._client.request(method, path, json=json, files=files)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out after %.1fs", method, path, self.timeout)
            raise RequestTimeout() from exc
        except httpx.RequestError as exc:
            # Connection failures, undecodable bodies, redirect loops.
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError() from exc

        payload = _body(resp)
        if resp.status_code == 401:
            raise UnauthorizedError(
                message_from_payload(payload, "Not authenticated"),
                status_code=401,
                payload=payload,
            )
        if not resp.is_success:
            raise ServerError(
                message_from_payload(payload),
                status_code=resp.status_code,
                payload=payload,
            )
        return payload

    @staticmethod
    def _parse(model: Type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload if payload is not None else {})
        except PydanticValidationError as exc:
            logger.warning("unexpected %s payload: %s", model.__name__, exc)
            raise ServerError(GENERIC_FAILURE, payload=payload) from exc

    # ---- auth ----

    async def register(self, payload: RegisterPayload) -> MessageResponse:
        data = await self._request("POST", "/register", json=payload.model_dump())
        return self._parse(MessageResponse, data)

    async def login(self, payload: LoginPayload) -> TokenResponse:
        data = await self._request("POST", "/login", json=payload.model_dump())
        return self._parse(TokenResponse, data)

    async def logout(self) -> None:
        """Server-side logout notification. Local credentials are the session store's job."""
        if not self.logout_path:
            return
        await self._request("POST", self.logout_path)

    # ---- profile ----

    async def get_profile(self) -> UserProfile:
        data = await self._request("GET", "/profile")
        return self._parse(UserProfile, data)

    async def update_profile(self, payload: ProfilePayload) -> MessageResponse:
        data = await self._request("POST", "/profile", json=payload.model_dump())
        return self._parse(MessageResponse, data)

    # ---- food ----

    async def scan_food(self, image: ImageSource, filename: Optional[str] = None) -> FoodScanResult:
        data = await self._request("POST", "/food", files={"image": _image_part(image, filename)})
        return self._parse(FoodScanResult, data)

    async def get_food_entries(self) -> List[FoodEntry]:
        data = await self._request("GET", "/food")
        return self._parse(FoodEntriesResponse, data).entries
