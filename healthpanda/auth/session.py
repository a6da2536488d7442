# -*- coding: utf-8 -*-
"""Auth — in-memory session state for a running client process.

The store is the single authoritative holder of the token and the cached profile.
It is constructed once and handed to whatever needs it; there is no module-level
instance.

State is derived from ``(token, profile)``::

    logged_out --login/register--> logged_in_no_profile --profile fetched--> logged_in_with_profile
    any --logout / 401--> logged_out

Every login, logout and forced logout bumps a session generation. Profile fetches
remember the generation they started in and drop their result if it has moved on,
so a slow refresh can never repopulate a session that was already logged out.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..client.api import ApiClient
from ..errors import ApiError, AuthError, HealthPandaError, TransportError, message_from_payload
from ..profile.models import ProfilePayload, UserProfile
from ..storage import TokenCredentials
from .models import AuthState, LoginPayload, MessageResponse, RegisterPayload
from .validation import validate_credentials

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Login failed"
REGISTRATION_FAILED = "Registration failed"


def _user_message(exc: ApiError, fallback: str) -> str:
    if isinstance(exc, TransportError):
        return exc.message
    return message_from_payload(exc.payload, fallback)


class SessionStore:
    def __init__(self, api: ApiClient, credentials: TokenCredentials) -> None:
        self.api = api
        self.credentials = credentials
        self._token: Optional[str] = None
        self._profile: Optional[UserProfile] = None
        self._generation = 0
        self._loading = True
        self._background: Optional[asyncio.Task] = None

    # ---- derived state ----

    def _reconcile(self) -> None:
        # The HTTP auth stage clears storage on a 401 without telling us.
        if self._token and not self.credentials.get_token():
            logger.info("stored token was cleared, ending session")
            self._reset()

    def _reset(self) -> None:
        self._generation += 1
        self._token = None
        self._profile = None

    def _end_session(self) -> None:
        self._reset()
        self.credentials.clear()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def token(self) -> Optional[str]:
        self._reconcile()
        return self._token

    @property
    def profile(self) -> Optional[UserProfile]:
        return self._profile if self.token else None

    @property
    def state(self) -> AuthState:
        if not self.token:
            return AuthState.logged_out
        if self._profile is None:
            return AuthState.logged_in_no_profile
        return AuthState.logged_in_with_profile

    @property
    def is_logged_in(self) -> bool:
        return self.state is not AuthState.logged_out

    @property
    def is_loading(self) -> bool:
        return self._loading

    # ---- lifecycle ----

    async def initialize(self) -> None:
        """Restore a persisted session, then load the profile in the background.

        The token is trusted optimistically; the profile fetch is the only check.
        """
        try:
            stored = self.credentials.get_token()
        except Exception as exc:
            logger.error("auth check failed: %s", exc)
            return
        finally:
            self._loading = False

        if not stored:
            return
        self._generation += 1
        self._token = stored
        self._profile = None
        self._background = asyncio.create_task(self._load_profile(self._generation))

    async def wait_idle(self) -> None:
        task = self._background
        if task is not None and not task.done():
            await task

    async def _load_profile(self, generation: int) -> bool:
        try:
            profile = await self.api.get_profile()
        except HealthPandaError as exc:
            # 404 here just means onboarding is not finished yet.
            logger.info("profile not available: %s", exc)
            return False
        except Exception as exc:
            logger.warning("profile fetch failed: %s", exc)
            return False
        if generation != self._generation:
            logger.info("dropping profile from a superseded session")
            return False
        self._profile = profile
        return True

    # ---- operations ----

    async def login(self, email: str, password: str) -> None:
        validate_credentials(email, password)
        try:
            resp = await self.api.login(LoginPayload(email=email, password=password))
        except ApiError as exc:
            logger.warning("login failed: %s", exc)
            self._end_session()
            raise AuthError(_user_message(exc, LOGIN_FAILED)) from exc

        self.credentials.save_token(resp.access_token)
        self._generation += 1
        self._token = resp.access_token
        self._profile = None
        await self._load_profile(self._generation)

    async def register(self, name: str, email: str, password: str) -> None:
        """Create the account, then log in with the same credentials."""
        validate_credentials(email, password, name=name, require_name=True)
        try:
            await self.api.register(RegisterPayload(name=name, email=email, password=password))
        except ApiError as exc:
            logger.warning("registration failed: %s", exc)
            self._end_session()
            raise AuthError(_user_message(exc, REGISTRATION_FAILED)) from exc
        await self.login(email, password)

    async def logout(self) -> None:
        try:
            await self.api.logout()
        except Exception as exc:
            logger.warning("logout notification failed: %s", exc)
        finally:
            self._end_session()

    async def refresh_profile(self) -> None:
        """Re-fetch the profile. On failure the previous copy stays cached."""
        if not self.token:
            logger.info("refresh_profile skipped: not logged in")
            return
        if not await self._load_profile(self._generation):
            logger.warning("failed to refresh profile, keeping cached copy")

    async def update_profile(self, payload: ProfilePayload) -> MessageResponse:
        resp = await self.api.update_profile(payload)
        await self.refresh_profile()
        return resp
