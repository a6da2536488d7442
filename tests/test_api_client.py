# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

import httpx

from healthpanda.auth.models import LoginPayload, RegisterPayload
from healthpanda.client.api import image_mime_type
from healthpanda.errors import (
    NETWORK_FAILURE,
    TIMEOUT_FAILURE,
    RequestTimeout,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from healthpanda.profile.models import ProfilePayload
from healthpanda.storage import PROFILE_KEY, MemoryKeyValueStore, TokenCredentials
from tests.fake_backend import FakeBackend, make_client

PROFILE = ProfilePayload(
    weight=72.5,
    height=178.0,
    body_type="2",
    fitness_goal="maintain",
    activity_level="moderate",
)


class TestApiClient(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.backend = FakeBackend()
        self.backend.add_user("a@b.com", "secret123")
        self.store = MemoryKeyValueStore()
        self.creds = TokenCredentials(self.store)
        self.api = make_client(self.creds, self.backend)

    async def asyncTearDown(self) -> None:
        await self.api.aclose()

    async def _login(self) -> str:
        resp = await self.api.login(LoginPayload(email="a@b.com", password="secret123"))
        self.creds.save_token(resp.access_token)
        return resp.access_token

    async def test_bearer_header_only_when_token_stored(self) -> None:
        await self.api.register(RegisterPayload(name="Jo", email="jo@x.com", password="pw123456"))
        self.assertEqual(self.backend.calls[-1], ("POST", "/api/register", None))

        token = await self._login()
        self.assertEqual(token, "tok1")
        await self.api.get_food_entries()
        self.assertEqual(self.backend.calls[-1], ("GET", "/api/food", "Bearer tok1"))

    async def test_401_on_any_endpoint_clears_token_and_profile(self) -> None:
        calls = {
            ("GET", "/api/profile"): lambda: self.api.get_profile(),
            ("POST", "/api/profile"): lambda: self.api.update_profile(PROFILE),
            ("POST", "/api/food"): lambda: self.api.scan_food(b"\xff\xd8fake"),
            ("GET", "/api/food"): lambda: self.api.get_food_entries(),
            ("POST", "/api/logout"): lambda: self.api.logout(),
        }
        for (method, path), call in calls.items():
            with self.subTest(endpoint=f"{method} {path}"):
                self.creds.save_token("tok-old")
                self.store.set(PROFILE_KEY, "{}")
                self.backend.failures.clear()
                self.backend.fail(method, path, 401, {"message": "Token has expired"})

                with self.assertRaises(UnauthorizedError) as ctx:
                    await call()
                self.assertEqual(ctx.exception.status_code, 401)
                self.assertEqual(ctx.exception.message, "Token has expired")
                self.assertIsNone(self.creds.get_token())
                self.assertIsNone(self.store.get(PROFILE_KEY))

    async def test_401_for_superseded_token_keeps_newer_token(self) -> None:
        creds = TokenCredentials(MemoryKeyValueStore())
        creds.save_token("tok1")

        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.headers["authorization"], "Bearer tok1")
            creds.save_token("tok2")  # a new login lands while this request is in flight
            return httpx.Response(401, json={"message": "Token has expired"})

        async with make_client(creds, transport=httpx.MockTransport(handler)) as api:
            with self.assertRaises(UnauthorizedError):
                await api.get_profile()
        self.assertEqual(creds.get_token(), "tok2")

    async def test_backend_message_is_used(self) -> None:
        with self.assertRaises(ServerError) as ctx:
            await self.api.login(LoginPayload(email="a@b.com", password="wrong"))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(str(ctx.exception), "Invalid credentials")

    async def test_detail_and_generic_fallbacks(self) -> None:
        self.backend.fail("GET", "/api/food", 422, {"detail": "Unprocessable"})
        with self.assertRaises(ServerError) as ctx:
            await self.api.get_food_entries()
        self.assertEqual(ctx.exception.message, "Unprocessable")

        self.backend.fail("GET", "/api/food", 502, "<html><body>Bad Gateway</body></html>")
        with self.assertRaises(ServerError) as ctx:
            await self.api.get_food_entries()
        self.assertEqual(ctx.exception.message, "Request failed")
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_unexpected_success_body_is_a_server_error(self) -> None:
        self.backend.fail("POST", "/api/login", 200, {"token": "nope"})
        with self.assertRaises(ServerError):
            await self.api.login(LoginPayload(email="a@b.com", password="secret123"))

    async def test_timeout_and_network_failures(self) -> None:
        def timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        def refused(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        creds = TokenCredentials(MemoryKeyValueStore())
        async with make_client(creds, transport=httpx.MockTransport(timeout), timeout=0.5) as api:
            with self.assertRaises(RequestTimeout) as ctx:
                await api.get_profile()
            self.assertEqual(str(ctx.exception), TIMEOUT_FAILURE)

        async with make_client(creds, transport=httpx.MockTransport(refused)) as api:
            with self.assertRaises(TransportError) as ctx:
                await api.get_profile()
            self.assertNotIsInstance(ctx.exception, RequestTimeout)
            self.assertEqual(str(ctx.exception), NETWORK_FAILURE)
            self.assertIsNone(ctx.exception.status_code)

    async def test_undecodable_body_is_a_transport_error(self) -> None:
        def bad_gzip(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not-gzip")

        creds = TokenCredentials(MemoryKeyValueStore())
        async with make_client(creds, transport=httpx.MockTransport(bad_gzip)) as api:
            with self.assertRaises(TransportError) as ctx:
                await api.get_profile()
        self.assertIsInstance(ctx.exception.__cause__, httpx.DecodingError)
        self.assertEqual(str(ctx.exception), NETWORK_FAILURE)

    async def test_scan_food_uploads_multipart_image(self) -> None:
        await self._login()
        result = await self.api.scan_food(b"\xff\xd8\xff\xe0jpeg-bytes")
        self.assertEqual(self.backend.uploads[-1], ("photo.jpg", "image/jpeg", 14))
        self.assertEqual(result.entry_id, 1)
        self.assertEqual(result.calories, 231.0)

        tmp = Path(tempfile.mkdtemp(prefix="healthpanda-test-"))
        try:
            image = tmp / "lunch_bowl.png"
            image.write_bytes(b"\x89PNG....")
            result = await self.api.scan_food(image)
        finally:
            shutil.rmtree(tmp, ignore_errors=True)
        self.assertEqual(self.backend.uploads[-1][:2], ("lunch_bowl.png", "image/png"))
        self.assertEqual(result.food_name, "lunch bowl")
        self.assertAlmostEqual(result.confidence, 0.87)

        entries = await self.api.get_food_entries()
        self.assertEqual([e.entry_id for e in entries], [1, 2])
        self.assertEqual(entries[1].image_path, "uploads/lunch_bowl.png")
        self.assertTrue(entries[0].created_on.startswith("2026-10-19"))

    async def test_food_entries_tolerate_out_of_range_values(self) -> None:
        await self._login()
        self.backend.fail(
            "GET",
            "/api/food",
            200,
            {"entries": [{"entry_id": 7, "food_name": "Rice", "calories": -1, "confidence": 250}]},
        )
        entries = await self.api.get_food_entries()
        self.assertEqual(len(entries), 1)
        self.assertIsNone(entries[0].calories)
        self.assertIsNone(entries[0].confidence)

    async def test_food_entries_missing_list_is_empty(self) -> None:
        await self._login()
        self.backend.fail("GET", "/api/food", 200, {})
        self.assertEqual(await self.api.get_food_entries(), [])

    async def test_profile_round_trip(self) -> None:
        await self._login()
        resp = await self.api.update_profile(PROFILE)
        self.assertEqual(resp.message, "Profile updated successfully")

        fetched = await self.api.get_profile()
        self.assertEqual(fetched.model_dump(), PROFILE.model_dump())

    async def test_logout_notification_can_be_disabled(self) -> None:
        creds = TokenCredentials(MemoryKeyValueStore())
        async with make_client(creds, self.backend, logout_path="") as api:
            await api.logout()
        self.assertEqual(self.backend.calls, [])

        await self.api.logout()
        self.assertEqual(self.backend.calls[-1][:2], ("POST", "/api/logout"))


class TestImageMimeType(unittest.TestCase):
    def test_extension_maps_to_image_type(self) -> None:
        self.assertEqual(image_mime_type("meal.PNG"), "image/png")
        self.assertEqual(image_mime_type("meal.jpg"), "image/jpeg")
        self.assertEqual(image_mime_type("meal.JPEG"), "image/jpeg")
        self.assertEqual(image_mime_type("meal"), "image/jpeg")


if __name__ == "__main__":
    unittest.main()
