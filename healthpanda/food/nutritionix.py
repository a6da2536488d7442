# -*- coding: utf-8 -*-
"""Food — natural-language nutrition lookup via the Nutritionix API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..errors import (
    ApiError,
    ConfigurationError,
    RequestTimeout,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
    message_from_payload,
)
from .models import NutritionInfo

logger = logging.getLogger(__name__)


def _round(value: Any) -> int:
    try:
        return max(0, int(round(float(value or 0))))
    except (TypeError, ValueError):
        return 0


def _serving(food: Dict[str, Any]) -> str:
    qty = food.get("serving_qty")
    unit = food.get("serving_unit")
    if qty is None and not unit:
        return ""
    return f"{qty if qty is not None else ''} {unit or ''}".strip()


def parse_foods(data: object) -> List[NutritionInfo]:
    if not isinstance(data, dict):
        return []
    foods = data.get("foods")
    if not isinstance(foods, list):
        return []
    out: List[NutritionInfo] = []
    for food in foods:
        if not isinstance(food, dict):
            continue
        name = str(food.get("food_name") or "").strip()
        if not name:
            continue
        out.append(
            NutritionInfo(
                name=name,
                calories=_round(food.get("nf_calories")),
                protein=_round(food.get("nf_protein")),
                carbs=_round(food.get("nf_total_carbohydrate")),
                fat=_round(food.get("nf_total_fat")),
                serving=_serving(food),
            )
        )
    return out


class NutritionixClient:
    def __init__(
        self,
        app_id: str,
        app_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.nutritionix_base_url).rstrip("/")
        self.timeout = float(timeout if timeout is not None else settings.request_timeout)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"x-app-id": app_id, "x-app-key": app_key},
            transport=transport,
        )

    @classmethod
    def from_settings(cls) -> Optional["NutritionixClient"]:
        if not settings.nutritionix_configured:
            return None
        return cls(settings.nutritionix_app_id or "", settings.nutritionix_app_key or "")

    async def __aenter__(self) -> "NutritionixClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def natural_nutrients(self, query: str) -> List[NutritionInfo]:
        try:
            resp = await self._client.post("/natural/nutrients", json={"query": query})
        except httpx.TimeoutException as exc:
            raise RequestTimeout() from exc
        except httpx.RequestError as exc:
            raise TransportError() from exc

        try:
            data = resp.json() if resp.content else None
        except ValueError:
            data = resp.text
        if resp.status_code == 401:
            raise UnauthorizedError(
                message_from_payload(data, "Invalid Nutritionix credentials"),
                status_code=401,
                payload=data,
            )
        if not resp.is_success:
            raise ServerError(message_from_payload(data), status_code=resp.status_code, payload=data)
        return parse_foods(data)


def estimate(query: str) -> NutritionInfo:
    """Rough placeholder used when no lookup service is available in demo mode."""
    return NutritionInfo(name=query, calories=250, protein=12, carbs=30, fat=8, serving="1 serving")


async def lookup_nutrition(
    query: str,
    *,
    client: Optional[NutritionixClient] = None,
    demo_mode: Optional[bool] = None,
) -> List[NutritionInfo]:
    query = (query or "").strip()
    if not query:
        raise ValidationError("Enter a food to look up", field="query")
    demo = settings.demo_mode if demo_mode is None else demo_mode

    if client is None:
        if demo:
            return [estimate(query)]
        raise ConfigurationError(
            "Nutritionix is not configured (set NUTRITIONIX_APP_ID and NUTRITIONIX_APP_KEY)"
        )

    try:
        results = await client.natural_nutrients(query)
    except ApiError as exc:
        if not demo:
            raise
        logger.warning("nutritionix lookup failed, using demo estimate: %s", exc)
        return [estimate(query)]
    if not results and demo:
        logger.info("no nutritionix match for %r, using demo estimate", query)
        return [estimate(query)]
    return results
