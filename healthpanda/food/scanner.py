# -*- coding: utf-8 -*-
"""Food — photo scanner with an explicit demo mode."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from ..client.api import ApiClient, ImageSource
from ..config import settings
from .models import FoodScanResult

logger = logging.getLogger(__name__)

# Placeholder results served in demo mode.
DEMO_FOODS: List[FoodScanResult] = [
    FoodScanResult(entry_id=0, food_name="Grilled Chicken Breast", calories=231),
    FoodScanResult(entry_id=0, food_name="Brown Rice", calories=216),
    FoodScanResult(entry_id=0, food_name="Caesar Salad", calories=180),
    FoodScanResult(entry_id=0, food_name="Avocado Toast", calories=320),
    FoodScanResult(entry_id=0, food_name="Greek Yogurt", calories=100),
]


class FoodScanner:
    """Estimate calories for a food photo.

    Live mode uploads the image and lets every failure propagate. Demo mode never
    touches the network and answers with a random placeholder from ``DEMO_FOODS``.
    """

    def __init__(
        self,
        api: Optional[ApiClient],
        *,
        demo_mode: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.api = api
        self.demo_mode = settings.demo_mode if demo_mode is None else demo_mode
        self.rng = rng or random.Random()
        if not self.demo_mode and api is None:
            raise ValueError("FoodScanner needs an ApiClient unless demo_mode is on")

    async def scan(self, image: ImageSource, filename: Optional[str] = None) -> FoodScanResult:
        if self.demo_mode:
            result = self.rng.choice(DEMO_FOODS).model_copy()
            logger.info("demo scan: %s (%s kcal)", result.food_name, result.calories)
            return result
        assert self.api is not None
        return await self.api.scan_food(image, filename)
