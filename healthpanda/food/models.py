# -*- coding: utf-8 -*-
"""Food — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class FoodScanResult(BaseModel):
    entry_id: int
    food_name: str
    calories: Optional[float] = Field(None, ge=0)
    confidence: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("calories", mode="before")
    @classmethod
    def _drop_negative_calories(cls, value: object) -> object:
        if _is_number(value) and value < 0:
            return None
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def _percent_to_ratio(cls, value: object) -> object:
        """Some backends report confidence as a percentage. Out-of-range values become None."""
        if not _is_number(value):
            return value
        if 1 < value <= 100:
            return value / 100.0
        if value < 0 or value > 100:
            return None
        return value


class FoodEntry(FoodScanResult):
    image_path: str = ""
    created_on: str = Field("", description="ISO8601 timestamp")


class FoodEntriesResponse(BaseModel):
    entries: List[FoodEntry] = Field(default_factory=list)

    @field_validator("entries", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return [] if value is None else value


class NutritionInfo(BaseModel):
    name: str = Field(..., min_length=1)
    calories: int = Field(0, ge=0)
    protein: int = Field(0, ge=0)
    carbs: int = Field(0, ge=0)
    fat: int = Field(0, ge=0)
    serving: str = ""


class DailyFoodSummary(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    calories: float = Field(0.0, ge=0)
    entry_count: int = Field(0, ge=0)
    unknown_calories: int = Field(0, ge=0, description="Entries without a calorie estimate")
