# -*- coding: utf-8 -*-
"""Food — per-day totals over logged entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .models import DailyFoodSummary, FoodEntry


def _date_prefix(iso8601: str) -> str:
    return (iso8601 or "")[:10]


@dataclass
class _Agg:
    calories: float = 0.0
    entry_count: int = 0
    unknown_calories: int = 0


def summarize_entries(entries: Iterable[FoodEntry]) -> List[DailyFoodSummary]:
    days: Dict[str, _Agg] = {}
    for entry in entries:
        day = _date_prefix(entry.created_on)
        if not day:
            continue
        agg = days.setdefault(day, _Agg())
        agg.entry_count += 1
        if entry.calories is None:
            agg.unknown_calories += 1
        else:
            agg.calories += float(entry.calories)
    return [
        DailyFoodSummary(
            date=day,
            calories=round(agg.calories, 1),
            entry_count=agg.entry_count,
            unknown_calories=agg.unknown_calories,
        )
        for day, agg in sorted(days.items())
    ]
