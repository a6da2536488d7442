# -*- coding: utf-8 -*-
"""Profile — derived body metrics."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ValidationError
from .models import UserProfile


@dataclass
class BmiResult:
    bmi: float
    category: str
    weight_kg: float
    height_cm: float


def calculate_bmi(weight_kg: float, height_cm: float) -> BmiResult:
    """
    Body mass index with WHO adult cut-offs.

    Args:
        weight_kg: body weight (kg)
        height_cm: height (cm)
    """
    if weight_kg <= 0 or height_cm <= 0:
        field = "weight" if weight_kg <= 0 else "height"
        raise ValidationError("Weight and height must be positive", field=field)
    height_m = height_cm / 100
    bmi = weight_kg / (height_m ** 2)

    if bmi < 18.5:
        category = "Underweight"
    elif bmi < 25:
        category = "Normal"
    elif bmi < 30:
        category = "Overweight"
    else:
        category = "Obese"

    return BmiResult(bmi=round(bmi, 1), category=category, weight_kg=weight_kg, height_cm=height_cm)


def profile_bmi(profile: UserProfile) -> BmiResult:
    return calculate_bmi(profile.weight, profile.height)
