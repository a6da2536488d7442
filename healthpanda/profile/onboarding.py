# -*- coding: utf-8 -*-
"""Profile — data collected by the onboarding steps, with per-step range checks.

Values are stored in metric units; imperial input is converted on the way in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional, Union

from ..errors import ValidationError
from .models import ProfilePayload

Number = Union[int, float, str]

KG_PER_LB = 0.4536
CM_PER_INCH = 2.54

GENDERS = ("male", "female", "other")

BODY_TYPES: Dict[str, str] = {
    "1": "Shredded",
    "2": "Fit",
    "3": "Average",
    "4": "Overweight",
    "5": "Obese",
}

FITNESS_GOALS: Dict[str, str] = {
    "lose": "Lose Weight",
    "maintain": "Maintain Weight",
    "gain": "Build Muscle",
    "health": "Improve Health",
    "sport": "Athletic Performance",
}

# Goals that ask for a target weight.
TARGET_WEIGHT_GOALS = frozenset({"lose", "gain"})

ACTIVITY_LEVELS: Dict[str, str] = {
    "sedentary": "Sedentary",
    "light": "Lightly Active",
    "moderate": "Moderately Active",
    "active": "Very Active",
    "athlete": "Athlete",
}

MIN_AGE, MAX_AGE = 13, 100
MIN_HEIGHT_IN, MAX_HEIGHT_IN = 36, 86
WEIGHT_RANGES = {"kg": (30.0, 250.0), "lb": (66.0, 550.0)}
TARGET_KG_EXCLUSIVE = (20.0, 300.0)


def _to_float(value: Number, field: str, label: str) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number", field=field) from None
    if math.isnan(num) or math.isinf(num):
        raise ValidationError(f"{label} must be a number", field=field)
    return num


def _choice(value: str, options: Dict[str, str], field: str, label: str) -> str:
    key = (value or "").strip().lower()
    if key not in options:
        raise ValidationError(f"Unknown {label}: {value!r}", field=field)
    return key


def _unit(unit: str) -> str:
    u = (unit or "").strip().lower()
    if u not in WEIGHT_RANGES:
        raise ValidationError(f"Unknown weight unit: {unit!r}", field="unit")
    return u


def age_from_birth_date(birth_date: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return int((today - birth_date).days // 365.25)


@dataclass
class OnboardingData:
    name: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    body_type: Optional[str] = None
    fitness_goal: Optional[str] = None
    target_weight_kg: Optional[float] = None
    activity_level: Optional[str] = None

    # step 1
    def set_name(self, name: str, gender: str) -> None:
        cleaned = (name or "").strip()
        if len(cleaned) < 2:
            raise ValidationError("Name must be at least 2 characters", field="name")
        g = (gender or "").strip().lower()
        if g not in GENDERS:
            raise ValidationError(f"Unknown gender: {gender!r}", field="gender")
        self.name = cleaned
        self.gender = g

    # step 2
    def set_age(self, age: Number) -> None:
        years = int(_to_float(age, "age", "Age"))
        if not MIN_AGE <= years <= MAX_AGE:
            raise ValidationError(f"Age must be between {MIN_AGE} and {MAX_AGE}", field="age")
        self.age = years

    def set_birth_date(self, birth_date: date, today: Optional[date] = None) -> None:
        self.set_age(age_from_birth_date(birth_date, today))

    # step 3
    def set_height_imperial(self, feet: Number, inches: Number = 0) -> None:
        ft = _to_float(feet, "height", "Feet")
        inc = _to_float(inches or 0, "height", "Inches")
        total = int(ft) * 12 + int(inc)
        if not MIN_HEIGHT_IN <= total <= MAX_HEIGHT_IN:
            raise ValidationError("Height must be between 3'0\" and 7'2\"", field="height")
        self.height_cm = round(total * CM_PER_INCH, 1)

    def set_height_cm(self, height_cm: Number) -> None:
        cm = _to_float(height_cm, "height", "Height")
        if not MIN_HEIGHT_IN * CM_PER_INCH <= cm <= MAX_HEIGHT_IN * CM_PER_INCH:
            raise ValidationError("Height must be between 91 and 218 cm", field="height")
        self.height_cm = round(cm, 1)

    # step 4
    def set_weight(self, value: Number, unit: str = "kg") -> None:
        u = _unit(unit)
        num = _to_float(value, "weight", "Weight")
        low, high = WEIGHT_RANGES[u]
        if not low <= num <= high:
            raise ValidationError(f"Weight must be between {low:g} and {high:g} {u}", field="weight")
        self.weight_kg = round(num if u == "kg" else num * KG_PER_LB, 1)

    # step 5
    def set_body_type(self, body_type: str) -> None:
        self.body_type = _choice(str(body_type), BODY_TYPES, "body_type", "body type")

    # step 6
    def set_fitness_goal(self, goal: str) -> None:
        self.fitness_goal = _choice(goal, FITNESS_GOALS, "fitness_goal", "fitness goal")
        if self.fitness_goal not in TARGET_WEIGHT_GOALS:
            self.target_weight_kg = None

    @property
    def needs_target_weight(self) -> bool:
        return self.fitness_goal in TARGET_WEIGHT_GOALS

    # step 6b
    def set_target_weight(self, value: Number, unit: str = "kg") -> None:
        if not self.needs_target_weight:
            raise ValidationError(
                "Target weight only applies to lose/gain goals", field="target_weight"
            )
        u = _unit(unit)
        num = _to_float(value, "target_weight", "Target weight")
        kg = num if u == "kg" else num * KG_PER_LB
        low, high = TARGET_KG_EXCLUSIVE
        if not low < kg < high:
            raise ValidationError(
                f"Target weight must be between {low:g} and {high:g} kg", field="target_weight"
            )
        self.target_weight_kg = round(kg, 1)

    # step 7
    def set_activity_level(self, level: str) -> None:
        self.activity_level = _choice(level, ACTIVITY_LEVELS, "activity_level", "activity level")

    def to_profile_payload(self) -> ProfilePayload:
        for field, value in (
            ("weight", self.weight_kg),
            ("height", self.height_cm),
            ("body_type", self.body_type),
            ("fitness_goal", self.fitness_goal),
            ("activity_level", self.activity_level),
        ):
            if value is None:
                raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field=field)
        return ProfilePayload(
            weight=float(self.weight_kg),
            height=float(self.height_cm),
            body_type=str(self.body_type),
            fitness_goal=str(self.fitness_goal),
            activity_level=str(self.activity_level),
        )
