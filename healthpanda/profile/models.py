# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProfilePayload(BaseModel):
    weight: float = Field(..., gt=0, description="kg")
    height: float = Field(..., gt=0, description="cm")
    body_type: str = Field(..., min_length=1)
    fitness_goal: str = Field(..., min_length=1)
    activity_level: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    weight: float
    height: float
    body_type: str
    fitness_goal: str
    activity_level: str
