# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RegisterPayload(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginPayload(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str = ""


class AuthState(str, Enum):
    logged_out = "logged_out"
    logged_in_no_profile = "logged_in_no_profile"
    logged_in_with_profile = "logged_in_with_profile"
