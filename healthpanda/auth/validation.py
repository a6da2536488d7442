# -*- coding: utf-8 -*-
"""Auth — client-side checks run before any network call."""

from __future__ import annotations

from typing import Optional

from ..errors import ValidationError

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6


def _require(value: Optional[str], field: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required", field=field)
    return value


def validate_credentials(
    email: Optional[str],
    password: Optional[str],
    *,
    name: Optional[str] = None,
    require_name: bool = False,
) -> None:
    """Non-empty check only. Format rules belong to the sign-up form."""
    if require_name:
        _require(name, "name", "Name")
    _require(email, "email", "Email")
    _require(password, "password", "Password")


def validate_sign_up(name: str, email: str, password: str, confirm_password: str) -> None:
    validate_credentials(email, password, name=name, require_name=True)
    if len(name.strip()) < MIN_NAME_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_LENGTH} characters", field="name")
    if "@" not in email:
        raise ValidationError("Enter a valid email address", field="email")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")
