from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def _env_flag(name: str) -> bool:
    return (os.environ.get(name) or "").strip() in {"1", "true", "True"}


class Settings:
    """Centralized configuration for the Health Panda client."""

    def __init__(self) -> None:
        self.api_base_url: str = (
            os.environ.get("HEALTHPANDA_API_BASE_URL") or "http://127.0.0.1:5000/api"
        ).rstrip("/")
        # For the Android emulator use http://10.0.2.2:5000/api, for a device the host's LAN IP.
        self.request_timeout: float = float(os.environ.get("HEALTHPANDA_TIMEOUT") or "10")

        self.data_root: Path = Path(
            os.environ.get("HEALTHPANDA_DATA_ROOT") or (Path.home() / ".healthpanda")
        ).expanduser()
        self.store_path: Path = Path(
            os.environ.get("HEALTHPANDA_STORE_PATH") or (self.data_root / "storage.db")
        ).expanduser()
        # The backend has no logout route; set this to send a server-side notification.
        self.logout_path: str = (os.environ.get("HEALTHPANDA_LOGOUT_PATH") or "").strip()

        # Demo mode serves placeholder food data instead of calling the backend.
        self.demo_mode: bool = _env_flag("HEALTHPANDA_DEMO_MODE")

        self.nutritionix_app_id: Optional[str] = os.environ.get("NUTRITIONIX_APP_ID") or None
        self.nutritionix_app_key: Optional[str] = os.environ.get("NUTRITIONIX_APP_KEY") or None
        self.nutritionix_base_url: str = (
            os.environ.get("NUTRITIONIX_BASE_URL") or "https://trackapi.nutritionix.com/v2"
        ).rstrip("/")

        self.log_level: str = (os.environ.get("HEALTHPANDA_LOG_LEVEL") or "INFO").upper()

    @property
    def nutritionix_configured(self) -> bool:
        return bool(self.nutritionix_app_id and self.nutritionix_app_key)


settings = Settings()
