"""Runtime settings loaded from the environment or a JSON profile."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

_API_KEY_ENV = "GEMINI_API_KEY"
_API_KEY_FALLBACK_ENV = "API_KEY"
_MODEL_ENV = "FUTSQUAD_MODEL"
_BASE_URL_ENV = "FUTSQUAD_API_BASE"
_TIMEOUT_ENV = "FUTSQUAD_TIMEOUT"
_DB_PATH_ENV = "FUTSQUAD_DB_PATH"
_REFERENCE_PATH_ENV = "FUTSQUAD_REFERENCE_PATH"
_DEFAULT_COINS_ENV = "FUTSQUAD_DEFAULT_COINS"

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 60.0
DEFAULT_COINS = 50_000
DEFAULT_DB_PATH = Path.home() / ".futsquad" / "session.sqlite"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    db_path: Path = DEFAULT_DB_PATH
    reference_path: Optional[Path] = None
    default_coins: int = DEFAULT_COINS

    @classmethod
    def from_env(cls) -> "Settings":
        reference = os.getenv(_REFERENCE_PATH_ENV)
        return cls(
            api_key=os.getenv(_API_KEY_ENV) or os.getenv(_API_KEY_FALLBACK_ENV) or None,
            model=os.getenv(_MODEL_ENV) or DEFAULT_MODEL,
            base_url=os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL,
            request_timeout=_env_float(_TIMEOUT_ENV, DEFAULT_TIMEOUT, clamp_min=1.0),
            db_path=Path(os.getenv(_DB_PATH_ENV) or DEFAULT_DB_PATH),
            reference_path=Path(reference) if reference else None,
            default_coins=_env_int(_DEFAULT_COINS_ENV, DEFAULT_COINS, min_value=0),
        )

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load a JSON profile on top of the environment settings."""

        data = json.loads(path.read_text(encoding="utf-8"))
        settings = cls.from_env()
        for key in ("api_key", "model", "base_url"):
            if data.get(key):
                setattr(settings, key, str(data[key]))
        if data.get("request_timeout") is not None:
            settings.request_timeout = float(data["request_timeout"])
        if data.get("db_path"):
            settings.db_path = Path(data["db_path"])
        if data.get("reference_path"):
            settings.reference_path = Path(data["reference_path"])
        if data.get("default_coins") is not None:
            settings.default_coins = int(data["default_coins"])
        return settings

    def save(self, path: Path) -> None:
        payload = asdict(self)
        payload.pop("api_key", None)
        payload["db_path"] = str(self.db_path)
        payload["reference_path"] = str(self.reference_path) if self.reference_path else None
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
