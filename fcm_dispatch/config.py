"""Dispatcher configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_FCM_BASE_URL = "https://fcm.googleapis.com/v1"


@dataclass(frozen=True)
class Settings:
  """Typed settings for the FCM dispatcher."""

  fcm_enabled: bool
  fcm_base_url: str
  fcm_timeout_seconds: float
  firebase_project_id: str | None
  fcm_access_token: str | None


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None or raw.strip() == "":
    return default

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _parse_base_url(raw: str | None) -> str:
  base_url = (raw or DEFAULT_FCM_BASE_URL).strip().rstrip("/")

  if not (base_url.startswith("https://") or base_url.startswith("http://")):
    raise ValueError("FCM_DISPATCH_BASE_URL must start with 'https://' or 'http://'.")

  return base_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  # Delivery defaults to enabled; only an explicit false-ish value disables it.
  fcm_enabled = _parse_bool(os.getenv("FCM_DISPATCH_ENABLED"), default=True)

  fcm_timeout_seconds = float(os.getenv("FCM_DISPATCH_TIMEOUT_SECONDS", "10"))
  if fcm_timeout_seconds <= 0:
    raise ValueError("FCM_DISPATCH_TIMEOUT_SECONDS must be a positive number.")

  return Settings(
    fcm_enabled=fcm_enabled,
    fcm_base_url=_parse_base_url(os.getenv("FCM_DISPATCH_BASE_URL")),
    fcm_timeout_seconds=fcm_timeout_seconds,
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    fcm_access_token=_optional_str(os.getenv("FCM_DISPATCH_ACCESS_TOKEN")),
  )
