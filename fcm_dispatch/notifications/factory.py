"""Factory helpers for FCM dispatchers."""

from __future__ import annotations

import httpx

from fcm_dispatch.config import Settings
from fcm_dispatch.notifications.contracts import PushDispatcher
from fcm_dispatch.notifications.fcm_sender import FcmDispatcher, NullFcmDispatcher


def build_fcm_dispatcher(settings: Settings, *, http_client: httpx.AsyncClient | None = None) -> PushDispatcher:
  """Construct a dispatcher based on environment configuration."""
  # Disabled delivery swaps in a no-op so callers keep one code path.
  if not settings.fcm_enabled:
    return NullFcmDispatcher()

  return FcmDispatcher(http_client=http_client, base_url=settings.fcm_base_url, timeout_seconds=settings.fcm_timeout_seconds)
