"""Shared fixtures for the dispatcher test suite."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from fcm_dispatch.config import get_settings


# Force anyio to use asyncio
@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
  for name in ("FCM_DISPATCH_ENABLED", "FCM_DISPATCH_BASE_URL", "FCM_DISPATCH_TIMEOUT_SECONDS", "FIREBASE_PROJECT_ID", "FCM_DISPATCH_ACCESS_TOKEN"):
    monkeypatch.delenv(name, raising=False)
  get_settings.cache_clear()
  yield
  get_settings.cache_clear()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
  return []


@pytest.fixture
def mock_http_client(recorded_requests) -> Callable[..., httpx.AsyncClient]:
  """Return a factory for clients whose transport answers with a canned response."""

  def _build(status_code: int = 200, *, json: object | None = None, content: bytes | str | None = None, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
    def _handler(request: httpx.Request) -> httpx.Response:
      recorded_requests.append(request)
      if json is not None:
        return httpx.Response(status_code, json=json, headers=headers)
      return httpx.Response(status_code, content=content, headers=headers)

    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))

  return _build
