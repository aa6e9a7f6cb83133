"""FCM HTTP v1 delivery implementations."""

from __future__ import annotations

import logging
from http import HTTPStatus
from types import TracebackType

import httpx

from fcm_dispatch.config import DEFAULT_FCM_BASE_URL
from fcm_dispatch.notifications.contracts import FcmInvalidMessageError, FcmServerError, FcmTransportError, FcmUnauthorizedError, FinalizedMessage, PushDispatcher
from fcm_dispatch.notifications.responses import SERVER_ERROR_REASONS, FcmResponse, decode_response_body, encode_envelope
from fcm_dispatch.notifications.retry_after import RetryAfter

logger = logging.getLogger(__name__)


def build_send_url(project_id: str, *, base_url: str = DEFAULT_FCM_BASE_URL) -> str:
  """Return the messages:send endpoint for a project."""
  # https://firebase.google.com/docs/reference/fcm/rest/v1/projects.messages/send
  return f"{base_url}/projects/{project_id}/messages:send"


def build_http_client(*, timeout_seconds: float = 10.0) -> httpx.AsyncClient:
  """Build a long-lived httpx client that keeps every idle connection for reuse."""
  limits = httpx.Limits(max_keepalive_connections=None, max_connections=None)
  return httpx.AsyncClient(limits=limits, timeout=timeout_seconds, trust_env=False)


class FcmDispatcher(PushDispatcher):
  """`httpx` backed sender that performs one request per message and classifies the outcome."""

  def __init__(self, *, http_client: httpx.AsyncClient | None = None, base_url: str = DEFAULT_FCM_BASE_URL, timeout_seconds: float = 10.0) -> None:
    # A borrowed client stays open when the dispatcher closes; an owned one does not.
    self._owns_http_client = http_client is None
    self._http_client = http_client if http_client is not None else build_http_client(timeout_seconds=timeout_seconds)
    self._base_url = base_url.rstrip("/")

  @property
  def http_client(self) -> httpx.AsyncClient:
    return self._http_client

  async def __aenter__(self) -> FcmDispatcher:
    return self

  async def __aexit__(self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None) -> None:
    await self.aclose()

  async def aclose(self) -> None:
    """Release pooled connections when this dispatcher owns the client."""
    if self._owns_http_client:
      await self._http_client.aclose()

  async def send(self, access_token: str, project_id: str, message: FinalizedMessage) -> FcmResponse:
    """Send a finalized message and return the FCM response or raise a classified error."""
    payload = encode_envelope(message)
    url = build_send_url(project_id, base_url=self._base_url)
    headers = {"Content-Type": "application/json", "Authorization": access_token}

    try:
      response = await self._http_client.post(url, content=payload, headers=headers)
    except httpx.RequestError as exc:
      logger.warning("FCM request failed before a response project_id=%s error_type=%s", project_id, type(exc).__name__)
      raise FcmTransportError(f"FCM request failed: {exc}") from exc

    logger.debug("FCM responded project_id=%s status=%s", project_id, response.status_code)
    return _classify_response(response)


class NullFcmDispatcher(PushDispatcher):
  """No-op dispatcher used when FCM delivery is disabled."""

  async def send(self, access_token: str, project_id: str, message: FinalizedMessage) -> FcmResponse:
    """Drop the message while recording a debug log."""
    logger.debug("FCM delivery disabled; dropping message project_id=%s", project_id)
    return FcmResponse()


def _classify_response(response: httpx.Response) -> FcmResponse:
  """Translate status, body and Retry-After into a response or a classified error."""
  status_code = response.status_code
  retry_after = RetryAfter.parse(response.headers.get("Retry-After"))

  if status_code == HTTPStatus.OK:
    fcm_response = decode_response_body(response.content)

    # FCM can report a transient failure inside a 200 body.
    if fcm_response.error in SERVER_ERROR_REASONS:
      raise FcmServerError(retry_after, status_code=status_code)

    return fcm_response

  if status_code == HTTPStatus.UNAUTHORIZED:
    raise FcmUnauthorizedError(status_code=status_code)

  if status_code == HTTPStatus.BAD_REQUEST:
    raise FcmInvalidMessageError(f"Bad Request ({response.text})", status_code=status_code)

  if response.is_server_error:
    raise FcmServerError(retry_after, status_code=status_code)

  raise FcmInvalidMessageError("Unknown Error", status_code=status_code)
