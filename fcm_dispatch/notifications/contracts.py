"""Contracts for FCM message dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
  from fcm_dispatch.notifications.responses import FcmResponse
  from fcm_dispatch.notifications.retry_after import RetryAfter

# A finalized message is anything msgspec can encode, usually a dict or a msgspec.Struct.
FinalizedMessage = Any


class NotificationError(Exception):
  """Base class for all notification delivery failures."""


class FcmProviderError(NotificationError):
  """Exception raised when FCM answered and the answer classifies as a failure."""

  retryable = False

  def __init__(self, message: str, *, status_code: int | None = None) -> None:
    super().__init__(message)
    self.status_code = status_code


class FcmUnauthorizedError(FcmProviderError):
  """Exception raised when FCM rejects the access token."""

  def __init__(self, *, status_code: int = 401) -> None:
    super().__init__("Unauthorized", status_code=status_code)


class FcmInvalidMessageError(FcmProviderError):
  """Exception raised when FCM rejects the request itself or answers with an unexpected status."""

  def __init__(self, detail: str, *, status_code: int | None = None) -> None:
    super().__init__(detail, status_code=status_code)
    self.detail = detail


class FcmServerError(FcmProviderError):
  """Exception raised for transient FCM failures, optionally carrying a Retry-After hint."""

  retryable = True

  def __init__(self, retry_after: RetryAfter | None = None, *, status_code: int | None = None) -> None:
    message = "Server Error" if retry_after is None else f"Server Error (retry after {retry_after})"
    super().__init__(message, status_code=status_code)
    self.retry_after = retry_after


class FcmTransportError(NotificationError):
  """Exception raised when no HTTP response was obtained (connect, TLS, timeout)."""


class FcmInternalError(NotificationError):
  """Exception raised when the client's own assumptions about payloads are violated."""


class FcmMessageEncodingError(FcmInternalError):
  """Exception raised when the message envelope cannot be encoded as JSON."""


class FcmMalformedResponseError(FcmInternalError):
  """Exception raised when a 200 response body is not a JSON object."""


class PushDispatcher(Protocol):
  """Delivery contract for sending one FCM message."""

  async def send(self, access_token: str, project_id: str, message: FinalizedMessage) -> FcmResponse:
    """Send a finalized message and return the provider response."""
