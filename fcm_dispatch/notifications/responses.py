"""Wire shapes for the FCM HTTP v1 send endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import msgspec

from fcm_dispatch.notifications.contracts import FcmMalformedResponseError, FcmMessageEncodingError, FinalizedMessage


class ErrorReason(str, Enum):
  """Error codes FCM reports for a send request."""

  UNSPECIFIED_ERROR = "UNSPECIFIED_ERROR"
  INVALID_ARGUMENT = "INVALID_ARGUMENT"
  UNREGISTERED = "UNREGISTERED"
  SENDER_ID_MISMATCH = "SENDER_ID_MISMATCH"
  QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
  UNAVAILABLE = "UNAVAILABLE"
  INTERNAL = "INTERNAL"
  THIRD_PARTY_AUTH_ERROR = "THIRD_PARTY_AUTH_ERROR"


# Reasons that mean FCM itself failed, even when the HTTP status was 200.
SERVER_ERROR_REASONS = frozenset({ErrorReason.UNAVAILABLE, ErrorReason.INTERNAL})

# Legacy spellings, keyed by their upper-cased form.
_ERROR_REASON_ALIASES = {"INTERNALSERVERERROR": ErrorReason.INTERNAL}


class MessageEnvelope(msgspec.Struct):
  """Single-field wrapper the send endpoint expects around a message."""

  message: Any


@dataclass(frozen=True)
class FcmResponse:
  """A successful send response; `body` is the provider JSON exactly as received."""

  body: dict[str, Any] = field(default_factory=dict)

  @property
  def name(self) -> str | None:
    """Return the provider message id, e.g. `projects/my-proj/messages/0:1500415314455276%31bd1c96`."""
    name = self.body.get("name")
    return name if isinstance(name, str) else None

  @property
  def error(self) -> ErrorReason | None:
    """Return the recognized error reason embedded in the body, if any."""
    return parse_error_reason(self.body.get("error"))


def parse_error_reason(raw: Any) -> ErrorReason | None:
  """Map a string code or a `{"status": code}` object onto `ErrorReason`."""
  if isinstance(raw, dict):
    raw = raw.get("status")

  if not isinstance(raw, str):
    return None

  code = raw.strip().upper()
  if code in _ERROR_REASON_ALIASES:
    return _ERROR_REASON_ALIASES[code]

  try:
    return ErrorReason(code)
  except ValueError:
    return None


def encode_envelope(message: FinalizedMessage) -> bytes:
  """Encode `{"message": message}` as JSON bytes."""
  try:
    return msgspec.json.encode(MessageEnvelope(message=message))
  except (msgspec.EncodeError, TypeError) as exc:
    raise FcmMessageEncodingError(f"Message cannot be encoded as JSON: {exc}") from exc


def decode_response_body(content: bytes) -> FcmResponse:
  """Decode a 200 response body into `FcmResponse`."""
  try:
    body = msgspec.json.decode(content)
  except msgspec.DecodeError as exc:
    raise FcmMalformedResponseError(f"FCM response body is not valid JSON: {exc}") from exc

  if not isinstance(body, dict):
    raise FcmMalformedResponseError(f"FCM response body must be a JSON object, got {type(body).__name__}")

  return FcmResponse(body=body)
