"""Parsing for the advisory `Retry-After` response header."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import parsedate_to_datetime


@dataclass(frozen=True)
class RetryAfter:
  """Either a relative delay or an absolute point in time after which a retry is welcome."""

  delay: timedelta | None = None
  at: datetime | None = None

  @classmethod
  def parse(cls, raw: str | None) -> RetryAfter | None:
    """Parse delay-seconds or an HTTP-date; anything else is treated as absent.

    The header is advisory, so a malformed value never fails the request that carried it.
    """
    if raw is None:
      return None

    value = raw.strip()
    if not value:
      return None

    if value.isascii() and value.isdigit():
      try:
        return cls(delay=timedelta(seconds=int(value)))
      # Oversized values hit either the timedelta range or the int() digit limit.
      except (OverflowError, ValueError):
        return None

    try:
      at = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
      return None

    # HTTP-dates are always GMT; naive results come from "-0000" style zones.
    if at.tzinfo is None:
      at = at.replace(tzinfo=UTC)

    return cls(at=at)

  def wait_seconds(self, now: datetime | None = None) -> float:
    """Return how many seconds to wait from `now`, never negative."""
    if self.delay is not None:
      return max(self.delay.total_seconds(), 0.0)

    if self.at is None:
      return 0.0

    reference = now or datetime.now(UTC)
    return max((self.at - reference).total_seconds(), 0.0)

  def __str__(self) -> str:
    if self.delay is not None:
      return f"{int(self.delay.total_seconds())}s"
    if self.at is not None:
      return self.at.isoformat()
    return "unspecified"
