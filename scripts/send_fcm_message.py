"""Send one finalized FCM message from the command line and print the classified outcome."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

import httpx
from fcm_dispatch.config import get_settings
from fcm_dispatch.notifications.contracts import FcmProviderError, FcmServerError, NotificationError
from fcm_dispatch.notifications.factory import build_fcm_dispatcher
from fcm_dispatch.notifications.fcm_sender import FcmDispatcher

logger = logging.getLogger("scripts.send_fcm_message")

EXIT_OK = 0
EXIT_PROVIDER_ERROR = 1
EXIT_DELIVERY_FAILURE = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(description="Send a finalized message to the FCM HTTP v1 API.")
  parser.add_argument("--project-id", help="Firebase project id (defaults to FIREBASE_PROJECT_ID).")
  parser.add_argument("--access-token", help="Authorization header value, e.g. 'Bearer ya29...' (defaults to FCM_DISPATCH_ACCESS_TOKEN).")
  parser.add_argument("--message", required=True, help="Path to a JSON file holding the message, or '-' for stdin.")
  return parser.parse_args(argv)


def _load_message(source: str, *, stdin: TextIO) -> Any:
  """Read the message JSON from a file path or stdin."""
  raw = stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
  return json.loads(raw)


async def send_message(*, access_token: str, project_id: str, message: Any, out: TextIO, http_client: httpx.AsyncClient | None = None) -> int:
  """Send the message once and report the outcome, returning a process exit code."""
  settings = get_settings()
  dispatcher = build_fcm_dispatcher(settings, http_client=http_client)
  if not settings.fcm_enabled:
    logger.info("FCM delivery is disabled (FCM_DISPATCH_ENABLED); the message will not be sent.")

  try:
    response = await dispatcher.send(access_token, project_id, message)

  except FcmServerError as exc:
    # Retry timing is reported, never acted on.
    wait = f"{exc.retry_after.wait_seconds():.0f}s" if exc.retry_after is not None else "unspecified"
    print(f"server error (status={exc.status_code}, retry_after={wait})", file=out)
    return EXIT_PROVIDER_ERROR

  except FcmProviderError as exc:
    print(f"{type(exc).__name__} (status={exc.status_code}): {exc}", file=out)
    return EXIT_PROVIDER_ERROR

  except NotificationError as exc:
    logger.error("FCM delivery failed: %s", exc)
    return EXIT_DELIVERY_FAILURE

  finally:
    if isinstance(dispatcher, FcmDispatcher):
      await dispatcher.aclose()

  print(json.dumps(response.body, indent=2, sort_keys=True), file=out)
  return EXIT_OK


def main(argv: list[str] | None = None) -> int:
  """Run a single FCM send from the command line."""
  logging.basicConfig(level=logging.INFO)
  args = _parse_args(argv)
  settings = get_settings()

  project_id = args.project_id or settings.firebase_project_id
  access_token = args.access_token or settings.fcm_access_token
  if not project_id:
    logger.error("A project id is required (--project-id or FIREBASE_PROJECT_ID).")
    return EXIT_DELIVERY_FAILURE

  if not access_token:
    logger.error("An access token is required (--access-token or FCM_DISPATCH_ACCESS_TOKEN).")
    return EXIT_DELIVERY_FAILURE

  try:
    message = _load_message(args.message, stdin=sys.stdin)
  except (OSError, ValueError) as exc:
    logger.error("Could not read message from %s: %s", args.message, exc)
    return EXIT_DELIVERY_FAILURE

  return asyncio.run(send_message(access_token=access_token, project_id=project_id, message=message, out=sys.stdout))


if __name__ == "__main__":
  sys.exit(main())
