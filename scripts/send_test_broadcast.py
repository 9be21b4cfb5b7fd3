#!/usr/bin/env python3
"""
Send a broadcast through the configured messaging provider without the HTTP layer.

Reads the same settings as the service (.env / environment), so it is a quick
way to check FCM credentials and device tokens.

Usage:
  python scripts/send_test_broadcast.py --token TOKEN [--token TOKEN ...] \
      --title "Hello" --body "World" [--data key=value ...]
"""

import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from push_broadcast.application.errors import AppError
from push_broadcast.application.use_cases import send_broadcast
from push_broadcast.config.settings import get_settings
from push_broadcast.infrastructure.messaging.factory import build_messaging_provider


def parse_data(pairs: list[str]) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"'{pair}' is not in key=value form")
        data[key] = value
    return data


async def run(tokens: list[str], title: str, body: str, data: dict[str, str]) -> int:
    settings = get_settings()
    provider = build_messaging_provider(settings)
    print(f"📨 Provider: {settings.messaging_provider}")
    try:
        result = await send_broadcast.execute(
            provider,
            {"tokens": tokens, "notification": {"title": title, "body": body}, "data": data},
        )
    except AppError as exc:
        print(f"\n❌ Error sending broadcast: {exc.message}")
        return 1
    finally:
        await provider.aclose()

    print(f"\n✅ Delivered: {result.success}  Failed: {result.failure}")
    for error in result.errors:
        print(f"   - {error.token}: {error.error}")
    print(json.dumps({"success": result.success, "failure": result.failure}))
    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Send a test push broadcast")
    parser.add_argument("--token", action="append", required=True, help="Device token")
    parser.add_argument("--title", required=True, help="Notification title")
    parser.add_argument("--body", required=True, help="Notification body")
    parser.add_argument("--data", action="append", default=[], help="Data entry key=value")

    args = parser.parse_args()

    try:
        extra = parse_data(args.data)
    except ValueError as exc:
        print(f"❌ Error: {exc}")
        sys.exit(1)

    sys.exit(asyncio.run(run(args.token, args.title, args.body, extra)))
