"""Telegram client factory for autogreet.

The responder runs unattended on a paired user account, so the session file
is anchored next to config.json rather than the working directory, and the
device shows up as "autogreet" in the account's active sessions list.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient

DEVICE_MODEL = "autogreet"
APP_VERSION = "0.1.0"

# Seconds Telethon may sleep on a FloodWaitError before raising it instead.
# Longer waits surface as a failed reply rather than stalling every chat.
FLOOD_SLEEP_THRESHOLD = 30


def resolve_session_path(session_name: str, base_dir: str) -> str:
    """Return the session path, relative names being placed under base_dir."""

    if os.path.isabs(session_name):
        return session_name
    return os.path.join(base_dir, session_name)


def build_client(base_dir: str) -> TelegramClient:
    """Create a Telethon client from environment variables.

    API_ID/API_HASH come from the environment (python-dotenv loads a local
    .env). SESSION_NAME defaults to "autogreet", giving
    ``<base_dir>/autogreet.session``, which keeps the pairing across restarts.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    session_path = resolve_session_path(os.getenv("SESSION_NAME", "autogreet"), base_dir)
    logging.getLogger(__name__).info("Initializing Telegram client (session %s)", session_path)

    return TelegramClient(
        session_path,
        int(api_id),
        api_hash,
        device_model=DEVICE_MODEL,
        app_version=APP_VERSION,
        flood_sleep_threshold=FLOOD_SLEEP_THRESHOLD,
    )
