"""Application entry point for the autogreet responder."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv
from telethon import errors, events

import settings
from adapters.telegram_mapper import TelegramContactResolver, build_inbound_message
from adapters.telegram_replier import TelegramReplier
from client import build_client
from core.gate import AdmissionGate
from core.processor import AutoResponder
from core.template import build_template
from get_session import authorize

NAME = "AUTOGREET"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/autogreet.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.CONFIG_DIR, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


async def handle_event(responder: AutoResponder, event) -> None:
    """Feed one Telethon event to the responder.

    A fault while mapping or handling a single message is logged and the
    message is dropped; the listener keeps running.
    """

    try:
        message = build_inbound_message(event.message)
        await responder.handle(message)
    except Exception:
        logging.getLogger(__name__).exception("Error while processing message")


def _install_shutdown_handlers(client) -> None:
    """Disconnect the client on SIGINT/SIGTERM."""

    logger = logging.getLogger(__name__)
    loop = client.loop

    def _request_shutdown(signame: str) -> None:
        logger.info("Received %s, stopping...", signame)
        loop.create_task(client.disconnect())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_shutdown, sig.name)
        except NotImplementedError:
            # Windows event loops do not support signal handlers; Ctrl+C still
            # raises KeyboardInterrupt out of run_until_disconnected.
            logger.debug("Signal handlers unavailable for %s", sig.name)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting autogreet")

    # Validate the template before touching the network so config mistakes
    # surface immediately.
    template = build_template(settings.TEMPLATE)
    gate = AdmissionGate(cooldown_config=settings.COOLDOWN, dedup_config=settings.DEDUP)

    client = build_client(settings.CONFIG_DIR)
    client.loop.run_until_complete(client.connect())
    try:
        client.loop.run_until_complete(authorize(client))
    except (errors.RPCError, asyncio.TimeoutError):
        logger.exception("Authorization failed. Run `autogreet login` and try again.")
        client.loop.run_until_complete(client.disconnect())
        raise SystemExit(1)

    responder = AutoResponder(
        gate=gate,
        template=template,
        replier=TelegramReplier(client, parse_mode=settings.REPLY_PARSE_MODE),
        contacts=TelegramContactResolver(client, max_entries=settings.CONTACT_CACHE_SIZE),
        record_cooldown_on_failure=settings.COOLDOWN.record_on_failure,
        fallback_label=settings.FALLBACK_LABEL,
    )

    # Single handler keeps Telethon integration minimal and defers all filtering
    # to the admission gate for consistency and testability.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        await handle_event(responder, event)

    _install_shutdown_handlers(client)

    # Explicit lifecycle management makes start/shutdown behavior obvious.
    client.start()
    logger.info("%s - responder connected. Waiting for messages...", settings.TEMPLATE.restaurant_name)
    try:
        client.run_until_disconnected()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping...")
        client.loop.run_until_complete(client.disconnect())
    logger.info("Disconnected")


def _login() -> None:
    _print_banner()
    _configure_logging()
    client = build_client(settings.CONFIG_DIR)

    async def _run_login() -> None:
        await client.connect()
        try:
            await authorize(client)
        finally:
            await client.disconnect()

    client.loop.run_until_complete(_run_login())


def _preview() -> None:
    print(build_template(settings.TEMPLATE).render())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="autogreet")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the auto responder")
    subparsers.add_parser("login", help="Pair the Telegram account and store the session")
    subparsers.add_parser("preview", help="Print the rendered welcome message")

    args = parser.parse_args(argv)
    if args.command == "login":
        _login()
        return
    if args.command == "preview":
        _preview()
        return
    _run()


if __name__ == "__main__":
    main()
