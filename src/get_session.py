"""Interactive pairing of the Telegram account used by the responder.

The session file written here is what lets ``autogreet run`` start without
asking for a login again.
"""

from __future__ import annotations

import logging
import os
from getpass import getpass

import qrcode
from telethon import TelegramClient, errors

LOGGER = logging.getLogger(__name__)

QR_LOGIN_TIMEOUT_SECONDS = 120


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _resolve_2fa_password() -> str:
    password = os.getenv("2FA")
    if password:
        return password
    return getpass("2FA password: ")


async def _authorize_with_qr(client: TelegramClient) -> None:
    qr = await client.qr_login()
    print("Scan the QR code below with Telegram:")
    print("")
    _print_qr(qr.url)
    print("")
    print("Telegram > Settings > Devices > Link Desktop Device")
    await qr.wait(timeout=QR_LOGIN_TIMEOUT_SECONDS)


async def _authorize_with_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    await client.sign_in(phone=phone, code=code)


def _pick_login_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in {"qr", "phone"}:
        return method
    while True:
        print("")
        print("Login methods:")
        print("[1] QR code")
        print("[2] Phone code")
        print("[3] Exit")
        print("Select a login method: \n")
        choice = input("autogreet > ").strip()
        if choice == "1":
            return "qr"
        elif choice == "2":
            return "phone"
        elif choice == "3":
            raise SystemExit(0)
        else:
            print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient) -> None:
    """Log the client in unless its session is already authorized."""

    if await client.is_user_authorized():
        return

    method = _pick_login_method()
    try:
        if method == "phone":
            await _authorize_with_phone(client)
        else:
            await _authorize_with_qr(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_resolve_2fa_password())

    me = await client.get_me()
    LOGGER.info("Logged in as: %s", getattr(me, "first_name", None) or getattr(me, "username", "?"))
