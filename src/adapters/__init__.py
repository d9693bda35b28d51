"""Telethon adapters that plug the Telegram account into the core ports."""
