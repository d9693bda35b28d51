"""Core domain package for autogreet.

Core contains the admission gate, cooldown tracking, deduplication and
template rendering without any Telegram-specific code, keeping the reply
policy portable and easy to test.
"""
