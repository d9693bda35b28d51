"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CooldownConfig:
    """Per-contact reply cooldown settings."""

    hours: float = 12
    record_on_failure: bool = False


@dataclass(frozen=True)
class DedupConfig:
    """Bounds for the processed-message record."""

    max_entries: int = 10000
    ttl_hours: float = 24


@dataclass(frozen=True)
class TemplateConfig:
    """Values substituted into the welcome message."""

    menu_url: str
    restaurant_name: str
    opening_hours: str
    food_emoji: str
    message: str
