"""Static configuration for autogreet.

All user-editable settings (template values, cooldown, dedup, logging) live
in a single JSON file for quick edits without touching Python.
"""

import json
import os

from core.config import CooldownConfig, DedupConfig, TemplateConfig
from core.template import DEFAULT_WELCOME_MESSAGE

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_FILENAME = "config.json"


def find_config_path(explicit, search_dirs) -> str:
    """Pick the config file: an explicit path wins, then the first hit in search_dirs.

    When nothing exists the first candidate is returned so the error message
    names the place the user is most likely to put the file.
    """

    if explicit:
        return os.path.abspath(explicit)
    candidates = [os.path.join(directory, CONFIG_FILENAME) for directory in search_dirs]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return candidates[0]


# AUTOGREET_CONFIG overrides the lookup. Otherwise the working directory is
# tried first (installed use), then the source checkout root.
CONFIG_PATH = find_config_path(os.getenv("AUTOGREET_CONFIG"), [os.getcwd(), PROJECT_ROOT])
# Relative log paths and the Telegram session file live next to the config.
CONFIG_DIR = os.path.dirname(CONFIG_PATH)


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Welcome message values. The message itself may be overridden, but it may
# only use the MENU_URL, RESTAURANT_NAME, OPENING_HOURS and FOOD_EMOJI
# placeholders.
_template = _CONFIG.get("template", {})
TEMPLATE = TemplateConfig(
    menu_url=_template.get("menu_url", "https://sigmenu.com/delivery/restaurante"),
    restaurant_name=_template.get("restaurant_name", "Nome do Restaurante"),
    opening_hours=_template.get("opening_hours", "Segunda a Domingo: 11h às 23h"),
    food_emoji=_template.get("food_emoji", "🍽️"),
    message=_template.get("message") or DEFAULT_WELCOME_MESSAGE,
)

# Cooldown controls how often one contact can receive the automatic reply.
# - hours: window measured from the previous reply
# - record_on_failure: start the window even when the reply could not be sent
_cooldown = _CONFIG.get("cooldown", {})
COOLDOWN = CooldownConfig(
    hours=float(_cooldown.get("hours", 12)),
    record_on_failure=bool(_cooldown.get("record_on_failure", False)),
)

# Processed message ids are kept in memory only, bounded by count and age.
_dedup = _CONFIG.get("dedup", {})
DEDUP = DedupConfig(
    max_entries=int(_dedup.get("max_entries", 10000)),
    ttl_hours=float(_dedup.get("ttl_hours", 24)),
)

# Reply delivery options passed to the Telegram adapter.
_reply = _CONFIG.get("reply", {})
REPLY_PARSE_MODE = _reply.get("parse_mode", "md")
# Label used in logs when a contact's name cannot be resolved.
FALLBACK_LABEL = _reply.get("fallback_label", "Unknown contact")
# Upper bound on cached contact names used for log labels.
CONTACT_CACHE_SIZE = int(_reply.get("contact_cache_size", 1000))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
