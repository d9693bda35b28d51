from __future__ import annotations

import pytest
from telethon.extensions import markdown
from telethon.helpers import add_surrogate, del_surrogate
from telethon.tl.types import MessageEntityBold

from core.config import TemplateConfig
from core.template import DEFAULT_WELCOME_MESSAGE, PLACEHOLDER_RE, build_template, render_template


def _config(message: str = DEFAULT_WELCOME_MESSAGE) -> TemplateConfig:
    return TemplateConfig(
        menu_url="https://x.test/m",
        restaurant_name="Casa Test",
        opening_hours="9-18",
        food_emoji="🍕",
        message=message,
    )


def test_default_message_renders_all_values() -> None:
    text = build_template(_config()).render()

    assert "https://x.test/m" in text
    assert "9-18" in text
    assert "🍕" in text
    assert text.count("Casa Test") == 2
    assert not PLACEHOLDER_RE.search(text)
    assert "{{" not in text


def test_values_land_where_placeholders_were() -> None:
    pattern = "{{FOOD_EMOJI}} {{RESTAURANT_NAME}} | {{OPENING_HOURS}} | {{MENU_URL}}"
    text = build_template(_config(pattern)).render()
    assert text == "🍕 Casa Test | 9-18 | https://x.test/m"


def test_substitution_is_literal() -> None:
    text = render_template("Hi {{NAME}}!", {"NAME": "{{NAME}} $1 \\g<0>"})
    assert text == "Hi {{NAME}} $1 \\g<0>!"


def test_unknown_placeholder_rejected() -> None:
    with pytest.raises(ValueError, match="PHONE"):
        build_template(_config("Call {{PHONE}} at {{RESTAURANT_NAME}}"))


def test_default_message_bold_markup_parses_as_telegram_markdown() -> None:
    text, entities = markdown.parse(build_template(_config()).render())

    # Entity offsets count UTF-16 code units, so slice the surrogate form.
    wide = add_surrogate(text)
    bold = [
        del_surrogate(wide[e.offset : e.offset + e.length])
        for e in entities
        if isinstance(e, MessageEntityBold)
    ]
    assert bold.count("Casa Test") == 2
    assert "Cardápio Digital:" in bold
    assert "*" not in text
