"""Welcome message template rendering (core domain)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from core.config import TemplateConfig

PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_]+)\}\}")

PLACEHOLDERS = ("MENU_URL", "RESTAURANT_NAME", "OPENING_HOURS", "FOOD_EMOJI")

# Sent with Telethon markdown, where bold is **text** and a single * is literal.
DEFAULT_WELCOME_MESSAGE = """Olá! {{FOOD_EMOJI}} Bem-vindo(a) ao **{{RESTAURANT_NAME}}**!

Ficamos muito felizes em receber sua mensagem! 😊

Aqui está nosso cardápio digital completo com todos os pratos deliciosos que preparamos para você:

🍽️ **Cardápio Digital:** {{MENU_URL}}

📱 **Horário de Funcionamento:**
{{OPENING_HOURS}}

🚚 **Delivery disponível!**

Para fazer seu pedido, acesse nosso cardápio pelo link acima. Qualquer dúvida, nossa equipe está aqui para ajudar!

Obrigado por escolher o **{{RESTAURANT_NAME}}**! ❤️"""


def render_template(pattern: str, values: Mapping[str, str]) -> str:
    """Replace every ``{{NAME}}`` occurrence with its value.

    Substitution is literal, so values containing braces or regex syntax are
    inserted as-is and never re-expanded.
    """

    text = pattern
    for name, value in values.items():
        text = text.replace("{{" + name + "}}", value)
    return text


@dataclass(frozen=True)
class WelcomeTemplate:
    """Immutable welcome message with its substitution values."""

    pattern: str
    values: Mapping[str, str]

    def render(self) -> str:
        return render_template(self.pattern, self.values)


def build_template(config: TemplateConfig) -> WelcomeTemplate:
    """Validate placeholders and bind the configured values.

    Unknown placeholders fail at startup rather than leaking ``{{...}}``
    tokens into customer chats.
    """

    unknown = sorted(set(PLACEHOLDER_RE.findall(config.message)) - set(PLACEHOLDERS))
    if unknown:
        raise ValueError(f"Unsupported template placeholder(s): {', '.join(unknown)}")

    values = {
        "MENU_URL": config.menu_url,
        "RESTAURANT_NAME": config.restaurant_name,
        "OPENING_HOURS": config.opening_hours,
        "FOOD_EMOJI": config.food_emoji,
    }
    return WelcomeTemplate(pattern=config.message, values=values)
