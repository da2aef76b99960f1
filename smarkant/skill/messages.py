"""Localized spoken replies."""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from smarkant.skill.errors import MissingMessageError, UnsupportedLocaleError

_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")


class Locale(StrEnum):
    EN_US = "en-US"
    DE_DE = "de-DE"


class MessageId(StrEnum):
    SMARKANT_STOPS = "smarkant_stops"
    SMARKANT_MOVES_UP = "smarkant_moves_up"
    SMARKANT_MOVES_DOWN = "smarkant_moves_down"
    SMARKANT_MOVES_TO_POSITION = "smarkant_moves_to_position"
    INVALID_POSITION = "invalid_position"
    SMARKANT_MOVES_TO_HEIGHT = "smarkant_moves_to_height"
    INVALID_HEIGHT = "invalid_height"


STRINGS: dict[Locale, dict[MessageId, str]] = {
    Locale.EN_US: {
        MessageId.SMARKANT_STOPS: "Smarkant stops!",
        MessageId.SMARKANT_MOVES_UP: "Smarkant moves up!",
        MessageId.SMARKANT_MOVES_DOWN: "Smarkant moves down!",
        MessageId.SMARKANT_MOVES_TO_POSITION: "Smarkant moves to position {position}!",
        MessageId.INVALID_POSITION: "Position {position} is invalid!",
        MessageId.SMARKANT_MOVES_TO_HEIGHT: "Smarkant moves to {height} centimeter!",
        MessageId.INVALID_HEIGHT: "Height {height} centimeter is invalid!",
    },
    Locale.DE_DE: {
        MessageId.SMARKANT_STOPS: "Smarkant hält an!",
        MessageId.SMARKANT_MOVES_UP: "Smarkant fährt rauf!",
        MessageId.SMARKANT_MOVES_DOWN: "Smarkant fährt runter!",
        MessageId.SMARKANT_MOVES_TO_POSITION: "Smarkant fährt in Position {position}!",
        MessageId.INVALID_POSITION: "Position {position} ist ungültig!",
        MessageId.SMARKANT_MOVES_TO_HEIGHT: "Smarkant fährt auf {height} Zentimeter!",
        MessageId.INVALID_HEIGHT: "{height} Zentimeter ist eine ungültige Höhe!",
    },
}


def substitute(template: str, params: Mapping[str, Any] | None = None) -> str:
    """Replace ``{name}`` placeholders with string or number parameters.

    Placeholders without a matching primitive value are left as they are.
    """
    values = params or {}

    def _replace(match: re.Match[str]) -> str:
        value = values.get(match.group(1))
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return match.group(0)
        return str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def resolve_locale(tag: str | None, fallback: str | None = None) -> Locale:
    """Map a request locale tag to a supported locale."""
    for candidate in (tag, fallback):
        text = str(candidate or "").strip()
        if not text:
            continue
        try:
            return Locale(text)
        except ValueError:
            continue
    raise UnsupportedLocaleError(f"unsupported locale: {tag!r}")


class MessageCatalog:
    """Locale/message table that is complete by construction."""

    def __init__(self, strings: Mapping[Locale, Mapping[MessageId, str]]) -> None:
        missing = [
            (locale.value, message_id.value)
            for locale in Locale
            for message_id in MessageId
            if not str((strings.get(locale) or {}).get(message_id) or "")
        ]
        if missing:
            raise MissingMessageError(missing)
        self._strings = {locale: dict(strings[locale]) for locale in Locale}

    def template(self, locale: Locale | str, message_id: MessageId | str) -> str:
        return self._strings[Locale(locale)][MessageId(message_id)]

    def render(
        self,
        locale: Locale | str,
        message_id: MessageId | str,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        return substitute(self.template(locale, message_id), params)

    def items(self) -> list[tuple[Locale, MessageId, str]]:
        return [
            (locale, message_id, self._strings[locale][message_id])
            for locale in Locale
            for message_id in MessageId
        ]


DEFAULT_CATALOG = MessageCatalog(STRINGS)
