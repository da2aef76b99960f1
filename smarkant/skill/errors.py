"""Errors raised while handling voice skill requests."""

from __future__ import annotations


class SkillRequestError(ValueError):
    """A request the skill cannot answer with a spoken reply."""

    status = "bad_request"


class MalformedRequestError(SkillRequestError):
    """The request envelope is missing required fields."""


class UnhandledRequestError(SkillRequestError):
    """The request type has no handler (only intent requests are served)."""


class UnknownIntentError(SkillRequestError):
    """The intent name is not one the desk understands."""


class UnsupportedLocaleError(SkillRequestError):
    """No message templates exist for the request locale."""


class InvalidApplicationError(SkillRequestError):
    """The request was issued for a different skill application."""

    status = "forbidden"


class MissingMessageError(LookupError):
    """The message catalog does not cover every locale and message id."""

    def __init__(self, missing: list[tuple[str, str]]) -> None:
        self.missing = list(missing)
        listed = ", ".join(f"{locale}/{message_id}" for locale, message_id in self.missing)
        super().__init__(f"message catalog incomplete: {listed}")
