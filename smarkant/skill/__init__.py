"""Voice skill: intent interpretation and localized replies."""

from smarkant.skill.errors import (
    InvalidApplicationError,
    MalformedRequestError,
    MissingMessageError,
    SkillRequestError,
    UnhandledRequestError,
    UnknownIntentError,
    UnsupportedLocaleError,
)
from smarkant.skill.intents import (
    DesiredState,
    FailureKind,
    Intent,
    IntentName,
    MoveKind,
    ValidationFailure,
    interpret_intent,
)
from smarkant.skill.messages import DEFAULT_CATALOG, Locale, MessageCatalog, MessageId

__all__ = [
    "DEFAULT_CATALOG",
    "DesiredState",
    "FailureKind",
    "Intent",
    "IntentName",
    "InvalidApplicationError",
    "Locale",
    "MalformedRequestError",
    "MessageCatalog",
    "MessageId",
    "MissingMessageError",
    "MoveKind",
    "SkillRequestError",
    "UnhandledRequestError",
    "UnknownIntentError",
    "UnsupportedLocaleError",
    "ValidationFailure",
    "interpret_intent",
]
