"""Intent interpretation: voice intents to desired desk states."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from smarkant.skill.errors import UnknownIntentError
from smarkant.skill.messages import MessageId

POSITION_MIN = 1
POSITION_MAX = 4
HEIGHT_MIN = 500
HEIGHT_MAX = 6000

UP_POSITION = 2
DOWN_POSITION = 1

NOT_A_NUMBER = "NaN"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class IntentName(StrEnum):
    """Intents understood by the desk skill."""

    STOP = "StopIntent"
    MOVE_UP = "MoveUpIntent"
    MOVE_DOWN = "MoveDownIntent"
    MOVE_TO_POSITION = "MoveToPositionIntent"
    MOVE_TO_HEIGHT = "MoveToHeightIntent"

    @classmethod
    def parse(cls, value: str) -> "IntentName":
        try:
            return cls(str(value or "").strip())
        except ValueError:
            raise UnknownIntentError(f"unknown intent: {value!r}") from None


class MoveKind(StrEnum):
    """Values of the ``move`` discriminator in the desired-state document."""

    STOP = "stop"
    POSITION = "position"
    HEIGHT = "height"


class FailureKind(StrEnum):
    INVALID_POSITION = "invalid_position"
    INVALID_HEIGHT = "invalid_height"


POSITION_SLOT = "Position"
HEIGHT_SLOT = "Height"


@dataclass(frozen=True, slots=True)
class Intent:
    """A recognized intent with its raw slot values."""

    name: IntentName
    slots: Mapping[str, str | None] = field(default_factory=dict)

    def slot(self, name: str) -> str | None:
        return self.slots.get(name)


@dataclass(frozen=True, slots=True)
class DesiredState:
    """Target state for the desk actuator."""

    move: MoveKind
    value: int | None = None

    @classmethod
    def stop(cls) -> "DesiredState":
        return cls(MoveKind.STOP)

    @classmethod
    def position(cls, value: int) -> "DesiredState":
        if not POSITION_MIN <= value <= POSITION_MAX:
            raise ValueError(f"position out of range: {value}")
        return cls(MoveKind.POSITION, value)

    @classmethod
    def height(cls, value: int) -> "DesiredState":
        if not HEIGHT_MIN <= value <= HEIGHT_MAX:
            raise ValueError(f"height out of range: {value}")
        return cls(MoveKind.HEIGHT, value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"move": self.move.value}
        if self.move != MoveKind.STOP:
            data[self.move.value] = self.value
        return data

    def message_params(self) -> dict[str, Any]:
        if self.move == MoveKind.STOP:
            return {}
        return {self.move.value: self.value}


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """A rejected numeric parameter and the value the user gave."""

    kind: FailureKind
    value: int | str

    @property
    def message_id(self) -> MessageId:
        if self.kind == FailureKind.INVALID_POSITION:
            return MessageId.INVALID_POSITION
        return MessageId.INVALID_HEIGHT

    def message_params(self) -> dict[str, Any]:
        key = "position" if self.kind == FailureKind.INVALID_POSITION else "height"
        return {key: self.value}


def parse_slot_integer(raw: Any) -> int | None:
    """Parse a slot value as a base-10 integer, returning None when it is not one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    try:
        return int(text, 10)
    except ValueError:
        # digit strings beyond the interpreter's conversion limit
        return None


def _offending_value(raw: Any, parsed: int | None) -> int | str:
    if parsed is not None:
        return parsed
    text = str(raw if raw is not None else "").strip()
    return text or NOT_A_NUMBER


def interpret_intent(
    intent: Intent | IntentName | str,
    slots: Mapping[str, str | None] | None = None,
) -> DesiredState | ValidationFailure:
    """
    Map an intent and its raw slots to a desired state.

    Stop, MoveUp and MoveDown ignore their slots. MoveToPosition and
    MoveToHeight validate the numeric slot and return a ValidationFailure
    instead of raising when it is missing, malformed or out of range.
    """
    if isinstance(intent, Intent):
        name = intent.name
        slots = intent.slots if slots is None else slots
    else:
        name = intent if isinstance(intent, IntentName) else IntentName.parse(intent)
    values: Mapping[str, str | None] = slots or {}

    if name == IntentName.STOP:
        return DesiredState.stop()
    if name == IntentName.MOVE_UP:
        return DesiredState.position(UP_POSITION)
    if name == IntentName.MOVE_DOWN:
        return DesiredState.position(DOWN_POSITION)

    if name == IntentName.MOVE_TO_POSITION:
        raw = values.get(POSITION_SLOT)
        position = parse_slot_integer(raw)
        if position is not None and POSITION_MIN <= position <= POSITION_MAX:
            return DesiredState.position(position)
        return ValidationFailure(FailureKind.INVALID_POSITION, _offending_value(raw, position))

    raw = values.get(HEIGHT_SLOT)
    height = parse_slot_integer(raw)
    if height is not None and HEIGHT_MIN <= height <= HEIGHT_MAX:
        return DesiredState.height(height)
    return ValidationFailure(FailureKind.INVALID_HEIGHT, _offending_value(raw, height))
