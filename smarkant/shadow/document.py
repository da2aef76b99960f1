"""Desired-state documents for the device shadow."""

from __future__ import annotations

import json
from typing import Any

from smarkant.skill.intents import DesiredState


def build_update_document(state: DesiredState) -> dict[str, Any]:
    """Wrap a desired state into a shadow update document."""
    return {"state": {"desired": state.to_dict()}}


def serialize_update_document(document: dict[str, Any]) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)
