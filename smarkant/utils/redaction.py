"""Helpers to redact credentials from config dumps."""

from __future__ import annotations

from typing import Any

SENSITIVE_KEYS = {
    "password",
    "secret",
    "token",
    "key_path",
    "keypath",
    "application_id",
    "applicationid",
}


def mask_value(value: Any, *, keep_prefix: int = 2, keep_suffix: int = 2) -> str:
    text = str(value or "")
    if not text:
        return ""
    if len(text) <= keep_prefix + keep_suffix:
        return "*" * len(text)
    return f"{text[:keep_prefix]}{'*' * (len(text) - keep_prefix - keep_suffix)}{text[-keep_suffix:]}"


def redact_sensitive_map(data: dict[str, Any]) -> dict[str, Any]:
    output: dict[str, Any] = {}
    for key, value in data.items():
        if str(key).strip().lower() in SENSITIVE_KEYS:
            output[key] = mask_value(value)
        elif isinstance(value, dict):
            output[key] = redact_sensitive_map(value)
        else:
            output[key] = value
    return output
