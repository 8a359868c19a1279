"""Settings file parsing and validation."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gd_linreg.exceptions import InputFileError, SettingsParseError
from gd_linreg.models import Settings
from gd_linreg.tokens import iter_tokens

_KEY_TO_FIELD: dict[str, str] = {
    "w": "w",
    "b": "b",
    "alpha": "alpha",
    "iterations": "iterations",
    "log-every": "log_every",
    "output": "output",
}
_FIELD_TO_KEY = {field: key for key, field in _KEY_TO_FIELD.items()}
_YAML_SUFFIXES = {".yaml", ".yml"}

WarnCallback = Callable[[str], None]


def load_settings(
    path: Path | None = None,
    overrides: dict[str, Any] | None = None,
    warn: WarnCallback | None = None,
) -> Settings:
    """Load settings from defaults, an optional settings file, and explicit overrides."""
    raw: dict[str, Any] = {}
    lines: dict[str, int] = {}
    if path is not None:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputFileError("settings", path, exc.strerror or str(exc)) from exc
        if path.suffix.lower() in _YAML_SUFFIXES:
            raw = parse_yaml_settings(text, warn=warn)
        else:
            raw, lines = parse_settings(text, warn=warn)
    return build_settings(raw, overrides=overrides, lines=lines)


def parse_settings(
    text: str, warn: WarnCallback | None = None
) -> tuple[dict[str, str], dict[str, int]]:
    """Parse `key value` tokens into raw field values and the line each came from.

    Unknown keys are reported through `warn` and skipped. Later keys win.
    """
    raw: dict[str, str] = {}
    lines: dict[str, int] = {}
    tokens = iter_tokens(text)
    for key, line in tokens:
        value = next(tokens, None)
        if value is None:
            raise SettingsParseError(f"line {line}: setting '{key}' has no value.")
        field = _KEY_TO_FIELD.get(key)
        if field is None:
            _warn_unknown(warn, key)
            continue
        raw[field] = value[0]
        lines[field] = line
    return raw, lines


def parse_yaml_settings(text: str, warn: WarnCallback | None = None) -> dict[str, Any]:
    """Parse a YAML mapping that uses the same keys as the token format."""
    try:
        loaded = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise SettingsParseError(f"Settings file is not valid YAML: {exc}") from exc
    if not isinstance(loaded, dict):
        raise SettingsParseError("Settings file must contain a top-level mapping.")
    raw: dict[str, Any] = {}
    for key, value in loaded.items():
        field = _KEY_TO_FIELD.get(str(key))
        if field is None:
            _warn_unknown(warn, str(key))
            continue
        raw[field] = value
    return raw


def build_settings(
    raw: dict[str, Any],
    overrides: dict[str, Any] | None = None,
    lines: dict[str, int] | None = None,
) -> Settings:
    """Overlay raw values and then non-None overrides onto the defaults."""
    payload = dict(raw)
    if overrides:
        for field, value in overrides.items():
            if value is not None:
                payload[field] = value
    try:
        return Settings(**payload)
    except ValidationError as exc:
        raise SettingsParseError(_describe_errors(exc, lines or {}, overrides or {})) from exc


def _warn_unknown(warn: WarnCallback | None, key: str) -> None:
    if warn is not None:
        warn(f"Unknown key: {key}")


def _describe_errors(
    exc: ValidationError, lines: dict[str, int], overrides: dict[str, Any]
) -> str:
    messages: list[str] = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        key = _FIELD_TO_KEY.get(field, field)
        where = ""
        if overrides.get(field) is None and field in lines:
            where = f"line {lines[field]}: "
        messages.append(f"{where}invalid value for '{key}': {error['msg']}")
    return "Invalid settings: " + "; ".join(messages)
