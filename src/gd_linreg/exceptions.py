"""Project-specific exceptions."""

from __future__ import annotations

from pathlib import Path


class GDLinRegError(Exception):
    """Base exception for the project."""


class InputFileError(GDLinRegError):
    """Raised when a pairs, settings, or output file cannot be opened."""

    def __init__(self, kind: str, path: Path | str, reason: str) -> None:
        self.kind = kind
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Error opening {kind} file {self.path}: {reason}")


class PairsParseError(GDLinRegError):
    """Raised when the pairs file contains a malformed record."""


class SettingsParseError(GDLinRegError):
    """Raised when the settings file or overrides are invalid."""


class EmptySampleSetError(GDLinRegError):
    """Raised when no input/target pairs were read."""
