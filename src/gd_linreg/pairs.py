"""Input/target pair file parsing."""

from __future__ import annotations

import re
from pathlib import Path

from gd_linreg.exceptions import EmptySampleSetError, InputFileError, PairsParseError
from gd_linreg.models import SampleSet
from gd_linreg.tokens import iter_tokens

_INT_RE = re.compile(r"[+-]?\d+")


def load_pairs(path: Path, *, strict: bool = True) -> SampleSet:
    """Read whitespace-separated integer pairs from `path`."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputFileError("pairs", path, exc.strerror or str(exc)) from exc
    return parse_pairs(text, strict=strict, source=str(path))


def parse_pairs(text: str, *, strict: bool = True, source: str = "<pairs>") -> SampleSet:
    """Parse pair text into a sample set.

    Newlines carry no meaning: tokens are consumed two at a time. In strict
    mode a non-integer token or a trailing unpaired token is an error; in
    lenient mode parsing stops at the first record that is not two integers.
    """
    inputs: list[int] = []
    targets: list[int] = []
    tokens = iter_tokens(text)
    for first in tokens:
        second = next(tokens, None)
        x_value = _to_int(first)
        y_value = _to_int(second) if second is not None else None
        if x_value is None or y_value is None:
            if not strict:
                break
            raise PairsParseError(_describe_bad_record(source, first, second, x_value))
        inputs.append(x_value)
        targets.append(y_value)

    if not inputs:
        raise EmptySampleSetError(f"No input/target pairs found in {source}.")
    return SampleSet(inputs=tuple(inputs), targets=tuple(targets))


def _to_int(token: tuple[str, int] | None) -> int | None:
    if token is None or not _INT_RE.fullmatch(token[0]):
        return None
    return int(token[0])


def _describe_bad_record(
    source: str,
    first: tuple[str, int],
    second: tuple[str, int] | None,
    x_value: int | None,
) -> str:
    if x_value is None:
        token, line = first
        return f"{source}:{line}: expected an integer input, got '{token}'."
    if second is None:
        token, line = first
        return f"{source}:{line}: input '{token}' has no target value."
    token, line = second
    return f"{source}:{line}: expected an integer target, got '{token}'."
