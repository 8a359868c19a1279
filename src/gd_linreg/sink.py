"""Output sink for training progress lines."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from gd_linreg.exceptions import InputFileError


@contextmanager
def open_sink(output: Path | None) -> Iterator[TextIO]:
    """Yield standard output, or `output` opened for writing (truncated).

    Only a file opened here is closed on exit.
    """
    if output is None:
        yield sys.stdout
        return
    try:
        file_obj = output.open("w", encoding="utf-8")
    except OSError as exc:
        raise InputFileError("output", output, exc.strerror or str(exc)) from exc
    with file_obj:
        yield file_obj
