"""Core typed models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_OUTPUT_PATH_BYTES = 100


class SampleSet(BaseModel):
    """Positionally paired training inputs and targets."""

    model_config = ConfigDict(frozen=True)

    inputs: tuple[int, ...]
    targets: tuple[int, ...]

    @model_validator(mode="after")
    def ensure_paired(self) -> SampleSet:
        """Every input needs a target."""
        if len(self.inputs) != len(self.targets):
            raise ValueError(
                f"Sample set has {len(self.inputs)} inputs but {len(self.targets)} targets."
            )
        if not self.inputs:
            raise ValueError("Sample set must contain at least one pair.")
        return self

    def __len__(self) -> int:
        return len(self.inputs)


class Weights(BaseModel):
    """Model parameters (or their gradients) for y = w*x + b."""

    model_config = ConfigDict(frozen=True)

    w: float = 0.0
    b: float = 0.0


class LogRecord(BaseModel):
    """One progress entry emitted by the training loop."""

    model_config = ConfigDict(frozen=True)

    iteration: int
    w: float
    b: float


class Settings(BaseModel):
    """Training hyperparameters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    w: float = 0.0
    b: float = 0.0
    alpha: float = Field(default=0.00001, gt=0)
    iterations: int = Field(default=100000, ge=0)
    log_every: int = Field(default=100, gt=0)
    output: Path | None = None

    @field_validator("output", mode="before")
    @classmethod
    def normalize_output(cls, value: object) -> object:
        """Map empty, `stdout` and `-` to standard output."""
        if value is None:
            return None
        text = str(value)
        if text.strip() in {"", "stdout", "-"}:
            return None
        if len(text.encode("utf-8")) > MAX_OUTPUT_PATH_BYTES:
            raise ValueError(f"output path exceeds {MAX_OUTPUT_PATH_BYTES} bytes")
        return text

    @property
    def initial_weights(self) -> Weights:
        return Weights(w=self.w, b=self.b)
