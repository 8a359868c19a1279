"""Batch gradient descent training loop."""

from __future__ import annotations

from collections.abc import Callable

from gd_linreg.gradient import compute_gradient
from gd_linreg.models import LogRecord, SampleSet, Settings, Weights

LogCallback = Callable[[LogRecord], None]


def train(
    samples: SampleSet,
    settings: Settings,
    on_log: LogCallback | None = None,
) -> Weights:
    """Run steps 0..settings.iterations inclusive and return the final weights.

    Both gradients come from the same snapshot of the weights, so `w` and `b`
    are updated simultaneously. `on_log` fires after the update on every step
    divisible by `settings.log_every`.
    """
    weights = settings.initial_weights
    for step in range(settings.iterations + 1):
        gradient = compute_gradient(samples, weights)
        weights = Weights(
            w=weights.w - settings.alpha * gradient.w,
            b=weights.b - settings.alpha * gradient.b,
        )
        if on_log is not None and step % settings.log_every == 0:
            on_log(LogRecord(iteration=step, w=weights.w, b=weights.b))
    return weights


def format_log_line(record: LogRecord) -> str:
    """Render a progress record as `iteration: N, w: W, b: B`."""
    return f"iteration: {record.iteration}, w: {record.w:.6f}, b: {record.b:.6f}"
