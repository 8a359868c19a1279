"""Gradient and cost of the squared-error objective for y = w*x + b."""

from __future__ import annotations

from gd_linreg.models import SampleSet, Weights


def compute_gradient(samples: SampleSet, weights: Weights) -> Weights:
    """Return the mean gradient of the squared error w.r.t. `w` and `b`.

    The factor of 2 from differentiating the squared residual is left out, so
    this is the gradient of ``sum(residual**2) / (2 * n)``.
    """
    dj_dw = 0.0
    dj_db = 0.0
    for x_value, y_value in zip(samples.inputs, samples.targets, strict=True):
        residual = weights.w * x_value + weights.b - y_value
        dj_dw += residual * x_value
        dj_db += residual
    count = len(samples)
    return Weights(w=dj_dw / count, b=dj_db / count)


def compute_cost(samples: SampleSet, weights: Weights) -> float:
    """Return ``sum(residual**2) / (2 * n)`` for the current weights."""
    total = 0.0
    for x_value, y_value in zip(samples.inputs, samples.targets, strict=True):
        residual = weights.w * x_value + weights.b - y_value
        total += residual * residual
    return total / (2 * len(samples))
