"""
Demonstration score aggregation for runtime state records.

This module computes the two derived scores carried by every record:

- ``stability_score``: a fixed weighted sum of the four function values.
- ``risk_score``: the complement of that same weighted sum.

The formulas exist only to populate the derived fields for schema conformance.
They are not normative scoring logic.

Design goals:
- Pure functions (no clamping, no validation, no state)
- One weight bundle shared by emission and validation, so re-derived values
  agree with emitted values up to floating-point representation error
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class ScoringWeights:
    """
    Linear weights applied to the four function values.

    The demonstration weights are equal (0.25 each), which makes
    ``stability_score`` the arithmetic mean of the inputs.
    """

    baseline: float = 0.25
    norm: float = 0.25
    stability: float = 0.25
    meta_control: float = 0.25


DEMO_WEIGHTS: Final[ScoringWeights] = ScoringWeights()


def stability_score(
    baseline: float,
    norm: float,
    stability: float,
    meta_control: float,
    *,
    weights: ScoringWeights | None = None,
) -> float:
    """
    Weighted sum of the four function values.

    Out-of-range inputs are not clamped; they propagate into an out-of-range
    score, which the validator reports.
    """
    w = weights or DEMO_WEIGHTS
    return (
        w.baseline * baseline
        + w.norm * norm
        + w.stability * stability
        + w.meta_control * meta_control
    )


def risk_score(
    baseline: float,
    norm: float,
    stability: float,
    meta_control: float,
    *,
    weights: ScoringWeights | None = None,
) -> float:
    """Complement of :func:`stability_score` (``1 - stability_score``)."""
    return 1.0 - stability_score(baseline, norm, stability, meta_control, weights=weights)
