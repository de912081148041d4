"""
Risk-score partition and level mapping.

``threshold_map`` partitions [0.0, 1.0] into five contiguous bands:

    [0.0, 0.2) -> Optimal
    [0.2, 0.4) -> Normal
    [0.4, 0.6) -> Caution
    [0.6, 0.8) -> Alert
    [0.8, 1.0] -> Halt

Boundary convention: every band is lower-inclusive and upper-exclusive, except
the top band which is closed at 1.0. A boundary value therefore falls into
exactly one band.

``level_map`` is a one-to-one lookup from mode to risk level (L1..L5).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import isnan
from typing import Final


class Mode(str, Enum):
    """Operating mode, ordered from lowest to highest risk."""

    OPTIMAL = "Optimal"
    NORMAL = "Normal"
    CAUTION = "Caution"
    ALERT = "Alert"
    HALT = "Halt"


class RiskLevel(str, Enum):
    """Risk classification tag derived from the mode."""

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    L4 = "L4"
    L5 = "L5"


@dataclass(frozen=True)
class PartitionThresholds:
    """
    Lower bounds of the Normal, Caution, Alert and Halt bands.

    Optimal starts at 0.0. Bounds must be strictly increasing inside (0, 1).
    """

    normal: float = 0.2
    caution: float = 0.4
    alert: float = 0.6
    halt: float = 0.8

    def bands(self) -> tuple[tuple[float, Mode], ...]:
        """Lower bound / mode pairs in descending order of bound."""
        return (
            (self.halt, Mode.HALT),
            (self.alert, Mode.ALERT),
            (self.caution, Mode.CAUTION),
            (self.normal, Mode.NORMAL),
            (0.0, Mode.OPTIMAL),
        )


DEMO_PARTITION: Final[PartitionThresholds] = PartitionThresholds()

_LEVELS: Final[dict[Mode, RiskLevel]] = {
    Mode.OPTIMAL: RiskLevel.L1,
    Mode.NORMAL: RiskLevel.L2,
    Mode.CAUTION: RiskLevel.L3,
    Mode.ALERT: RiskLevel.L4,
    Mode.HALT: RiskLevel.L5,
}


def threshold_map(
    risk_score: float,
    thresholds: PartitionThresholds | None = None,
) -> Mode | None:
    """
    Map a risk score to its mode.

    Returns None when ``risk_score`` is NaN or outside [0.0, 1.0].
    """
    thr = thresholds or DEMO_PARTITION
    if isnan(risk_score) or risk_score < 0.0 or risk_score > 1.0:
        return None
    for lower, mode in thr.bands():
        if risk_score >= lower:
            return mode
    return None


def level_map(mode: Mode | str) -> RiskLevel | None:
    """
    Map a mode (enum member or its string value) to its risk level.

    Returns None for an unknown mode.
    """
    try:
        return _LEVELS[Mode(mode)]
    except ValueError:
        return None


def consistent_pairs() -> frozenset[tuple[Mode, RiskLevel]]:
    """All (mode, risk_level) pairs the two maps can jointly produce."""
    return frozenset(_LEVELS.items())
