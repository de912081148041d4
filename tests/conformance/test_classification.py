"""
Unit tests for the risk partition and level mapping.

Boundary convention under test: lower bound inclusive, upper bound exclusive,
with the top band closed at 1.0.
"""

from __future__ import annotations

import math

import pytest

from pmatrix_encoder.conformance.classification import (
    Mode,
    PartitionThresholds,
    RiskLevel,
    consistent_pairs,
    level_map,
    threshold_map,
)


@pytest.mark.parametrize(
    ("risk", "expected"),
    [
        (0.0, Mode.OPTIMAL),
        (0.19999999, Mode.OPTIMAL),
        (0.2, Mode.NORMAL),
        (0.4, Mode.CAUTION),
        (0.6, Mode.ALERT),
        (0.6375, Mode.ALERT),
        (0.8, Mode.HALT),
        (1.0, Mode.HALT),
    ],
)
def test_threshold_map_bands(risk: float, expected: Mode) -> None:
    assert threshold_map(risk) is expected


def test_boundary_values_classify_consistently() -> None:
    for boundary in (0.2, 0.4, 0.6, 0.8):
        first = threshold_map(boundary)
        second = threshold_map(boundary)
        assert first is not None
        assert first is second


def test_threshold_map_rejects_outside_domain() -> None:
    assert threshold_map(-0.001) is None
    assert threshold_map(1.001) is None
    assert threshold_map(math.nan) is None
    assert threshold_map(math.inf) is None


def test_threshold_map_respects_custom_partition() -> None:
    thr = PartitionThresholds(normal=0.1, caution=0.2, alert=0.3, halt=0.9)
    assert threshold_map(0.15, thr) is Mode.NORMAL
    assert threshold_map(0.85, thr) is Mode.ALERT


def test_level_map_all_modes() -> None:
    assert level_map(Mode.OPTIMAL) is RiskLevel.L1
    assert level_map("Normal") is RiskLevel.L2
    assert level_map("Caution") is RiskLevel.L3
    assert level_map("Alert") is RiskLevel.L4
    assert level_map("Halt") is RiskLevel.L5


def test_level_map_unknown_mode() -> None:
    assert level_map("Unknown") is None
    assert level_map("alert") is None


def test_level_map_is_one_to_one() -> None:
    levels = [level_map(m) for m in Mode]
    assert len(set(levels)) == len(Mode)


def test_consistent_pairs() -> None:
    pairs = consistent_pairs()
    assert len(pairs) == 5
    assert (Mode.ALERT, RiskLevel.L4) in pairs
    assert (Mode.ALERT, RiskLevel.L3) not in pairs
