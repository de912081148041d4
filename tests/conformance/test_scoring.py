"""
Unit tests for the demonstration scoring functions.

These tests pin the reference values and the "no clamping" behavior that the
validator relies on when re-deriving declared scores.
"""

from __future__ import annotations

import pytest

from pmatrix_encoder.conformance.scoring import (
    DEMO_WEIGHTS,
    ScoringWeights,
    risk_score,
    stability_score,
)


def test_reference_example_scores() -> None:
    assert stability_score(0.25, 0.70, 0.30, 0.20) == pytest.approx(0.3625, abs=1e-12)
    assert risk_score(0.25, 0.70, 0.30, 0.20) == pytest.approx(0.6375, abs=1e-12)


def test_default_weights_are_equal_quarters() -> None:
    assert DEMO_WEIGHTS == ScoringWeights(0.25, 0.25, 0.25, 0.25)


def test_risk_is_complement_of_stability() -> None:
    for values in [(0.0, 0.0, 0.0, 0.0), (1.0, 1.0, 1.0, 1.0), (0.1, 0.9, 0.4, 0.6)]:
        assert risk_score(*values) == pytest.approx(1.0 - stability_score(*values))


def test_extremes() -> None:
    assert stability_score(0.0, 0.0, 0.0, 0.0) == 0.0
    assert risk_score(0.0, 0.0, 0.0, 0.0) == 1.0
    assert stability_score(1.0, 1.0, 1.0, 1.0) == 1.0
    assert risk_score(1.0, 1.0, 1.0, 1.0) == 0.0


def test_out_of_range_inputs_propagate_without_clamping() -> None:
    s = stability_score(5.0, 5.0, 5.0, 5.0)
    assert s == pytest.approx(5.0)
    assert risk_score(5.0, 5.0, 5.0, 5.0) == pytest.approx(-4.0)


def test_custom_weights_are_applied() -> None:
    w = ScoringWeights(baseline=1.0, norm=0.0, stability=0.0, meta_control=0.0)
    assert stability_score(0.3, 0.9, 0.9, 0.9, weights=w) == pytest.approx(0.3)
    assert risk_score(0.3, 0.9, 0.9, 0.9, weights=w) == pytest.approx(0.7)


def test_scoring_is_deterministic() -> None:
    a = stability_score(0.11, 0.22, 0.33, 0.44)
    b = stability_score(0.11, 0.22, 0.33, 0.44)
    assert a == b
