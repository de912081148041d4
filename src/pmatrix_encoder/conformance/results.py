"""
Portable result artifacts for record validation.

This module defines small, stable, JSON-friendly result containers intended for:

- returning per-invariant outcomes from the validation entrypoints,
- rendering the line-oriented CLI report,
- building DataFrame summaries over a stream of records.

Design goals
------------
- Keep this module *pure* (no validation logic, no pandas dependency).
- Preserve the fixed display order of the twelve invariants.
- Always carry the full report, whatever the overall verdict.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

_REASON_SEP: Final[str] = "|"


class InvariantId(str, Enum):
    """The twelve invariants, declared in display order."""

    R1 = "INV-R1"
    R2 = "INV-R2"
    R3 = "INV-R3"
    R4 = "INV-R4"
    C1 = "INV-C1"
    C2 = "INV-C2"
    C3 = "INV-C3"
    S1 = "INV-S1"
    S2 = "INV-S2"
    S3 = "INV-S3"
    S4 = "INV-S4"
    T1 = "INV-T1"


INVARIANT_ORDER: Final[tuple[InvariantId, ...]] = tuple(InvariantId)


class Verdict(str, Enum):
    """Overall outcome of validating one record."""

    CONFORMING = "conforming"
    NON_CONFORMING = "non-conforming"


@dataclass(frozen=True, slots=True)
class InvariantResult:
    """Outcome of a single invariant check."""

    invariant_id: InvariantId
    passed: bool
    message: str

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def format_line(self) -> str:
        return f"[{self.status}] {self.invariant_id.value} — {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "invariant": self.invariant_id.value,
            "passed": self.passed,
            "message": self.message,
        }


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """
    Ordered twelve-entry report for one candidate record.

    Fields
    ------
    results:
        One InvariantResult per invariant, in INVARIANT_ORDER.
    timestamp:
        The candidate's timestamp when it was a valid integer, else None.
        Carried so stream validation can extend the prior-timestamp context.
    """

    results: tuple[InvariantResult, ...]
    timestamp: int | None = None

    def __iter__(self) -> Iterator[InvariantResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, invariant_id: InvariantId | str) -> InvariantResult:
        key = InvariantId(invariant_id)
        for r in self.results:
            if r.invariant_id is key:
                return r
        raise KeyError(key.value)

    @property
    def conforming(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def verdict(self) -> Verdict:
        return Verdict.CONFORMING if self.conforming else Verdict.NON_CONFORMING

    @property
    def failed(self) -> tuple[InvariantId, ...]:
        return tuple(r.invariant_id for r in self.results if not r.passed)

    def summary_line(self) -> str:
        if self.conforming:
            return "Result: ALL INVARIANTS SATISFIED — record is conforming."
        return "Result: INVARIANT VIOLATION(S) DETECTED — record is malformed."

    def format_lines(self) -> list[str]:
        """Per-invariant lines, a blank separator, then the summary line."""
        return [r.format_line() for r in self.results] + ["", self.summary_line()]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-friendly dict.

        Conventions:
        - enums are serialized via `.value`
        - failed invariant ids are provided both as a list and a compact string
        """
        failed = [i.value for i in self.failed]
        return {
            "verdict": self.verdict.value,
            "conforming": self.conforming,
            "timestamp": self.timestamp,
            "results": [r.to_dict() for r in self.results],
            "failed": failed,
            "failed_str": _REASON_SEP.join(failed),
        }


@dataclass(frozen=True, slots=True)
class StreamReport:
    """Reports for an ordered stream of candidate records."""

    reports: tuple[ValidationReport, ...]

    def __iter__(self) -> Iterator[ValidationReport]:
        return iter(self.reports)

    def __len__(self) -> int:
        return len(self.reports)

    @property
    def conforming(self) -> bool:
        return all(r.conforming for r in self.reports)

    @property
    def nonconforming_indices(self) -> tuple[int, ...]:
        return tuple(i for i, r in enumerate(self.reports) if not r.conforming)

    def to_dict(self) -> dict[str, Any]:
        return {
            "conforming": self.conforming,
            "records": [r.to_dict() for r in self.reports],
            "nonconforming_indices": list(self.nonconforming_indices),
        }


def report_from_results(
    results: Sequence[InvariantResult],
    *,
    timestamp: int | None = None,
) -> ValidationReport:
    """
    Assemble a ValidationReport, enforcing the fixed display order.

    Raises
    ------
    ValueError
        If ``results`` does not hold exactly one entry per invariant.
    """
    by_id = {r.invariant_id: r for r in results}
    if len(results) != len(INVARIANT_ORDER) or set(by_id) != set(INVARIANT_ORDER):
        raise ValueError(
            "A validation report needs exactly one result per invariant; "
            f"got {[r.invariant_id.value for r in results]}"
        )
    return ValidationReport(
        results=tuple(by_id[i] for i in INVARIANT_ORDER),
        timestamp=timestamp,
    )
