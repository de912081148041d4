"""
Public validation entrypoints for runtime state records.

This module defines the stable entrypoints for checking candidate records.
Consumers should prefer these functions over calling the individual invariant
checks directly.

- ``validate`` checks one candidate against all twelve invariants, given an
  explicit (immutable) prior-timestamp context for the stream invariant.
- ``validate_stream`` checks an ordered sequence, feeding each record's
  timestamp into the context of the records after it.

Invariant violations are reported, never raised. The only exceptions raised
here signal malformed input that never reaches the invariant logic.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..utils.validation import CandidateTypeError, ensure_mapping
from .config import DEMO_CONFIG, EncoderConfig
from .invariants import check_all, extract_fields
from .record import RuntimeStateRecord, is_integer
from .results import StreamReport, ValidationReport, report_from_results

logger = logging.getLogger(__name__)

Candidate = Mapping[str, Any] | RuntimeStateRecord


def _as_mapping(candidate: object, context: str) -> Mapping[str, Any]:
    if isinstance(candidate, RuntimeStateRecord):
        return candidate.to_dict()
    return ensure_mapping(candidate, context=context)


def _as_prior_tuple(prior_timestamps: Iterable[int]) -> tuple[int, ...]:
    priors = tuple(prior_timestamps)
    bad = [t for t in priors if not is_integer(t)]
    if bad:
        raise CandidateTypeError(f"prior timestamps must be integers, got {bad!r}")
    return priors


def validate(
    candidate: Candidate,
    prior_timestamps: Iterable[int] = (),
    *,
    config: EncoderConfig | None = None,
) -> ValidationReport:
    """
    Validate one candidate record against all twelve invariants.

    Parameters
    ----------
    candidate:
        Parsed candidate: an arbitrary key/value mapping (typically decoded
        JSON) or a RuntimeStateRecord.
    prior_timestamps:
        Timestamps of earlier records in the same stream. Empty means the
        candidate is the first record (INV-T1 holds trivially).
    config:
        Optional encoder configuration. Defaults to ``DEMO_CONFIG``, the same
        bundle the emitter uses.

    Returns
    -------
    ValidationReport
        Twelve results in display order plus the overall verdict.

    Raises
    ------
    CandidateTypeError
        If ``candidate`` is not a mapping, or a prior timestamp is not an int.
    """
    cfg = config or DEMO_CONFIG
    data = _as_mapping(candidate, "validate")
    priors = _as_prior_tuple(prior_timestamps)

    fields = extract_fields(data)
    results = check_all(fields, priors, cfg)

    for r in results:
        if not r.passed:
            logger.debug("%s failed: %s", r.invariant_id.value, r.message)

    report = report_from_results(
        results,
        timestamp=fields.timestamp.value if fields.timestamp.ok else None,
    )
    logger.debug("validated record: %s (%d failed)", report.verdict.value, len(report.failed))
    return report


def is_conforming(
    candidate: Candidate,
    prior_timestamps: Iterable[int] = (),
    *,
    config: EncoderConfig | None = None,
) -> bool:
    """Return True only if every invariant passes."""
    return validate(candidate, prior_timestamps, config=config).conforming


def validate_stream(
    candidates: Sequence[Candidate],
    prior_timestamps: Iterable[int] = (),
    *,
    config: EncoderConfig | None = None,
) -> StreamReport:
    """
    Validate an ordered stream of candidate records.

    Each record is checked with the context ``prior_timestamps`` followed by
    the valid integer timestamps of all records before it, so INV-T1 fails for
    any record whose timestamp is below one seen earlier.
    """
    context = list(_as_prior_tuple(prior_timestamps))
    reports: list[ValidationReport] = []

    for i, candidate in enumerate(candidates):
        report = validate(candidate, context, config=config)
        if not report.conforming:
            logger.debug("stream record %d is non-conforming: %s", i, ",".join(report.failed))
        reports.append(report)
        if report.timestamp is not None:
            context.append(report.timestamp)

    return StreamReport(reports=tuple(reports))


def first_temporal_violation(candidates: Sequence[Candidate]) -> int | None:
    """
    Index of the first record whose timestamp decreases, or None.

    Records without a valid integer timestamp are skipped here; they are
    reported under INV-R4 by :func:`validate`.
    """
    latest: int | None = None
    for i, candidate in enumerate(candidates):
        data = _as_mapping(candidate, "first_temporal_violation")
        ts = data.get("timestamp")
        if not is_integer(ts):
            continue
        if latest is not None and ts < latest:
            return i
        latest = ts if latest is None else max(latest, ts)
    return None
