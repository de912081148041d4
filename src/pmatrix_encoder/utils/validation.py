from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd


class PMatrixError(Exception):
    """Base class for errors raised by the encoder before any invariant runs."""


class RecordParseError(PMatrixError, ValueError):
    """
    Error raised when serialized input cannot be turned into a candidate.

    This is a thin wrapper around ValueError so callers can catch a more
    specific exception type if they want to distinguish malformed input from
    other ValueErrors. Invariant violations are never reported this way.
    """


class CandidateTypeError(PMatrixError, TypeError):
    """Error raised when a candidate record is not a key/value mapping."""


def _prefix(context: str | None) -> str:
    return f"[{context}] " if context is not None else ""


def ensure_mapping(
    candidate: object,
    *,
    context: str | None = None,
) -> Mapping[str, Any]:
    """
    Ensure that a candidate record is a mapping.

    Parameters
    ----------
    candidate : object
        The parsed candidate to check.

    context : str, optional
        Optional context string to include in the error message
        (e.g. the name of the calling function).

    Returns
    -------
    Mapping
        ``candidate`` unchanged.

    Raises
    ------
    CandidateTypeError
        If ``candidate`` is not a Mapping.
    """
    if isinstance(candidate, Mapping):
        return candidate
    raise CandidateTypeError(
        f"{_prefix(context)}candidate must be a JSON object, got {type(candidate).__name__}"
    )


def parse_candidates(
    text: str,
    *,
    context: str | None = None,
) -> list[Mapping[str, Any]]:
    """
    Parse serialized input into a list of candidate records.

    A single JSON object yields one candidate; a JSON array of objects yields
    a stream of candidates in input order.

    Parameters
    ----------
    text : str
        Raw JSON text.

    context : str, optional
        Optional context string to include in the error message
        (e.g. the input file name).

    Raises
    ------
    RecordParseError
        If the text is not JSON, is empty, is an empty array, or is neither
        an object nor an array of objects.
    """
    if not text.strip():
        raise RecordParseError(f"{_prefix(context)}input is empty")

    try:
        payload = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal over the int-conversion digit limit.
        raise RecordParseError(f"{_prefix(context)}invalid JSON: {e}") from e

    if isinstance(payload, dict):
        return [payload]

    if isinstance(payload, list):
        if not payload:
            raise RecordParseError(f"{_prefix(context)}stream array is empty")
        bad = [i for i, item in enumerate(payload) if not isinstance(item, dict)]
        if bad:
            raise RecordParseError(
                f"{_prefix(context)}stream entries must be JSON objects; "
                f"non-object entries at positions {bad}"
            )
        return list(payload)

    raise RecordParseError(
        f"{_prefix(context)}expected a JSON object or array of objects, "
        f"got {type(payload).__name__}"
    )


class DataFrameValidationError(PMatrixError, ValueError):
    """Error raised when an input pandas.DataFrame fails a validation check."""


def ensure_columns_present(
    df: pd.DataFrame,
    required: Sequence[str],
    *,
    context: str | None = None,
) -> None:
    """
    Ensure that all required columns are present in a DataFrame.

    Parameters
    ----------
    df : pandas.DataFrame
        The DataFrame to validate.

    required : sequence of str
        Column names that must be present in ``df``.

    context : str, optional
        Optional context string to include in the error message
        (e.g. the name of the calling function).

    Raises
    ------
    DataFrameValidationError
        If one or more required columns are missing.
    """
    missing = [c for c in required if c not in df.columns]
    if not missing:
        return

    raise DataFrameValidationError(
        f"{_prefix(context)}DataFrame is missing required columns: {missing}"
    )
