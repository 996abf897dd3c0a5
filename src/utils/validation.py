"""Validation helpers for dataframe schemas."""

from __future__ import annotations

import pandas as pd


def require_columns(df: pd.DataFrame, required: set[str]) -> None:
    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")


def require_integer_column(df: pd.DataFrame, column: str) -> pd.Series:
    """Return df[column] as Python ints, rejecting blanks and fractional values."""
    values = pd.to_numeric(df[column], errors="coerce")
    bad = values.isna() | (values != values.round())
    if bad.any():
        offending = df.loc[bad, column].astype(str).tolist()
        raise ValueError(f"Column {column} must hold integers, got: {offending}")
    return values.astype("int64")
