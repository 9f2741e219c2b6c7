"""
Checks that data is fit to be published

All the `verify_*` functions return their input unchanged if it passes,
so they can be used inline as gates e.g. `daily = verify_daily_summary(daily)`.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from casesummary.constants import (
    CUMULATIVE_SUFFIX,
    MIN_DAILY_SUMMARY_DAYS,
    UNKNOWN_CASE_ID,
)
from casesummary.exceptions import (
    DuplicateCaseIdError,
    InsufficientHistoryError,
    MissingColumnsError,
    StaleCumulativeError,
)
from casesummary.typing import CaseDataFrame, DailySummaryDataFrame


def assert_has_columns(indf: pd.DataFrame, columns: Iterable[str]) -> None:
    """
    Assert that a [pd.DataFrame][pandas.DataFrame] has the given columns

    Parameters
    ----------
    indf
        Data to check

    columns
        Columns that must be in `indf`

    Raises
    ------
    MissingColumnsError
        `indf` is missing one or more of `columns`
    """
    missing = [c for c in columns if c not in indf.columns]
    if missing:
        raise MissingColumnsError(missing=missing, available=indf.columns.tolist())


def verify_daily_summary(
    daily: DailySummaryDataFrame, min_days: int = MIN_DAILY_SUMMARY_DAYS
) -> DailySummaryDataFrame:
    """
    Verify the daily summary

    Parameters
    ----------
    daily
        Daily summary to verify, one row per day in ascending date order

    min_days
        Minimum number of days that `daily` must cover

    Returns
    -------
    :
        `daily`, unchanged

    Raises
    ------
    InsufficientHistoryError
        `daily` has fewer than `min_days` rows

    StaleCumulativeError
        One or more cumulative fields for the latest day is less than one
    """
    if daily.shape[0] < min_days:
        raise InsufficientHistoryError(n_days=daily.shape[0], min_days=min_days)

    latest_day = daily.iloc[-1]
    stale = [
        key
        for key in daily.columns
        if key.endswith(CUMULATIVE_SUFFIX) and latest_day[key] < 1
    ]
    if stale:
        raise StaleCumulativeError(date=daily.index[-1], fields=stale)

    return daily


def verify_patients(cases: CaseDataFrame, id_col: str = "caseId") -> CaseDataFrame:
    """
    Verify the case records

    Cases with an unknown ID (-1) or without an ID are not checked.

    Parameters
    ----------
    cases
        Case records to verify

    id_col
        Column which holds the case IDs

    Returns
    -------
    :
        `cases`, unchanged

    Raises
    ------
    DuplicateCaseIdError
        At least one case ID appears more than once
    """
    ids = cases[id_col].dropna()
    ids = ids[ids != UNKNOWN_CASE_ID]

    duplicates = ids[ids.duplicated()].drop_duplicates().tolist()
    if duplicates:
        raise DuplicateCaseIdError(duplicate_ids=duplicates)

    return cases
