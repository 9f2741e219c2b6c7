"""
Daily summary i.e. the national time series

The daily summary has one row per day on which at least one case was announced.
The number of confirmed cases comes from the case records,
the other counters (recovered, deceased, critical, tested)
come from the manually sourced daily data
because the case records aren't complete enough for them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import attr
import pandas as pd
from attrs import define, field
from loguru import logger

from casesummary.assertions import verify_daily_summary
from casesummary.constants import (
    DATE_FORMAT,
    MANUAL_CUMULATIVE_FIELDS,
    MIN_DAILY_SUMMARY_DAYS,
    ROLLING_WINDOWS,
)
from casesummary.records import to_case_frame, to_manual_daily_frame
from casesummary.typing import CaseDataFrame, DailySummaryDataFrame, RecordsLike

CUMULATIVE_FIELDS: tuple[str, ...] = tuple(MANUAL_CUMULATIVE_FIELDS.values())
"""
Cumulative fields in the daily summary which come from the manual data
"""


def group_cases_by_date(
    cases: CaseDataFrame,
    date_col: str = "dateAnnounced",
    confirmed_col: str = "confirmedPatient",
) -> DailySummaryDataFrame:
    """
    Group cases by the date they were announced

    Cases without an announced date are skipped.
    Unconfirmed cases create a row for their date
    but don't add to its `confirmed` count.

    Parameters
    ----------
    cases
        Case records

    date_col
        Column which holds the date each case was announced

    confirmed_col
        Column which indicates whether each case is confirmed

    Returns
    -------
    :
        Daily summary skeleton, indexed by date in ascending order.
        The cumulative fields are all missing at this stage.
    """
    dated = cases.loc[cases[date_col].notnull()]

    confirmed = dated.groupby(date_col)[confirmed_col].sum().astype("int64")
    confirmed.index.name = "date"

    res = confirmed.to_frame(name="confirmed")
    for cumulative_field in CUMULATIVE_FIELDS:
        res[cumulative_field] = pd.Series(pd.NA, index=res.index, dtype="Int64")

    return res.sort_index()


def merge_manual_daily_data(
    daily: DailySummaryDataFrame, manual_daily: pd.DataFrame
) -> DailySummaryDataFrame:
    """
    Merge the manually sourced data into the daily summary

    Manual data for dates which aren't in `daily` is dropped,
    the manual data never adds new dates.
    If a date appears more than once in `manual_daily`, the last row wins.

    Parameters
    ----------
    daily
        Daily summary

    manual_daily
        Normalised manual daily data
        (see [to_manual_daily_frame][casesummary.records.])

    Returns
    -------
    :
        `daily` with its cumulative fields set from `manual_daily`
    """
    manual = manual_daily.drop_duplicates(subset="date", keep="last").set_index("date")

    unmatched = manual.index.difference(daily.index)
    if not unmatched.empty:
        logger.debug(
            "Ignoring manual daily data for {} dates with no cases: {}",
            len(unmatched),
            unmatched.strftime(DATE_FORMAT).tolist(),
        )

    manual = manual.loc[manual.index.intersection(daily.index)]

    res = daily.copy()
    if manual.empty:
        return res

    for manual_field, cumulative_field in MANUAL_CUMULATIVE_FIELDS.items():
        res.loc[manual.index, cumulative_field] = manual[manual_field].astype("Int64")

    return res


def add_confirmed_cumulative(daily: DailySummaryDataFrame) -> DailySummaryDataFrame:
    """
    Add the cumulative number of confirmed cases

    Parameters
    ----------
    daily
        Daily summary, in ascending date order

    Returns
    -------
    :
        `daily` with `confirmedCumulative` added
    """
    res = daily.copy()
    res["confirmedCumulative"] = res["confirmed"].cumsum()

    return res


def add_rolling_averages(
    daily: DailySummaryDataFrame, windows: Iterable[int] = ROLLING_WINDOWS
) -> DailySummaryDataFrame:
    """
    Add rolling averages of the number of confirmed cases

    The averages are over the last `window` rows (not calendar days)
    and are floor divided.
    The divisor is always `window`, even before there are `window` rows,
    so averages at the start of the series are biased low.

    Parameters
    ----------
    daily
        Daily summary, in ascending date order

    windows
        Window sizes for which to calculate the averages

    Returns
    -------
    :
        `daily` with `confirmedAvg{window}d` and `confirmedCumulativeAvg{window}d`
        added for each window in `windows`.
        The cumulative columns are running sums of the averages.
    """
    res = daily.copy()
    for window in windows:
        avg = res["confirmed"].rolling(window, min_periods=1).sum() // window
        avg = avg.astype("int64")

        res[f"confirmedAvg{window}d"] = avg
        res[f"confirmedCumulativeAvg{window}d"] = avg.cumsum()

    return res


def forward_fill_cumulative(
    daily: DailySummaryDataFrame, zero_means_missing: bool = True
) -> DailySummaryDataFrame:
    """
    Fill gaps in the cumulative fields with the previous day's value

    Parameters
    ----------
    daily
        Daily summary, in ascending date order

    zero_means_missing
        Treat zero as missing

        The manual data uses zero for 'no data'
        so, by default, zeroes are filled too.
        Set this to `False` if the manual data uses missing values instead
        and zero is a real value.

    Returns
    -------
    :
        `daily` with its cumulative fields filled.
        If the first day is missing a value, it becomes zero.
    """
    res = daily.copy()
    for cumulative_field in CUMULATIVE_FIELDS:
        values = res[cumulative_field].astype("float64")
        if zero_means_missing:
            values = values.where(values != 0)

        res[cumulative_field] = values.ffill().fillna(0).astype("int64")

    return res


def daily_summary_to_records(daily: DailySummaryDataFrame) -> list[dict[str, object]]:
    """
    Convert the daily summary to a list of records

    Parameters
    ----------
    daily
        Daily summary

    Returns
    -------
    :
        One dictionary per day, with the date formatted as `YYYY-MM-DD`
    """
    res = daily.reset_index()
    res["date"] = pd.to_datetime(res["date"]).dt.strftime(DATE_FORMAT)

    return res.to_dict(orient="records")  # type: ignore # pandas-stubs confused


@define
class DailySummaryBuilder:
    """
    Builder of the daily summary
    """

    min_days: int = MIN_DAILY_SUMMARY_DAYS
    """
    Minimum number of days the daily summary must cover to be valid
    """

    rolling_windows: tuple[int, ...] = field(default=ROLLING_WINDOWS)
    """
    Window sizes (number of days) to use for the rolling averages
    """

    zero_means_missing: bool = True
    """
    Whether zeroes in the manual data mean 'no data'

    If `False`, blank cells in the manual data are treated as 'no data'
    and zeroes are kept.
    See [forward_fill_cumulative][casesummary.daily.].
    """

    run_checks: bool = True
    """
    If `True`, verify the output before returning it
    """

    @rolling_windows.validator
    def validate_rolling_windows(
        self, attribute: attr.Attribute[Any], value: tuple[int, ...]
    ) -> None:
        """
        Validate the rolling windows value
        """
        if any(w < 1 for w in value):
            msg = f"Rolling windows must be positive. Received: {value}"
            raise ValueError(msg)

    def __call__(
        self, cases: RecordsLike, manual_daily: RecordsLike
    ) -> DailySummaryDataFrame:
        """
        Build the daily summary

        Parameters
        ----------
        cases
            Case records

        manual_daily
            Manually sourced daily data

        Returns
        -------
        :
            Daily summary

        Raises
        ------
        InsufficientHistoryError
            There are too few days in the summary (only if `self.run_checks`)

        StaleCumulativeError
            A cumulative counter for the latest day is zero
            (only if `self.run_checks`)
        """
        cases_df = to_case_frame(cases)
        manual_daily_df = to_manual_daily_frame(
            manual_daily, missing_as_zero=self.zero_means_missing
        )

        daily = group_cases_by_date(cases_df)
        daily = merge_manual_daily_data(daily, manual_daily_df)
        daily = add_confirmed_cumulative(daily)
        daily = add_rolling_averages(daily, windows=self.rolling_windows)
        daily = forward_fill_cumulative(
            daily, zero_means_missing=self.zero_means_missing
        )
        logger.debug("Built daily summary covering {} days", daily.shape[0])

        if self.run_checks:
            daily = verify_daily_summary(daily, min_days=self.min_days)

        return daily
