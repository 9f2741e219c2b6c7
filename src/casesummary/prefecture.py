"""
Prefecture summary i.e. the per-region breakdown

Each region gets its own entry with its case counts,
a daily series of newly confirmed cases
and whatever the manually sourced prefecture data overrides.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

import pandas as pd
from attrs import define
from loguru import logger

from casesummary.constants import (
    DAILY_CONFIRMED_START_DATE,
    DATE_FORMAT,
    DECEASED_STATUS,
    REPORTING_UTC_OFFSET,
)
from casesummary.records import to_case_frame, to_manual_prefecture_frame
from casesummary.typing import CaseDataFrame, DateLike, RecordsLike

COUNTER_FIELDS: tuple[str, ...] = (
    "confirmed",
    "cruisePassenger",
    "cruiseWorker",
    "deaths",
)
"""
Fields of each region's entry which are simple counts
"""


def get_reporting_date(
    now: DateLike | None = None,
    utc_offset: dt.timedelta = REPORTING_UTC_OFFSET,
) -> dt.date:
    """
    Get the current date in the reporting timezone

    Parameters
    ----------
    now
        The current time

        Naive datetimes are assumed to be in UTC.
        If a date is supplied, it is used as is.
        If not supplied, the system clock is used.

    utc_offset
        Offset from UTC of the reporting timezone

    Returns
    -------
    :
        Current date in the reporting timezone
    """
    reporting_tz = dt.timezone(utc_offset)
    if now is None:
        return dt.datetime.now(reporting_tz).date()

    if isinstance(now, str):
        now = pd.Timestamp(now).to_pydatetime()

    if isinstance(now, dt.datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=dt.timezone.utc)

        return now.astimezone(reporting_tz).date()

    return now


def get_region_counters(
    cases: CaseDataFrame,
    region_col: str = "detectedRegion",
) -> pd.DataFrame:
    """
    Get the case counts for each region

    Only confirmed cases count towards `confirmed`,
    `cruisePassenger` and `cruiseWorker`.
    All cases count towards `deaths`, whether confirmed or not.

    Parameters
    ----------
    cases
        Case records

    region_col
        Column which holds the region in which each case was detected

    Returns
    -------
    :
        Counters, one row per region in `cases`, indexed by region name
    """
    regions = pd.Index(sorted(cases[region_col].unique()), name="region")
    confirmed = cases.loc[cases["confirmedPatient"]]
    confirmed_by_region = confirmed.groupby(region_col)

    res = pd.DataFrame(index=regions)
    res["confirmed"] = confirmed_by_region.size()
    res["cruisePassenger"] = confirmed_by_region["cruisePassengerDisembarked"].sum()
    res["cruiseWorker"] = confirmed_by_region["cruiseQuarantineOfficer"].sum()
    res["deaths"] = (
        cases["patientStatus"].eq(DECEASED_STATUS).groupby(cases[region_col]).sum()
    )

    return res.fillna(0).astype("int64")


def get_confirmed_by_locality(
    cases: CaseDataFrame,
    region_col: str = "detectedRegion",
    locality_col: str = "detectedLocality",
) -> dict[str, dict[str, int]]:
    """
    Get the number of confirmed cases in each locality of each region

    Parameters
    ----------
    cases
        Case records

        Localities appear in the order in which they first appear in `cases`.

    region_col
        Column which holds the region in which each case was detected

    locality_col
        Column which holds the locality in which each case was detected

    Returns
    -------
    :
        Map from region to a map from locality to number of confirmed cases.
        Regions with no confirmed cases with a locality map to an empty dictionary.
    """
    res: dict[str, dict[str, int]] = {
        region: {} for region in sorted(cases[region_col].unique())
    }

    with_locality = cases.loc[cases["confirmedPatient"] & cases[locality_col].notnull()]
    counts = with_locality.groupby([region_col, locality_col], sort=False).size()
    for (region, locality), count in counts.items():
        res[region][locality] = int(count)

    return res


def get_daily_confirmed_counts(
    cases: CaseDataFrame,
    start_date: dt.date,
    end_date: dt.date,
    region_col: str = "detectedRegion",
    date_col: str = "dateAnnounced",
) -> pd.DataFrame:
    """
    Get the number of confirmed cases announced each day in each region

    Parameters
    ----------
    cases
        Case records

    start_date
        First day of the series

    end_date
        Last day of the series (inclusive)

    region_col
        Column which holds the region in which each case was detected

    date_col
        Column which holds the date each case was announced

    Returns
    -------
    :
        Daily counts, one row per region and one column per day.
        If `end_date` is before `start_date`, there are no columns.
    """
    regions = pd.Index(sorted(cases[region_col].unique()), name="region")
    days = pd.date_range(start_date, end_date, freq="D")

    confirmed = cases.loc[cases["confirmedPatient"] & cases[date_col].notnull()]
    if confirmed.empty or days.empty:
        return pd.DataFrame(0, index=regions, columns=days, dtype="int64")

    counts = (
        confirmed.groupby([region_col, date_col])
        .size()
        .unstack(date_col, fill_value=0)
        .reindex(index=regions, columns=days, fill_value=0)
    )

    return counts.astype("int64")


def merge_manual_prefecture_data(
    summary: dict[str, dict[str, Any]], manual_prefecture: pd.DataFrame
) -> dict[str, dict[str, Any]]:
    """
    Merge the manually sourced prefecture data into the summary

    Manual data for regions which aren't in `summary` is dropped.
    For regions which are, `recovered` and `deaths` are overwritten
    and `localName` is set if the manual data has one.
    If a region appears more than once in `manual_prefecture`, the last row wins.

    Parameters
    ----------
    summary
        Summary, map from region name to that region's entry

    manual_prefecture
        Normalised manual prefecture data
        (see [to_manual_prefecture_frame][casesummary.records.])

    Returns
    -------
    :
        Summary with the manual data merged in
    """
    res = {region: dict(entry) for region, entry in summary.items()}

    unmatched = []
    for row in manual_prefecture.itertuples(index=False):
        if row.region not in res:
            unmatched.append(row.region)
            continue

        res[row.region]["recovered"] = int(row.recovered)
        res[row.region]["deaths"] = int(row.deaths)
        if pd.isnull(row.localName):
            res[row.region].pop("localName", None)
        else:
            res[row.region]["localName"] = row.localName

    if unmatched:
        logger.debug(
            "Ignoring manual prefecture data for regions with no cases: {}", unmatched
        )

    return res


def order_regions(summary: dict[str, dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Order the regions by number of confirmed cases, most first

    Regions with the same number of confirmed cases are ordered by name.

    Parameters
    ----------
    summary
        Summary, map from region name to that region's entry

    Returns
    -------
    :
        Region entries, each with the region's name added as `name`
    """
    ordered = sorted(summary.items(), key=lambda kv: (-kv[1]["confirmed"], kv[0]))

    return [{**entry, "name": region} for region, entry in ordered]


@define
class PrefectureSummaryBuilder:
    """
    Builder of the prefecture summary
    """

    start_date: dt.date = DAILY_CONFIRMED_START_DATE
    """
    First day of each region's daily confirmed count series
    """

    utc_offset: dt.timedelta = REPORTING_UTC_OFFSET
    """
    Offset from UTC of the timezone used to work out today's date
    """

    def __call__(
        self,
        cases: RecordsLike,
        manual_prefecture: RecordsLike,
        now: DateLike | None = None,
    ) -> list[dict[str, Any]]:
        """
        Build the prefecture summary

        Parameters
        ----------
        cases
            Case records

        manual_prefecture
            Manually sourced prefecture data

        now
            Current time, used to work out where the daily series end

            If not supplied, the system clock is used.
            Supply it if you need reproducible output.

        Returns
        -------
        :
            One entry per region, ordered by number of confirmed cases
        """
        cases_df = to_case_frame(cases)
        manual_prefecture_df = to_manual_prefecture_frame(manual_prefecture)

        counters = get_region_counters(cases_df)
        confirmed_by_locality = get_confirmed_by_locality(cases_df)
        daily_confirmed = get_daily_confirmed_counts(
            cases_df,
            start_date=self.start_date,
            end_date=get_reporting_date(now, utc_offset=self.utc_offset),
        )

        summary: dict[str, dict[str, Any]] = {}
        for region, region_counters in counters.iterrows():
            entry: dict[str, Any] = {
                key: int(region_counters[key]) for key in COUNTER_FIELDS
            }
            entry["confirmedByLocality"] = confirmed_by_locality[region]

            if not daily_confirmed.columns.empty:
                daily_counts = daily_confirmed.loc[region].tolist()
                entry["dailyConfirmedCount"] = daily_counts
                entry["dailyConfirmedStartDate"] = self.start_date.strftime(
                    DATE_FORMAT
                )
                entry["newlyConfirmed"] = daily_counts[-1]

            summary[region] = entry

        summary = merge_manual_prefecture_data(summary, manual_prefecture_df)
        logger.debug("Built prefecture summary for {} regions", len(summary))

        return order_regions(summary)
