"""
Summarisation of all the data for the dashboard
"""

from __future__ import annotations

from typing import Any

from attrs import define, field, frozen
from loguru import logger

from casesummary.assertions import verify_patients
from casesummary.daily import DailySummaryBuilder, daily_summary_to_records
from casesummary.prefecture import PrefectureSummaryBuilder
from casesummary.records import to_case_frame
from casesummary.typing import CaseDataFrame, DateLike, RecordsLike


@frozen
class SummaryOutput:
    """
    Everything the dashboard needs
    """

    regions: list[dict[str, Any]]
    """
    Per-region summary, ordered by number of confirmed cases
    """

    daily: list[dict[str, Any]]
    """
    Daily summary, in ascending date order
    """

    updated: str
    """
    When the input data was last updated
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a dictionary, ready to be serialised
        """
        return {
            "regions": self.regions,
            "daily": self.daily,
            "updated": self.updated,
        }


def sort_cases_by_date(
    cases: CaseDataFrame, date_col: str = "dateAnnounced"
) -> CaseDataFrame:
    """
    Sort cases by the date they were announced

    The sort is stable and cases without a date come first.

    Parameters
    ----------
    cases
        Case records

    date_col
        Column which holds the date each case was announced

    Returns
    -------
    :
        Sorted cases
    """
    return cases.sort_values(date_col, kind="stable", na_position="first")


@define
class Summariser:
    """
    Summariser of the case data and the manually sourced data
    """

    daily_summary_builder: DailySummaryBuilder = field(factory=DailySummaryBuilder)
    """
    Builder to use for the daily summary
    """

    prefecture_summary_builder: PrefectureSummaryBuilder = field(
        factory=PrefectureSummaryBuilder
    )
    """
    Builder to use for the prefecture summary
    """

    run_checks: bool = True
    """
    If `True`, verify the case records before summarising them

    This doesn't switch off the checks run by the builders,
    those are controlled by the builders themselves.
    """

    def __call__(  # noqa: PLR0913
        self,
        cases: RecordsLike,
        manual_daily: RecordsLike,
        manual_prefecture: RecordsLike,
        last_updated: str,
        now: DateLike | None = None,
    ) -> SummaryOutput:
        """
        Summarise

        Parameters
        ----------
        cases
            Case records

        manual_daily
            Manually sourced daily data

        manual_prefecture
            Manually sourced prefecture data

        last_updated
            When the data was last updated, passed through to the output as is

        now
            Current time, see [PrefectureSummaryBuilder][casesummary.prefecture.]

        Returns
        -------
        :
            Summary of the data

        Raises
        ------
        DuplicateCaseIdError
            A case ID appears more than once (only if `self.run_checks`)

        InsufficientHistoryError
            There are too few days in the daily summary

        StaleCumulativeError
            A cumulative counter for the latest day in the daily summary is zero
        """
        cases_df = to_case_frame(cases)
        if self.run_checks:
            cases_df = verify_patients(cases_df)

        cases_df = sort_cases_by_date(cases_df)
        logger.debug("Summarising {} case records", cases_df.shape[0])

        regions = self.prefecture_summary_builder(cases_df, manual_prefecture, now=now)
        daily = self.daily_summary_builder(cases_df, manual_daily)

        return SummaryOutput(
            regions=regions,
            daily=daily_summary_to_records(daily),
            updated=last_updated,
        )


def summarise(  # noqa: PLR0913
    cases: RecordsLike,
    manual_daily: RecordsLike,
    manual_prefecture: RecordsLike,
    last_updated: str,
    now: DateLike | None = None,
) -> SummaryOutput:
    """
    Summarise with the default configuration

    See [Summariser][casesummary.summariser.] for details.
    """
    return Summariser()(
        cases,
        manual_daily=manual_daily,
        manual_prefecture=manual_prefecture,
        last_updated=last_updated,
        now=now,
    )
