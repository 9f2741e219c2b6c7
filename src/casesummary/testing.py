"""
Code to support our tests

This is here, rather than in our `tests` directory
because of the issues that come
when you turn your tests into a package using `__init__.py` files
(for details, see https://docs.pytest.org/en/7.1.x/explanation/goodpractices.html#choosing-an-import-mode).
"""

from __future__ import annotations

import datetime as dt
import itertools
from collections.abc import Iterable, Sequence
from typing import Any

from casesummary.constants import DATE_FORMAT, MANUAL_CUMULATIVE_FIELDS

_CASE_IDS = itertools.count(1)


def get_dates(start: dt.date, n_days: int) -> list[str]:
    """
    Get consecutive dates as strings

    Parameters
    ----------
    start
        First date

    n_days
        Number of dates

    Returns
    -------
    :
        Dates, formatted like the upstream spreadsheets
    """
    return [(start + dt.timedelta(days=i)).strftime(DATE_FORMAT) for i in range(n_days)]


def create_case_records(
    confirmed_per_day: Sequence[int],
    start: dt.date = dt.date(2020, 2, 1),
    region: str = "Tokyo",
    locality: str | None = None,
    **overrides: Any,
) -> list[dict[str, Any]]:
    """
    Create confirmed case records

    Parameters
    ----------
    confirmed_per_day
        Number of confirmed cases to create for each day, starting from `start`

    start
        Date on which the first cases are announced

    region
        Region in which the cases are detected

    locality
        Locality in which the cases are detected

    **overrides
        Values which override the defaults for every created record

    Returns
    -------
    :
        Case records, with unique case IDs
    """
    dates = get_dates(start, len(confirmed_per_day))

    res = []
    for date, n_cases in zip(dates, confirmed_per_day):
        for _ in range(n_cases):
            record = {
                "caseId": next(_CASE_IDS),
                "dateAnnounced": date,
                "confirmedPatient": True,
                "patientStatus": "Hospitalized",
                "detectedRegion": region,
                "detectedLocality": locality,
                "cruisePassengerDisembarked": 0,
                "cruiseQuarantineOfficer": 0,
            }
            record.update(overrides)
            res.append(record)

    return res


def create_manual_daily_rows(
    dates: Iterable[str], **values: Sequence[Any] | Any
) -> list[dict[str, Any]]:
    """
    Create rows of manual daily data

    Parameters
    ----------
    dates
        Dates for which to create rows

    **values
        Values for each of the manual fields
        (recovered, deceased, critical, tested).
        Either a sequence with one value per date or a single value for all dates.
        Fields which aren't supplied are set to one.

    Returns
    -------
    :
        Manual daily rows
    """
    res = []
    for i, date in enumerate(dates):
        row: dict[str, Any] = {"date": date}
        for manual_field in MANUAL_CUMULATIVE_FIELDS:
            value = values.get(manual_field, 1)
            if isinstance(value, (list, tuple)):
                value = value[i]

            row[manual_field] = value

        res.append(row)

    return res
