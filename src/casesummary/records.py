"""
Conversion of the input records into data frames we can work with

The inputs come from spreadsheets so can be messy
(numbers as strings, booleans as "TRUE"/"FALSE", empty cells etc.).
Everything here is about getting them into a consistent shape
with the canonical column names and sensible dtypes.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Sequence
from typing import Any

import pandas as pd
from loguru import logger

from casesummary.assertions import assert_has_columns
from casesummary.constants import MANUAL_CUMULATIVE_FIELDS, UNKNOWN_REGION
from casesummary.renaming import rename_columns
from casesummary.typing import CaseDataFrame, RecordsLike

CASE_COLUMNS: tuple[str, ...] = (
    "caseId",
    "dateAnnounced",
    "confirmedPatient",
    "patientStatus",
    "detectedRegion",
    "detectedLocality",
    "cruisePassengerDisembarked",
    "cruiseQuarantineOfficer",
)
"""
Columns of a normalised [CaseDataFrame][casesummary.typing.]
"""

REQUIRED_CASE_COLUMNS: tuple[str, ...] = ("confirmedPatient", "patientStatus")

MANUAL_DAILY_COLUMNS: tuple[str, ...] = ("date", *MANUAL_CUMULATIVE_FIELDS)

MANUAL_PREFECTURE_COLUMNS: tuple[str, ...] = (
    "region",
    "recovered",
    "deaths",
    "localName",
)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

_TRUE_STRINGS = {"true", "t", "yes", "y", "1"}


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return True

    return isinstance(value, float) and math.isnan(value)


def parse_optional_int(value: Any) -> int | None:
    """
    Parse an integer, returning `None` if it can't be parsed

    Strings are parsed from their leading digits,
    so "12 (provisional)" becomes 12 but "1,234" becomes 1.
    Floats are truncated towards zero.

    Parameters
    ----------
    value
        Value to parse

    Returns
    -------
    :
        Parsed value, or `None` if `value` is missing or could not be parsed
    """
    if _is_missing(value) or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, numbers.Real):
        if math.isnan(value) or math.isinf(value):
            return None

        return int(value)

    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return None

    return int(match.group(1))


def safe_parse_int(value: Any) -> int:
    """
    Parse an integer, falling back to zero if it can't be parsed

    See [parse_optional_int][casesummary.records.] for the parsing rules.

    Parameters
    ----------
    value
        Value to parse

    Returns
    -------
    :
        Parsed value, or zero if `value` could not be parsed
    """
    res = parse_optional_int(value)
    if res is None:
        return 0

    return res


def parse_flag(value: Any) -> bool:
    """
    Parse a boolean flag from a spreadsheet cell

    Parameters
    ----------
    value
        Value to parse

    Returns
    -------
    :
        `True` if `value` represents true, otherwise `False`
    """
    if _is_missing(value):
        return False

    if isinstance(value, (bool, numbers.Number)):
        return bool(value)

    return str(value).strip().lower() in _TRUE_STRINGS


def _clean_label(value: Any) -> str | None:
    if _is_missing(value):
        return None

    label = str(value).strip()
    if not label:
        return None

    return label


def clean_labels(values: pd.Series[Any]) -> pd.Series[Any]:  # type: ignore # pandas-stubs not up to date
    """
    Clean labels (names of places, statuses etc.)

    Parameters
    ----------
    values
        Values to clean

    Returns
    -------
    :
        Stripped labels with object dtype.
        Missing and empty values become `None`, never `NaN`.
    """
    return pd.Series(
        [_clean_label(v) for v in values], index=values.index, dtype=object
    )


def to_data_frame(records: RecordsLike, columns: Sequence[str]) -> pd.DataFrame:
    """
    Convert records to a [pd.DataFrame][pandas.DataFrame]

    Parameters
    ----------
    records
        Records to convert

    columns
        Columns to use if there are no records at all

    Returns
    -------
    :
        A copy of `records` as a [pd.DataFrame][pandas.DataFrame]
    """
    if isinstance(records, pd.DataFrame):
        res = records.copy()
    else:
        res = pd.DataFrame.from_records(list(records))

    if res.empty and res.columns.empty:
        res = pd.DataFrame(columns=list(columns))

    return res


def parse_dates(values: pd.Series[Any]) -> pd.Series[pd.Timestamp]:  # type: ignore # pandas-stubs not up to date
    """
    Parse dates, anything that can't be parsed becomes `NaT`

    Parameters
    ----------
    values
        Values to parse

    Returns
    -------
    :
        Parsed dates, normalised to midnight
    """
    cleaned = values.map(_clean_label)

    return pd.to_datetime(cleaned, errors="coerce").dt.normalize()


def to_case_frame(cases: RecordsLike) -> CaseDataFrame:
    """
    Normalise case records

    Parameters
    ----------
    cases
        Case records, in either the canonical or the spreadsheet naming convention

    Returns
    -------
    :
        Case records with the canonical columns and dtypes

    Raises
    ------
    MissingColumnsError
        One of the required columns is missing
    """
    raw = rename_columns(to_data_frame(cases, CASE_COLUMNS), table="cases")
    assert_has_columns(raw, REQUIRED_CASE_COLUMNS)

    res = pd.DataFrame(index=raw.index)

    if "caseId" in raw.columns:
        case_ids = pd.to_numeric(raw["caseId"], errors="coerce")
        coerced = case_ids.isnull() & clean_labels(raw["caseId"]).notnull()
        if coerced.any():
            # These can't be checked for duplicates
            logger.debug(
                "Treating {} non-numeric case IDs as missing: {}",
                int(coerced.sum()),
                raw.loc[coerced, "caseId"].tolist(),
            )

        res["caseId"] = case_ids.astype("Int64")
    else:
        res["caseId"] = pd.Series(pd.NA, index=raw.index, dtype="Int64")

    if "dateAnnounced" in raw.columns:
        res["dateAnnounced"] = parse_dates(raw["dateAnnounced"])
    else:
        res["dateAnnounced"] = pd.Series(
            pd.NaT, index=raw.index, dtype="datetime64[ns]"
        )

    res["confirmedPatient"] = raw["confirmedPatient"].map(parse_flag).astype(bool)
    res["patientStatus"] = clean_labels(raw["patientStatus"])

    if "detectedRegion" in raw.columns:
        regions = clean_labels(raw["detectedRegion"])
        res["detectedRegion"] = regions.where(regions.notnull(), UNKNOWN_REGION)
    else:
        res["detectedRegion"] = UNKNOWN_REGION

    if "detectedLocality" in raw.columns:
        res["detectedLocality"] = clean_labels(raw["detectedLocality"])
    else:
        res["detectedLocality"] = pd.Series(None, index=raw.index, dtype=object)

    for flag in ["cruisePassengerDisembarked", "cruiseQuarantineOfficer"]:
        if flag in raw.columns:
            res[flag] = raw[flag].map(parse_flag).astype(bool)
        else:
            res[flag] = False

    return res.loc[:, list(CASE_COLUMNS)].reset_index(drop=True)


def to_manual_daily_frame(
    manual_daily: RecordsLike, missing_as_zero: bool = True
) -> pd.DataFrame:
    """
    Normalise the manually sourced daily data

    Rows without a usable date are dropped.

    Parameters
    ----------
    manual_daily
        Rows from the manual daily data

    missing_as_zero
        If `True`, blank or unparseable counters become zero.
        Otherwise they are kept as missing (`pd.NA`) in `Int64` columns.

    Returns
    -------
    :
        Manual daily data, one row per input row,
        with `date` parsed and the counters parsed to integers
    """
    raw = rename_columns(
        to_data_frame(manual_daily, MANUAL_DAILY_COLUMNS), table="manual_daily"
    )
    assert_has_columns(raw, ["date"])

    res = pd.DataFrame(index=raw.index)
    res["date"] = parse_dates(raw["date"])
    for field in MANUAL_CUMULATIVE_FIELDS:
        if missing_as_zero:
            if field in raw.columns:
                res[field] = raw[field].map(safe_parse_int).astype("int64")
            else:
                res[field] = 0

        elif field in raw.columns:
            res[field] = pd.array(
                [parse_optional_int(v) for v in raw[field]], dtype="Int64"
            )
        else:
            res[field] = pd.Series(pd.NA, index=raw.index, dtype="Int64")

    no_date = res["date"].isnull()
    if no_date.any():
        logger.debug(
            "Dropping {} manual daily rows without a valid date", int(no_date.sum())
        )
        res = res.loc[~no_date]

    return res.loc[:, list(MANUAL_DAILY_COLUMNS)].reset_index(drop=True)


def to_manual_prefecture_frame(manual_prefecture: RecordsLike) -> pd.DataFrame:
    """
    Normalise the manually sourced prefecture data

    Parameters
    ----------
    manual_prefecture
        Rows from the manual prefecture data

    Returns
    -------
    :
        Manual prefecture data with `recovered` and `deaths` parsed to integers
    """
    raw = rename_columns(
        to_data_frame(manual_prefecture, MANUAL_PREFECTURE_COLUMNS),
        table="manual_prefecture",
    )
    assert_has_columns(raw, ["region"])

    res = pd.DataFrame(index=raw.index)
    res["region"] = clean_labels(raw["region"])
    for field in ["recovered", "deaths"]:
        if field in raw.columns:
            res[field] = raw[field].map(safe_parse_int).astype("int64")
        else:
            res[field] = 0

    if "localName" in raw.columns:
        res["localName"] = clean_labels(raw["localName"])
    else:
        res["localName"] = pd.Series(None, index=raw.index, dtype=object)

    return res.loc[:, list(MANUAL_PREFECTURE_COLUMNS)].reset_index(drop=True)
