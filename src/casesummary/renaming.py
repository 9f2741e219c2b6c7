"""
Renaming between naming conventions

The upstream spreadsheets use names which are specific to Japan
(e.g. `detectedPrefecture`, `prefectureJa`).
Internally, we use more generic, canonical names
(e.g. `detectedRegion`, `localName`).
"""

from __future__ import annotations

from enum import Enum
from typing import cast

import pandas as pd

from casesummary.exceptions import UnrecognisedValueError


class SupportedNamingConventions(Enum):
    """
    Supported naming conventions
    """

    CANONICAL = "canonical"
    """
    The naming convention used within casesummary
    """

    SPREADSHEET = "spreadsheet"
    """
    The naming convention used by the upstream spreadsheets
    """


def lookup_mapping(
    from_key: str,
    from_value: str,
    to_key: str,
    database: pd.DataFrame,
    variable_used_for_lookup: str,
) -> str:
    """
    Lookup a mapping

    Parameters
    ----------
    from_key
        Key/column to map from

    from_value
        Value to map from (i.e. what to look up in the `from_key` column)

    to_key
        Key/column to map to

    database
        Database in which to look up the mapping

        (Not a real database, just a [pd.DataFrame][pandas.DataFrame],
        but it performs the same function.)

    variable_used_for_lookup
        The name of the variable being used for mapping

        This is only used to provide a helpful error message.

    Returns
    -------
    :
        Mapped value i.e. the equivalent value to `from_value` in `to_key`

    Raises
    ------
    UnrecognisedValueError
        `from_value` is not a recognised value in `from_key` for the given `database`
    """
    res_l = database.loc[database[from_key] == from_value, to_key].unique().tolist()

    if len(res_l) < 1:
        raise UnrecognisedValueError(
            unrecognised_value=from_value,
            name=variable_used_for_lookup,
            known_values=sorted(set(database[from_key].tolist())),
        )

    if len(res_l) > 1:  # pragma: no cover
        raise AssertionError(res_l)

    return cast(str, res_l[0])


def convert_field_name(
    field_name: str,
    from_convention: SupportedNamingConventions,
    to_convention: SupportedNamingConventions,
    table: str,
) -> str:
    """
    Convert a field name between naming conventions

    Parameters
    ----------
    field_name
        Field name to convert

    from_convention
        Naming convention of `field_name`

    to_convention
        Naming convention to convert to

    table
        Table the field belongs to
        (one of "cases", "manual_daily", "manual_prefecture")

    Returns
    -------
    :
        `field_name`, converted to `to_convention`

    Raises
    ------
    UnrecognisedValueError
        We do not know how to map `field_name`
    """
    from casesummary.databases import FIELD_NAMES

    return lookup_mapping(
        from_key=from_convention.value,
        from_value=field_name,
        variable_used_for_lookup=f"{from_convention.value} {table} field",
        to_key=to_convention.value,
        database=FIELD_NAMES.loc[FIELD_NAMES["table"] == table],
    )


def rename_columns(
    indf: pd.DataFrame,
    table: str,
    from_convention: SupportedNamingConventions = (
        SupportedNamingConventions.SPREADSHEET
    ),
    to_convention: SupportedNamingConventions = SupportedNamingConventions.CANONICAL,
) -> pd.DataFrame:
    """
    Rename the columns of a [pd.DataFrame][pandas.DataFrame]

    Columns we don't recognise are left as they are.
    If a column already exists under its target name, it is not overwritten.

    Parameters
    ----------
    indf
        Data of which to rename the columns

    table
        Table which `indf` represents

    from_convention
        Naming convention to convert from

    to_convention
        Naming convention to convert to

    Returns
    -------
    :
        `indf` with its columns renamed
    """
    rename_map = {}
    for col in indf.columns:
        try:
            new_name = convert_field_name(
                col,
                from_convention=from_convention,
                to_convention=to_convention,
                table=table,
            )
        except UnrecognisedValueError:
            continue

        if new_name != col and new_name not in indf.columns:
            rename_map[col] = new_name

    return indf.rename(columns=rename_map)
