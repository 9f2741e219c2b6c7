"""
Exceptions that are used throughout
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Collection, Iterable
from typing import Any


class ValidationError(ValueError):
    """
    Base class for errors raised when data is not fit to be published

    Sub-classes set `kind`, which callers can use to branch on the failure
    without parsing the message.
    """

    kind: str = "Validation"


class InsufficientHistoryError(ValidationError):
    """
    Raised when the daily summary does not cover enough days
    """

    kind = "InsufficientHistory"

    def __init__(self, n_days: int, min_days: int) -> None:
        """
        Initialise the error

        Parameters
        ----------
        n_days
            Number of days in the daily summary

        min_days
            Minimum number of days required
        """
        self.n_days = n_days
        self.min_days = min_days

        error_msg = (
            f"Expecting at least {min_days} days of data, "
            f"the daily summary only has {n_days}."
        )
        super().__init__(error_msg)


class StaleCumulativeError(ValidationError):
    """
    Raised when cumulative counters for the latest day are not positive

    This usually means that the manual data is lagging behind the case data
    or that something has gone wrong upstream.
    """

    kind = "StaleCumulative"

    def __init__(self, date: dt.date | str, fields: Iterable[str]) -> None:
        """
        Initialise the error

        Parameters
        ----------
        date
            The latest date in the daily summary

        fields
            Cumulative fields which are less than one for `date`
        """
        self.date = date
        self.fields = tuple(fields)

        error_msg = (
            f"The following cumulative fields are less than 1 "
            f"for the latest day ({date}): {list(self.fields)}"
        )
        super().__init__(error_msg)


class DuplicateCaseIdError(ValidationError):
    """
    Raised when the same case ID appears more than once
    """

    kind = "DuplicateCaseId"

    def __init__(self, duplicate_ids: Iterable[Any]) -> None:
        """
        Initialise the error

        Parameters
        ----------
        duplicate_ids
            Case IDs which appear more than once
        """
        self.duplicate_ids = tuple(duplicate_ids)

        error_msg = f"Duplicated case IDs detected: {list(self.duplicate_ids)}"
        super().__init__(error_msg)


class MissingColumnsError(KeyError):
    """
    Raised when input data does not have the columns we need
    """

    def __init__(self, missing: Collection[str], available: Collection[str]) -> None:
        """
        Initialise the error

        Parameters
        ----------
        missing
            Columns which are required but not available

        available
            Columns which are available
        """
        self.missing = tuple(missing)
        self.available = tuple(available)

        error_msg = (
            f"The following required columns are missing: {list(self.missing)}. "
            f"Available columns: {list(self.available)}"
        )
        super().__init__(error_msg)

    def __str__(self) -> str:
        # KeyError would otherwise wrap the message in quotes
        return str(self.args[0])


class UnrecognisedValueError(ValueError):
    """
    Raised when a value is not one of the values we know about
    """

    def __init__(
        self, unrecognised_value: Any, name: str, known_values: Collection[Any]
    ) -> None:
        """
        Initialise the error

        Parameters
        ----------
        unrecognised_value
            The value which was not recognised

        name
            Name of the thing being looked up (used in the message)

        known_values
            The values we do know about
        """
        self.unrecognised_value = unrecognised_value
        self.known_values = tuple(known_values)

        error_msg = (
            f"{unrecognised_value!r} is not a recognised value for {name}. "
            f"Known values: {list(self.known_values)}"
        )
        super().__init__(error_msg)
