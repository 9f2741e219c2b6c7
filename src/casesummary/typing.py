"""
Type hints that are used throughout
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping
from typing import Any, Union

import pandas as pd
from typing_extensions import TypeAlias

CaseDataFrame: TypeAlias = pd.DataFrame
"""
Type alias for the [pandas.DataFrame][pd.DataFrame] of case records

For typing purposes, this is just a direct alias of [pandas.DataFrame][pd.DataFrame].
However, the point of defining this
is to provide greater clarity of the kind of data we expect.

We expect one row per case.
The columns follow the canonical naming convention
(see [casesummary.renaming][]).
An example of this kind of data is given below.

```python
   caseId dateAnnounced  confirmedPatient patientStatus detectedRegion detectedLocality  cruisePassengerDisembarked  cruiseQuarantineOfficer
0       1    2020-01-15              True     Recovered       Kanagawa             <NA>                           0                        0
1       2    2020-01-24              True      Deceased          Tokyo          Shibuya                           0                        0
```
"""

DailySummaryDataFrame: TypeAlias = pd.DataFrame
"""
Type alias for the daily summary

One row per date, indexed by date (named `date`) in ascending order.
The columns are the fields of each daily summary entry
e.g. `confirmed`, `confirmedCumulative`, `testedCumulative`.
"""

RecordLike: TypeAlias = Mapping[str, Any]
"""
A single record, e.g. a row from a spreadsheet
"""

RecordsLike: TypeAlias = Union[pd.DataFrame, Iterable[RecordLike]]
"""
A collection of records, either as a data frame or as an iterable of mappings
"""

DateLike: TypeAlias = Union[dt.datetime, dt.date, str]
"""
Something which can be interpreted as a calendar date
"""
