"""
Constants used throughout
"""

from __future__ import annotations

import datetime as dt

DAILY_CONFIRMED_START_DATE: dt.date = dt.date(2020, 1, 8)
"""
First day of the per-region daily confirmed count series
"""

REPORTING_UTC_OFFSET: dt.timedelta = dt.timedelta(hours=9)
"""
Offset from UTC of the timezone in which cases are announced (JST)
"""

MIN_DAILY_SUMMARY_DAYS: int = 10
"""
Minimum number of days the daily summary must cover before it can be published
"""

ROLLING_WINDOWS: tuple[int, ...] = (3, 7)
"""
Sizes (in days) of the trailing windows used for rolling averages
"""

UNKNOWN_CASE_ID: int = -1
"""
Case ID used for cases which have not been assigned an ID
"""

UNKNOWN_REGION: str = "Unknown"
"""
Region name used for cases which have no detected region
"""

DECEASED_STATUS: str = "Deceased"
"""
Value of `patientStatus` for patients who have died
"""

DATE_FORMAT: str = "%Y-%m-%d"
"""
Format used for dates in the output
"""

CUMULATIVE_SUFFIX: str = "Cumulative"
"""
Suffix of the fields in the daily summary which hold cumulative counters
"""

MANUAL_CUMULATIVE_FIELDS: dict[str, str] = {
    "recovered": "recoveredCumulative",
    "deceased": "deceasedCumulative",
    "critical": "criticalCumulative",
    "tested": "testedCumulative",
}
"""
Map from fields in the manual daily data to the daily summary fields they fill
"""
