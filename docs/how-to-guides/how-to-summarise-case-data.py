# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.16.6
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %% [markdown]
# # How to summarise case data
#
# Here we demonstrate how to turn case records
# plus the manually curated data into the summaries used by the dashboard.
# Fetching the data and publishing the result are up to you,
# casesummary only does the bit in the middle.

# %% [markdown]
# ## Imports

# %%
import datetime as dt
import json

import pandas as pd
from loguru import logger

from casesummary.daily import DailySummaryBuilder
from casesummary.exceptions import ValidationError
from casesummary.prefecture import PrefectureSummaryBuilder
from casesummary.summariser import Summariser
from casesummary.testing import (
    create_case_records,
    create_manual_daily_rows,
    get_dates,
)

# %%
# Logging is off by default, switch it on to see what is going on
logger.enable("casesummary")

# %% [markdown]
# ## Starting point
#
# The starting point is the case records.
# These can be a list of dictionaries (e.g. rows from a spreadsheet)
# or a `pd.DataFrame`.
# Both the spreadsheet column names (e.g. `detectedPrefecture`)
# and our canonical names (e.g. `detectedRegion`) are understood.

# %%
# (this is obviously a scrappy demo,
# you would normally load real data from somewhere)
start = dt.date(2020, 2, 1)
cases = [
    *create_case_records([1, 0, 2, 3, 1, 2, 4, 2, 2, 1, 3, 5], start=start),
    *create_case_records(
        [1, 1, 0, 2, 1, 0, 1, 1, 0, 1, 1, 1],
        start=start,
        region="Osaka",
        locality="Kita",
    ),
]
pd.DataFrame(cases).head()

# %% [markdown]
# Then there is the manually curated data.
# The daily data provides cumulative counters
# we can't reliably get from the case records.

# %%
dates = get_dates(start, 12)
manual_daily = create_manual_daily_rows(
    dates,
    recovered=[0, 0, 1, 1, 0, 0, 2, 3, 3, 0, 0, 5],
    deceased=1,
    critical=2,
    tested=[10 * (i + 1) for i in range(12)],
)
pd.DataFrame(manual_daily)

# %% [markdown]
# The prefecture data overrides recovered and deaths
# and gives a local name for each prefecture.

# %%
manual_prefecture = [
    {"prefecture": "Tokyo", "recovered": "4", "deaths": "0", "prefectureJa": "東京都"},
    {"prefecture": "Osaka", "recovered": "1", "deaths": "0", "prefectureJa": "大阪府"},
]

# %% [markdown]
# ## Summarising
#
# The `Summariser` does everything in one go.
# We pass `now` explicitly so that the output is reproducible,
# if you leave it out then the system clock is used.

# %%
summariser = Summariser()
summary = summariser(
    cases,
    manual_daily=manual_daily,
    manual_prefecture=manual_prefecture,
    last_updated="2020-02-12T18:00:00+09:00",
    now=dt.datetime(2020, 2, 12, 9, 0, tzinfo=dt.timezone.utc),
)

# %%
pd.DataFrame(summary.daily)

# %%
pd.DataFrame(summary.regions)[["name", "localName", "confirmed", "newlyConfirmed"]]

# %%
print(json.dumps(summary.to_dict(), ensure_ascii=False)[:500])

# %% [markdown]
# ## Running the steps separately
#
# Each builder can also be used on its own.
# The daily summary builder gives you a `pd.DataFrame`,
# which is handy for plotting and checking.

# %%
daily = DailySummaryBuilder(rolling_windows=(3, 7, 14))(cases, manual_daily)
daily

# %%
PrefectureSummaryBuilder()(cases, manual_prefecture, now=dt.date(2020, 2, 12))[0]

# %% [markdown]
# ## When things go wrong
#
# If the data isn't fit to be published, a `ValidationError` is raised.
# Each error has a `kind` which you can branch on,
# plus the details of what went wrong.
# Here, the manual data is missing for the whole period
# so the cumulative counters for the latest day are zero.

# %%
try:
    summariser(cases, [], manual_prefecture, last_updated="never")
except ValidationError as exc:
    print(f"{exc.kind}: {exc}")
