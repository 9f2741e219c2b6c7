"""
Integration tests of `casesummary.summariser`
"""

import datetime as dt
import random
import re

import pytest

from casesummary.daily import DailySummaryBuilder
from casesummary.exceptions import (
    DuplicateCaseIdError,
    InsufficientHistoryError,
    StaleCumulativeError,
)
from casesummary.prefecture import PrefectureSummaryBuilder
from casesummary.summariser import Summariser, SummaryOutput, summarise
from casesummary.testing import create_case_records, create_manual_daily_rows, get_dates

START = dt.date(2020, 2, 1)
N_DAYS = 14


@pytest.fixture
def cases():
    return [
        *create_case_records([1, 0, 2, 3, 1, 0, 4, 2, 2, 1, 1, 3, 5, 2], region="Tokyo"),
        *create_case_records(
            [0, 1, 0, 0, 2, 1, 0, 0, 1, 0, 0, 0, 1, 1],
            region="Osaka",
            locality="Kita",
        ),
        *create_case_records([1], region="Osaka", patientStatus="Deceased"),
        *create_case_records(
            [2], start=START + dt.timedelta(days=6), cruisePassengerDisembarked=1
        ),
        *create_case_records([1], confirmedPatient=False, dateAnnounced=None),
        *create_case_records([1], caseId=-1, region="Hokkaido"),
        *create_case_records([1], caseId=-1, region="Hokkaido"),
    ]


@pytest.fixture
def manual_daily():
    return create_manual_daily_rows(
        get_dates(START, N_DAYS),
        recovered=[1, 1, 1, 0, 0, 2, 2, 2, 3, 3, 0, 0, 4, 4],
        deceased=1,
        critical=[0] * 13 + [2],
        tested=[10 * (i + 1) for i in range(N_DAYS)],
    )


@pytest.fixture
def manual_prefecture():
    return [
        {"prefecture": "Tokyo", "recovered": "10", "deaths": "1", "prefectureJa": "東京都"},
        {"prefecture": "Osaka", "recovered": "2", "deaths": "", "prefectureJa": "大阪府"},
    ]


def test_summarise(cases, manual_daily, manual_prefecture, fixed_now):
    res = summarise(
        cases,
        manual_daily=manual_daily,
        manual_prefecture=manual_prefecture,
        last_updated="2020-02-20T21:00:00+09:00",
        now=fixed_now,
    )

    assert isinstance(res, SummaryOutput)
    assert res.updated == "2020-02-20T21:00:00+09:00"

    assert [r["name"] for r in res.regions] == ["Tokyo", "Osaka", "Hokkaido"]
    assert [r["confirmed"] for r in res.regions] == [29, 8, 2]

    tokyo, osaka, hokkaido = res.regions
    assert tokyo["cruisePassenger"] == 2
    assert tokyo["recovered"] == 10
    assert tokyo["localName"] == "東京都"
    assert osaka["deaths"] == 0
    assert osaka["confirmedByLocality"] == {"Kita": 7}
    assert "localName" not in hokkaido
    for region in res.regions:
        # 2020-01-08 to 2020-02-20
        assert len(region["dailyConfirmedCount"]) == 44
        assert region["newlyConfirmed"] == region["dailyConfirmedCount"][-1]
        assert region["dailyConfirmedStartDate"] == "2020-01-08"

    assert [d["date"] for d in res.daily] == get_dates(START, N_DAYS)
    assert res.daily[-1]["confirmedCumulative"] == 39
    assert [d["recoveredCumulative"] for d in res.daily] == [
        1, 1, 1, 1, 1, 2, 2, 2, 3, 3, 3, 3, 4, 4
    ]  # fmt: skip
    assert [d["criticalCumulative"] for d in res.daily] == [0] * 13 + [2]

    cumulative = [d["confirmedCumulative"] for d in res.daily]
    assert cumulative == sorted(cumulative)
    running = 0
    for d in res.daily:
        running += d["confirmed"]
        assert d["confirmedCumulative"] == running


def test_to_dict(cases, manual_daily, manual_prefecture, fixed_now):
    res = summarise(
        cases,
        manual_daily=manual_daily,
        manual_prefecture=manual_prefecture,
        last_updated="now-ish",
        now=fixed_now,
    ).to_dict()

    assert set(res) == {"regions", "daily", "updated"}
    assert res["updated"] == "now-ish"
    assert len(res["daily"]) == N_DAYS


def test_idempotent(cases, manual_daily, manual_prefecture, fixed_now):
    summariser = Summariser()

    first = summariser(
        cases, manual_daily, manual_prefecture, last_updated="x", now=fixed_now
    )
    second = summariser(
        cases, manual_daily, manual_prefecture, last_updated="x", now=fixed_now
    )

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_input_order_does_not_matter(cases, manual_daily, manual_prefecture, fixed_now):
    shuffled = list(cases)
    random.Random(42).shuffle(shuffled)

    exp = summarise(cases, manual_daily, manual_prefecture, "x", now=fixed_now)
    res = summarise(shuffled, manual_daily, manual_prefecture, "x", now=fixed_now)

    assert res.daily == exp.daily
    assert [r["name"] for r in res.regions] == [r["name"] for r in exp.regions]
    for res_region, exp_region in zip(res.regions, exp.regions):
        assert res_region["dailyConfirmedCount"] == exp_region["dailyConfirmedCount"]
        assert res_region["confirmed"] == exp_region["confirmed"]


def test_duplicate_case_ids(cases, manual_daily, manual_prefecture, fixed_now):
    cases = [*cases, *create_case_records([2], caseId=42)]

    with pytest.raises(
        DuplicateCaseIdError, match=re.escape("Duplicated case IDs detected: [42]")
    ):
        summarise(cases, manual_daily, manual_prefecture, "x", now=fixed_now)


def test_duplicate_case_ids_no_checks(
    cases, manual_daily, manual_prefecture, fixed_now
):
    cases = [*cases, *create_case_records([2], caseId=42)]

    res = Summariser(run_checks=False)(
        cases, manual_daily, manual_prefecture, "x", now=fixed_now
    )

    assert res.daily[-1]["confirmedCumulative"] == 41
    assert res.regions[0]["confirmed"] == 31


def test_insufficient_history_propagates(manual_prefecture, fixed_now):
    cases = create_case_records([1] * 5)
    manual_daily = create_manual_daily_rows(get_dates(START, 5))

    with pytest.raises(InsufficientHistoryError):
        summarise(cases, manual_daily, manual_prefecture, "x", now=fixed_now)


def test_stale_cumulative_propagates(cases, manual_prefecture, fixed_now):
    # Manual data stops early, with zeroes on the last day
    manual_daily = create_manual_daily_rows(get_dates(START, 3), tested=0)

    with pytest.raises(StaleCumulativeError, match="testedCumulative"):
        summarise(cases, manual_daily, manual_prefecture, "x", now=fixed_now)


def test_custom_builders(cases, manual_daily, manual_prefecture, fixed_now):
    summariser = Summariser(
        daily_summary_builder=DailySummaryBuilder(rolling_windows=(5,)),
        prefecture_summary_builder=PrefectureSummaryBuilder(
            start_date=dt.date(2020, 2, 14)
        ),
    )

    res = summariser(cases, manual_daily, manual_prefecture, "x", now=fixed_now)

    assert "confirmedAvg5d" in res.daily[0]
    assert "confirmedAvg3d" not in res.daily[0]
    assert len(res.regions[0]["dailyConfirmedCount"]) == 7
