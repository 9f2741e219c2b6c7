"""
Field names database
"""

from __future__ import annotations

import pandas as pd

FIELD_NAMES = pd.DataFrame(
    [
        # Case records
        ("cases", "caseId", "patientId"),
        ("cases", "dateAnnounced", "dateAnnounced"),
        ("cases", "confirmedPatient", "confirmedPatient"),
        ("cases", "patientStatus", "patientStatus"),
        ("cases", "detectedRegion", "detectedPrefecture"),
        ("cases", "detectedLocality", "detectedCityTown"),
        ("cases", "cruisePassengerDisembarked", "cruisePassengerDisembarked"),
        ("cases", "cruiseQuarantineOfficer", "cruiseQuarantineOfficer"),
        # Manual daily data ("Sum By Day" sheet)
        ("manual_daily", "date", "date"),
        ("manual_daily", "recovered", "recovered"),
        ("manual_daily", "deceased", "deceased"),
        ("manual_daily", "critical", "critical"),
        ("manual_daily", "tested", "tested"),
        # Manual prefecture data ("Prefecture Data" sheet)
        ("manual_prefecture", "region", "prefecture"),
        ("manual_prefecture", "recovered", "recovered"),
        ("manual_prefecture", "deaths", "deaths"),
        ("manual_prefecture", "localName", "prefectureJa"),
    ],
    columns=["table", "canonical", "spreadsheet"],
)
