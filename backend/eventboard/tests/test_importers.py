from datetime import date, datetime, time

import pandas as pd
import pytest

from eventboard.services.importers import (
    InvalidCellError,
    MissingColumnsError,
    MissingSheetError,
    WorkbookFormatError,
    generate_agenda_template,
    load_agenda_workbook,
    parse_workbook,
)
from .conftest import SAMPLE_SHEETS, build_workbook


def test_load_agenda_workbook_normalises_rows():
    result = load_agenda_workbook(build_workbook(SAMPLE_SHEETS))

    assert result.summary() == {"days": 2, "slots": 3, "experts": 1, "companies": 1}
    assert result.days[0] == {"day_name": "Day 1", "day_date": date(2026, 2, 11)}
    workshop = result.slots[2]
    assert workshop["start_time"] == "14:00"
    assert workshop["show_presenter"] is False
    assert result.companies[0]["location"] == "Cairo"
    assert result.experts[0]["linkedin_url"] == "https://linkedin.com/in/janedoe"


def test_missing_start_time_column_names_sheet_and_column():
    sheets = dict(SAMPLE_SHEETS)
    sheets["Agenda Slots"] = [
        {k: v for k, v in row.items() if k != "Start Time"} for row in SAMPLE_SHEETS["Agenda Slots"]
    ]

    with pytest.raises(MissingColumnsError) as excinfo:
        load_agenda_workbook(build_workbook(sheets))

    assert excinfo.value.sheet_name == "Agenda Slots"
    assert excinfo.value.missing == ["Start Time"]
    assert "Agenda Slots" in str(excinfo.value)
    assert "Start Time" in str(excinfo.value)


def test_missing_days_sheet_lists_available_sheets():
    sheets = {name: rows for name, rows in SAMPLE_SHEETS.items() if name != "Days"}

    with pytest.raises(MissingSheetError) as excinfo:
        load_agenda_workbook(build_workbook(sheets))

    assert excinfo.value.sheet_name == "Days"
    assert "Agenda Slots" in excinfo.value.available


def test_optional_directory_sheets_may_be_absent():
    sheets = {"Days": SAMPLE_SHEETS["Days"], "Agenda Slots": SAMPLE_SHEETS["Agenda Slots"]}
    result = load_agenda_workbook(build_workbook(sheets))

    assert result.experts == []
    assert result.companies == []


def test_synonym_headers_and_native_cell_types():
    sheets = {
        "days": pd.DataFrame({"Day": ["Opening"], "Date": [datetime(2026, 3, 1)]}),
        "Slots": pd.DataFrame(
            {
                "Day": ["Opening"],
                "Title": ["Welcome"],
                "Start": [time(9, 5)],
                "End": ["9:45"],
            }
        ),
        "Startups": pd.DataFrame({"Startup Name": ["Acme"], "CEO": ["Wile"], "City": ["Giza"]}),
    }
    result = parse_workbook(sheets)

    assert result.days == [{"day_name": "Opening", "day_date": date(2026, 3, 1)}]
    slot = result.slots[0]
    assert (slot["start_time"], slot["end_time"]) == ("09:05", "09:45")
    # no presenter columns: presenter blank, flag defaults on
    assert slot["presenter_name"] == ""
    assert slot["show_presenter"] is True
    assert result.companies == [{"name": "Acme", "founder": "Wile", "location": "Giza", "industry": ""}]


def test_rows_without_key_fields_are_dropped():
    sheets = {
        "Days": pd.DataFrame({"Day Name": ["Day 1", None], "Date": ["2026-02-11", "2026-02-12"]}),
        "Agenda Slots": pd.DataFrame(
            {
                "Day Name": ["Day 1", "Day 1"],
                "Slot Title": ["Talk", None],
                "Start Time": ["09:00", "10:00"],
                "End Time": ["09:30", "10:30"],
            }
        ),
    }
    result = parse_workbook(sheets)

    assert len(result.days) == 1
    assert [s["slot_title"] for s in result.slots] == ["Talk"]


def test_invalid_date_reports_row():
    sheets = {
        "Days": pd.DataFrame({"Day Name": ["Day 1"], "Date": ["next tuesday"]}),
        "Agenda Slots": pd.DataFrame(columns=["Day Name", "Slot Title", "Start Time", "End Time"]),
    }
    with pytest.raises(InvalidCellError) as excinfo:
        parse_workbook(sheets)

    assert excinfo.value.row == 2
    assert excinfo.value.column == "Date"


def test_show_presenter_only_true_text_is_true():
    frame = pd.DataFrame(
        {
            "Day Name": ["Day 1"] * 3,
            "Slot Title": ["A", "B", "C"],
            "Start Time": ["09:00"] * 3,
            "End Time": ["10:00"] * 3,
            "Show Presenter": ["true", "yes", "FALSE"],
        }
    )
    result = parse_workbook({"Days": pd.DataFrame({"Day Name": ["Day 1"], "Date": ["2026-01-01"]}), "Agenda Slots": frame})

    assert [s["show_presenter"] for s in result.slots] == [True, False, False]


def test_unreadable_bytes_raise_format_error():
    with pytest.raises(WorkbookFormatError):
        load_agenda_workbook(b"not a workbook")
    with pytest.raises(WorkbookFormatError):
        load_agenda_workbook(b"")


def test_template_parses_into_sample_agenda():
    result = load_agenda_workbook(generate_agenda_template())

    assert [d["day_name"] for d in result.days] == ["Day 1", "Day 2"]
    assert len(result.slots) == 3
    assert result.slots[2]["show_presenter"] is False
    assert [c["name"] for c in result.companies] == ["Tech Innovators", "Green Energy"]
