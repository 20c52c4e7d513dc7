import json
from decimal import Decimal

import pytest

from damm_fee_tracker.sheets import GoogleSheetsSink, sheet_range
from damm_fee_tracker.snapshot_log import CsvSnapshotLog, build_row
from damm_fee_tracker.utils import column_letter, raw_to_tokens, validate_pair_configs


class FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self):
        self.calls = []

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        return FakeResponse({"updates": {"updatedRows": 1}})


def test_csv_header_and_rows_follow_pair_order(tmp_path) -> None:
    log = CsvSnapshotLog(str(tmp_path / "out" / "fees.csv"), ["A/B", "C/D"])

    assert log.ensure_header() is True
    assert log.ensure_header() is False

    log.append_row("t1", {"C/D": Decimal("2.5"), "A/B": Decimal("1")}, Decimal("3.5"))
    log.append_row("t2", {"A/B": 4}, 4)

    lines = (tmp_path / "out" / "fees.csv").read_text().splitlines()
    assert lines == ["time,A/B,C/D,Total", "t1,1,2.5,3.5", "t2,4,0,4"]


def test_read_rows_without_file(tmp_path) -> None:
    assert CsvSnapshotLog(str(tmp_path / "none.csv"), ["A/B"]).read_rows() == []


def test_build_row_fills_missing_pairs_with_zero() -> None:
    assert build_row("t", ["x", "y"], {"y": 2}, 2) == ["t", 0, 2, 2]


@pytest.mark.parametrize("index,letter", [(1, "A"), (6, "F"), (26, "Z"), (27, "AA"), (52, "AZ"), (703, "AAA")])
def test_column_letter(index, letter) -> None:
    assert column_letter(index) == letter


def test_column_letter_rejects_zero() -> None:
    with pytest.raises(ValueError):
        column_letter(0)


def test_sheet_range() -> None:
    assert sheet_range(6) == "A:F"
    assert sheet_range(3, "Fees") == "'Fees'!A:C"


def test_sheet_sink_appends_user_entered_row() -> None:
    session = FakeSession()
    sink = GoogleSheetsSink("sheet123", session, timeout=5)

    sink.append_row(["2025-01-01T00:00:00.000Z", Decimal("1.5"), 0, Decimal("1.5")])

    call = session.calls[0]
    assert call["url"].endswith("/sheet123/values/A%3AD:append")
    assert call["params"] == {"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"}
    assert call["json"] == {"values": [["2025-01-01T00:00:00.000Z", "1.5", 0, "1.5"]]}
    assert call["timeout"] == 5


def test_sheet_sink_from_config_needs_id_and_credentials(config, tmp_path) -> None:
    assert GoogleSheetsSink.from_config(config) is None

    config["google_sheets"]["sheet_id"] = "sheet123"
    assert GoogleSheetsSink.from_config(config) is None

    config["google_sheets"]["credentials_path"] = str(tmp_path / "missing.json")
    assert GoogleSheetsSink.from_config(config) is None

    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"client_email": "x@example.com"}))
    config["google_sheets"]["credentials_path"] = str(broken)
    assert GoogleSheetsSink.from_config(config) is None


def test_sheet_sink_disabled(config) -> None:
    config["google_sheets"].update({"enabled": False, "sheet_id": "s", "credentials_path": "c"})
    assert GoogleSheetsSink.from_config(config) is None


def test_raw_to_tokens_is_exact() -> None:
    assert raw_to_tokens(1_000_500, 6) == Decimal("1.000500")
    assert str(raw_to_tokens(2**128, 6)).replace(".", "") == str(2**128)
    assert str(raw_to_tokens(0, 9)) == "0"
    assert str(raw_to_tokens(5, 6)) == "0.000005"


def test_validate_pair_configs_skips_incomplete_and_duplicates() -> None:
    pairs = [
        {"name": "A/B", "pool": "p1", "position": "q1"},
        {"name": "C/D", "pool": "p2"},
        {"name": "A/B", "pool": "p3", "position": "q3"},
    ]
    assert validate_pair_configs(pairs) == [pairs[0]]
