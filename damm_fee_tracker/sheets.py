#!/usr/bin/env python3
"""
Google Sheets Module for DAMM Fee Tracker
Appends the per-run fee row to a Google Sheet through the Sheets API v4

Authentication uses a service account JSON file (GOOGLE_APPLICATION_CREDENTIALS).
The sheet must be shared with the service account's client_email.

Version: 1.0.0
Developer: 8roku8.hl
"""

import json
from decimal import Decimal
from urllib.parse import quote

from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from .constants import GOOGLE_SHEETS_API_URL, GOOGLE_SHEETS_SCOPES
from .utils import column_letter


def sheet_range(column_count, worksheet=""):
    """A1 range covering the row width, e.g. A:F for time + 4 pairs + total"""
    cells = f"A:{column_letter(column_count)}"
    if worksheet:
        return f"'{worksheet}'!{cells}"
    return cells


def _cell_value(value):
    # Decimals go out as strings; USER_ENTERED parses them as numbers
    if isinstance(value, Decimal):
        return str(value)
    return value


class GoogleSheetsSink:
    """Appends combined fee rows to a spreadsheet"""

    def __init__(self, sheet_id, session, worksheet="", timeout=30):
        self.sheet_id = sheet_id
        self.session = session
        self.worksheet = worksheet
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        """Build the sink from config; None (with a warning) when not configured"""
        sheets_config = config.get("google_sheets", {})

        if not sheets_config.get("enabled", True):
            return None

        sheet_id = sheets_config.get("sheet_id")
        credentials_path = sheets_config.get("credentials_path")

        if not sheet_id:
            print("⚠️  GSHEET_ID not set. Sheet updates will be skipped.")
            return None
        if not credentials_path:
            print("⚠️  GOOGLE_APPLICATION_CREDENTIALS not set. Sheet updates will be skipped.")
            return None

        try:
            with open(credentials_path, 'r') as f:
                info = json.load(f)
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=GOOGLE_SHEETS_SCOPES
            )
        except (OSError, ValueError) as e:
            print(f"❌ Failed to read service account JSON: {e}")
            return None

        return cls(
            sheet_id,
            AuthorizedSession(credentials),
            worksheet=sheets_config.get("worksheet", ""),
            timeout=config.get("rpc", {}).get("timeout", 30),
        )

    def append_row(self, row):
        """Append ONE row (list of cell values) below the existing data"""
        values = [[_cell_value(value) for value in row]]
        cells = quote(sheet_range(len(row), self.worksheet), safe="")
        url = f"{GOOGLE_SHEETS_API_URL}/{self.sheet_id}/values/{cells}:append"

        response = self.session.post(
            url,
            params={
                "valueInputOption": "USER_ENTERED",
                "insertDataOption": "INSERT_ROWS",
            },
            json={"values": values},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()
