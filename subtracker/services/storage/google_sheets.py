"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as an optional backend because:
1. The subscription list survives losing the machine
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Every read fetches the whole worksheet (we only keep a handful of keys)
- Values are base64 text because cells hold strings, not bytes
- A cell holds at most 50,000 characters, which caps the blob size

Rows look like: key | value (base64) | updated_at (ISO-8601, UTC)
"""

import base64
import binascii
from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from subtracker.config import GoogleSheetsSettings, get_settings
from subtracker.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    StorageError,
    validate_key,
)


KEY_VALUE_COLUMNS = [
    "key",
    "value",
    "updated_at",
]

MAX_CELL_CHARS = 50000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_key_value_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.worksheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.worksheet_name,
                rows=100,
                cols=len(KEY_VALUE_COLUMNS),
            )
            sheet.append_row(KEY_VALUE_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of key-value storage.

    One row per key. The header row is never treated as data.
    Only the API calls are retried; bad keys and oversized values
    fail immediately.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(all_rows: list[list[str]], key: str) -> Optional[int]:
        """Return the 1-based sheet row index holding the key."""
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
            if row and row[0] == key:
                return idx
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _read_rows(self) -> tuple[gspread.Worksheet, list[list[str]]]:
        sheet = self._client.get_key_value_sheet()
        return sheet, sheet.get_all_values()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _write_row(self, key: str, encoded: str, updated_at: str) -> None:
        # Re-read inside the retry so a retried append never duplicates a row
        sheet = self._client.get_key_value_sheet()
        row_idx = self._find_row(sheet.get_all_values(), key)

        if row_idx is None:
            sheet.append_row([key, encoded, updated_at], value_input_option="RAW")
        else:
            sheet.update_cell(row_idx, 2, encoded)
            sheet.update_cell(row_idx, 3, updated_at)

    def get(self, key: str) -> Optional[bytes]:
        """Read the value for a key."""
        validate_key(key)
        try:
            _, all_rows = self._read_rows()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read key {key!r}: {e}")

        row_idx = self._find_row(all_rows, key)
        if row_idx is None:
            return None

        row = all_rows[row_idx - 1]
        encoded = row[1] if len(row) > 1 else ""
        try:
            return base64.b64decode(encoded.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise StorageError(f"Value for key {key!r} is not valid base64: {e}")

    def set(self, key: str, value: bytes) -> None:
        """Write the value for a key, replacing any existing row."""
        validate_key(key)
        if not isinstance(value, (bytes, bytearray)):
            raise StorageError(f"Values must be bytes, got {type(value).__name__}")

        encoded = base64.b64encode(bytes(value)).decode("ascii")
        if len(encoded) > MAX_CELL_CHARS:
            raise StorageError(
                f"Value for key {key!r} is too large for a sheet cell "
                f"({len(encoded)} > {MAX_CELL_CHARS} characters)"
            )

        try:
            self._write_row(key, encoded, datetime.now(timezone.utc).isoformat())
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write key {key!r}: {e}")

    def delete(self, key: str) -> bool:
        """Delete the row for a key."""
        validate_key(key)
        try:
            sheet, all_rows = self._read_rows()
            row_idx = self._find_row(all_rows, key)
            if row_idx is None:
                return False
            sheet.delete_rows(row_idx)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete key {key!r}: {e}")
