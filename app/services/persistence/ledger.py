"""Google Sheets order ledger."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import gspread
from google.oauth2.service_account import Credentials

from app.core.config import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class Ledger(ABC):
    """Append-only table addressed by named ranges."""

    @abstractmethod
    def append_rows(self, range_name: str, rows: List[List[Any]]) -> None:
        """Append rows after the existing content of ``range_name``."""
        pass


def _get_client(settings: Settings) -> gspread.Client:
    """Create a gspread client from the service account JSON in settings."""
    info = json.loads(settings.google_application_credentials)
    credentials = Credentials.from_service_account_info(info, scopes=SCOPES)
    return gspread.authorize(credentials)


class SheetsLedger(Ledger):
    """
    Ledger backed by a Google Sheets spreadsheet.

    The spreadsheet is opened on the first append, so credential problems
    surface as append failures. Tests can pass a fake spreadsheet directly.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        spreadsheet: Optional[Any] = None,
    ):
        if settings is None and spreadsheet is None:
            raise ValueError("SheetsLedger needs settings or a spreadsheet")
        self.settings = settings
        self._spreadsheet = spreadsheet

    @property
    def spreadsheet(self):
        if self._spreadsheet is None:
            logger.info(f"[LEDGER] Opening spreadsheet {self.settings.sheet_id}")
            client = _get_client(self.settings)
            self._spreadsheet = client.open_by_key(self.settings.sheet_id)
        return self._spreadsheet

    def append_rows(self, range_name: str, rows: List[List[Any]]) -> None:
        """Append rows with USER_ENTERED parsing, as if typed into the sheet."""
        self.spreadsheet.values_append(
            range_name,
            params={"valueInputOption": "USER_ENTERED"},
            body={"values": rows},
        )
        logger.debug(f"[LEDGER] Appended {len(rows)} row(s) to {range_name}")


_ledger: Optional[SheetsLedger] = None


def get_sheets_ledger(settings: Settings) -> SheetsLedger:
    """Return the process-wide ledger."""
    global _ledger
    if _ledger is None:
        _ledger = SheetsLedger(settings=settings)
    return _ledger
