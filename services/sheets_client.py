#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Google Sheets client: the tabular store behind the registration bot
"""
import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.exceptions import ConfigurationError, StoreError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
USER_ID_COLUMN = 1  # column B holds the Telegram user id on every sheet
READ_COLUMNS = "A:T"

_UPDATED_ROW = re.compile(r"![A-Z]+(\d+)")

# failures of the Google client stack that leave the spreadsheet unreachable
SHEETS_ERRORS = (HttpError, OSError, TimeoutError, GoogleAuthError, httplib2.HttpLib2Error)


@dataclass
class SheetRow:
    row_index: int  # 1-based, as in A1 notation
    values: List[str]

    def cell(self, column: int) -> str:
        return self.values[column] if column < len(self.values) else ""


class TabularStore(Protocol):
    """The four spreadsheet operations the registration core relies on"""

    async def append_row(self, sheet_name: str, values: List[Any]) -> int: ...

    async def read_rows(self, range_: str) -> List[List[str]]: ...

    async def update_cell(self, range_: str, value: Any) -> None: ...

    async def find_by_user_id(self, sheet_name: str, user_id: int) -> Optional[SheetRow]: ...


def sheet_range(sheet_name: str, cells: str) -> str:
    """A1 range, quoting sheet names that need it"""
    if re.fullmatch(r"[A-Za-z0-9_]+", sheet_name):
        return f"{sheet_name}!{cells}"
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cells}"


class GoogleSheetsClient:
    """Thin async wrapper over the Sheets v4 values API"""

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_json: str = "",
        credentials_path: str = "",
        read_retries: int = 2,
        service: Any = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.credentials_json = credentials_json
        self.credentials_path = credentials_path
        self.read_retries = read_retries
        self._service = service

    # -------------------------------------------------
    # Start-up
    # -------------------------------------------------
    def initialize(self) -> None:
        """Build the API client from service-account credentials"""
        if self._service is not None:
            return

        if self.credentials_json:
            try:
                info = json.loads(self.credentials_json)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"GOOGLE_CREDENTIALS_JSON is not valid JSON: {e}") from e
            credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            logger.info("🔑 Using Google credentials from environment variable")
        elif self.credentials_path:
            try:
                credentials = service_account.Credentials.from_service_account_file(
                    self.credentials_path, scopes=SCOPES
                )
            except (OSError, ValueError) as e:
                raise ConfigurationError(f"Cannot load service account file {self.credentials_path}: {e}") from e
            logger.info("🔑 Using Google credentials from file path")
        else:
            raise ConfigurationError(
                "Either GOOGLE_CREDENTIALS_JSON or GOOGLE_SERVICE_ACCOUNT_PATH is required"
            )

        self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        logger.info("✅ Google Sheets client initialized")

    def verify_connection(self) -> str:
        """Fetch the spreadsheet title; raises ConfigurationError when unreachable"""
        try:
            meta = self._spreadsheets().get(
                spreadsheetId=self.spreadsheet_id,
                fields="properties.title",
            ).execute(num_retries=self.read_retries)
        except SHEETS_ERRORS as e:
            raise ConfigurationError(f"Spreadsheet {self.spreadsheet_id} is not reachable: {e}") from e

        title = meta.get("properties", {}).get("title", "")
        logger.info(f"📗 Connected to spreadsheet: {title}")
        return title

    # -------------------------------------------------
    # Store operations
    # -------------------------------------------------
    async def read_rows(self, range_: str) -> List[List[str]]:
        request = self._values().get(spreadsheetId=self.spreadsheet_id, range=range_)
        response = await self._execute(request, f"read {range_}", retries=self.read_retries)
        return response.get("values", [])

    async def append_row(self, sheet_name: str, values: List[Any]) -> int:
        """Append one row and return its 1-based index, or 0 when it cannot be told"""
        range_ = sheet_range(sheet_name, READ_COLUMNS)
        request = self._values().append(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [values]},
        )
        # writes are not retried: a lost acknowledgement would duplicate the row
        response = await self._execute(request, f"append {sheet_name}", retries=0)

        updated_range = response.get("updates", {}).get("updatedRange", "")
        match = _UPDATED_ROW.search(updated_range)
        if match:
            row_index = int(match.group(1))
        else:
            row_index = await self._count_rows(range_)
        logger.info(f"📝 Row appended to {sheet_name} at row {row_index}")
        return row_index

    async def update_cell(self, range_: str, value: Any) -> None:
        request = self._values().update(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueInputOption="RAW",
            body={"values": [[value]]},
        )
        await self._execute(request, f"update {range_}", retries=0)
        logger.info(f"📝 Updated cell {range_}")

    async def find_by_user_id(self, sheet_name: str, user_id: int) -> Optional[SheetRow]:
        rows = await self.read_rows(sheet_range(sheet_name, READ_COLUMNS))
        wanted = str(user_id)
        for index, row in enumerate(rows, start=1):
            if len(row) > USER_ID_COLUMN and str(row[USER_ID_COLUMN]).strip() == wanted:
                return SheetRow(row_index=index, values=[str(v) for v in row])
        return None

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    async def _count_rows(self, range_: str) -> int:
        """Row count after a write; 0 when it cannot be read, the row is already stored"""
        try:
            return len(await self.read_rows(range_))
        except StoreError as e:
            logger.warning(f"⚠️ Row index of the append to {range_} is unknown: {e}")
            return 0

    def _spreadsheets(self):
        if self._service is None:
            raise StoreError("Google Sheets client is not initialized", operation="init")
        return self._service.spreadsheets()

    def _values(self):
        return self._spreadsheets().values()

    async def _execute(self, request, operation: str, retries: int) -> dict:
        try:
            return await asyncio.to_thread(request.execute, num_retries=retries)
        except SHEETS_ERRORS as e:
            logger.error(f"❌ Sheets {operation} failed: {e}")
            raise StoreError(f"Sheets {operation} failed: {e}", operation=operation) from e
