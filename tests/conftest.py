"""Shared test fixtures for the registration bot test suite."""

import asyncio
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from core.exceptions import StoreError
from core.review import ReviewController
from core.registration_flow import RegistrationFlow
from core.step_engine import StepEngine
from models.enums import Bank, Language, LicenseFlag, RegistrationStep, TransportMode
from models.session import RegistrationData, UserSession
from services.localization import Messages
from services.session_store import SessionStore
from services.sheets_client import USER_ID_COLUMN, SheetRow
from services.submission import SubmissionPipeline

REGISTRATION_HEADER = [
    "LANGUAGE", "USER_ID", "DATE", "NAME", "AGE", "PHONE", "EMAIL", "ADDRESS",
    "TRANSPORT", "BANK", "DR_LICENCE", "CRIMINAL_RECORD", "HEALTH_CERT", "AMKA",
    "AMA", "AFM", "STATUS", "COURSE_DATE",
]
MEMBERSHIP_HEADER = ["NAME", "USER_ID", "STATUS", "LANGUAGE"]

_CELL = re.compile(r"^([A-Z]+)(\d+)$")


class FakeClock:
    """Deterministic clock that only moves when told to"""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 9, 30, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeSheetStore:
    """In-memory spreadsheet implementing the TabularStore operations"""

    def __init__(self):
        self.sheets: Dict[str, List[List[str]]] = {
            "Registration": [list(REGISTRATION_HEADER)],
            "WORKERS": [list(MEMBERSHIP_HEADER)],
        }
        self.calls: List[Tuple[str, Any]] = []
        self.fail_on: Set[Tuple[str, str]] = set()

    def _split(self, range_: str) -> Tuple[str, str]:
        sheet, _, cells = range_.partition("!")
        if sheet.startswith("'") and sheet.endswith("'"):
            sheet = sheet[1:-1].replace("''", "'")
        return sheet, cells

    def _maybe_fail(self, operation: str, sheet: str) -> None:
        if (operation, sheet) in self.fail_on:
            raise StoreError(f"{operation} on {sheet} failed", operation=operation)

    async def append_row(self, sheet_name: str, values: List[Any]) -> int:
        self.calls.append(("append_row", sheet_name))
        self._maybe_fail("append_row", sheet_name)
        rows = self.sheets.setdefault(sheet_name, [])
        rows.append([str(v) for v in values])
        return len(rows)

    async def read_rows(self, range_: str) -> List[List[str]]:
        sheet, _ = self._split(range_)
        self.calls.append(("read_rows", sheet))
        self._maybe_fail("read_rows", sheet)
        return [list(row) for row in self.sheets.get(sheet, [])]

    async def update_cell(self, range_: str, value: Any) -> None:
        sheet, cell = self._split(range_)
        self.calls.append(("update_cell", range_))
        self._maybe_fail("update_cell", sheet)
        match = _CELL.match(cell)
        column = ord(match.group(1)) - ord("A")
        row = self.sheets[sheet][int(match.group(2)) - 1]
        while len(row) <= column:
            row.append("")
        row[column] = str(value)

    async def find_by_user_id(self, sheet_name: str, user_id: int) -> Optional[SheetRow]:
        self.calls.append(("find_by_user_id", sheet_name))
        self._maybe_fail("find_by_user_id", sheet_name)
        for index, row in enumerate(self.sheets.get(sheet_name, []), start=1):
            if len(row) > USER_ID_COLUMN and row[USER_ID_COLUMN] == str(user_id):
                return SheetRow(row_index=index, values=list(row))
        return None

    def count(self, operation: str, target: str) -> int:
        return sum(1 for op, arg in self.calls if op == operation and arg == target)


def complete_data() -> RegistrationData:
    return RegistrationData(
        name="John Smith",
        age=30,
        phone="+306912345678",
        email="john@example.com",
        address="Ermou 10, Athens",
        transport=TransportMode.VEHICLE,
        bank=Bank.ALPHA_BANK,
        license=LicenseFlag.YES,
    )


def _reviewing_session(user_id: int = 42, language: Language = Language.EN) -> UserSession:
    return UserSession(
        user_id=user_id,
        chat_id=user_id,
        language=language,
        current_step=RegistrationStep.REVIEW,
        data=complete_data(),
        reviewing=True,
    )


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def make_reviewing_session():
    """Factory for a session sitting on the review screen with every field set"""
    return _reviewing_session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sheet_store() -> FakeSheetStore:
    return FakeSheetStore()


@pytest.fixture
def pipeline(sheet_store, clock) -> SubmissionPipeline:
    return SubmissionPipeline(sheet_store, clock=clock)


@pytest.fixture
def session_store(clock) -> SessionStore:
    return SessionStore(idle_timeout=timedelta(minutes=60), clock=clock)


@pytest.fixture
def flow(session_store, pipeline) -> RegistrationFlow:
    return RegistrationFlow(session_store, StepEngine(), ReviewController(pipeline), pipeline)


@pytest.fixture(scope="session")
def messages() -> Messages:
    return Messages()
