#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Submission pipeline

Turns a confirmed session into one row of the Registration sheet and a
membership entry on the WORKERS sheet.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from core.exceptions import StoreError
from models.enums import FieldKey
from models.session import UserSession
from services.sheets_client import TabularStore, sheet_range

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y %H:%M:%S"
REGISTRATION_STATUS = "WAITING"
MEMBERSHIP_STATUS_COLUMN = "C"

# Document columns the office fills in later: DR_LICENCE .. AFM
DOCUMENT_COLUMNS = 6


@dataclass
class SubmissionResult:
    row_index: int
    membership_synced: bool = True
    membership_error: Optional[str] = None


class SubmissionPipeline:
    """Writes confirmed registrations to the spreadsheet"""

    def __init__(
        self,
        store: TabularStore,
        registration_sheet: str = "Registration",
        membership_sheet: str = "WORKERS",
        membership_status: str = "WAITING",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.registration_sheet = registration_sheet
        self.membership_sheet = membership_sheet
        self.membership_status = membership_status
        self.clock = clock

    def build_registration_row(self, session: UserSession) -> List[str]:
        """
        Registration row, columns A..R:

        LANGUAGE, USER_ID, DATE, NAME, AGE, PHONE, EMAIL, ADDRESS, TRANSPORT,
        BANK, DR_LICENCE, CRIMINAL_RECORD, HEALTH_CERT, AMKA, AMA, AFM,
        STATUS, COURSE_DATE
        """
        data = session.data
        row = [
            session.language.value,
            str(session.user_id),
            self.clock().strftime(DATE_FORMAT),
        ]
        row.extend(data.display_value(key) for key in FieldKey if key is not FieldKey.LICENSE)
        row.append(data.display_value(FieldKey.LICENSE))
        # the license answer sits in DR_LICENCE; the other document columns stay empty
        row.extend([""] * (DOCUMENT_COLUMNS - 1))
        row.append(REGISTRATION_STATUS)
        row.append("")
        return row

    async def is_registered(self, user_id: int) -> bool:
        """True if the Registration sheet already has a row for this user"""
        existing = await self.store.find_by_user_id(self.registration_sheet, user_id)
        return existing is not None

    async def submit(self, session: UserSession) -> SubmissionResult:
        """
        Append the registration row, then upsert the membership entry.

        Raises:
            StoreError: if the registration row could not be written.
            A failed membership upsert is reported in the result instead.
        """
        row = self.build_registration_row(session)
        row_index = await self.store.append_row(self.registration_sheet, row)
        logger.info(f"📥 User {session.user_id}: registration saved at row {row_index}")

        try:
            await self.upsert_membership(session)
        except StoreError as e:
            logger.error(f"⚠️ User {session.user_id}: membership sync failed - {e}")
            return SubmissionResult(row_index=row_index, membership_synced=False, membership_error=str(e))

        return SubmissionResult(row_index=row_index)

    async def upsert_membership(self, session: UserSession) -> None:
        existing = await self.store.find_by_user_id(self.membership_sheet, session.user_id)
        if existing is not None:
            cell = sheet_range(self.membership_sheet, f"{MEMBERSHIP_STATUS_COLUMN}{existing.row_index}")
            await self.store.update_cell(cell, self.membership_status)
            logger.info(f"🔁 User {session.user_id}: membership status set to {self.membership_status}")
            return

        await self.store.append_row(
            self.membership_sheet,
            [session.data.name, str(session.user_id), self.membership_status, session.language.value],
        )
        logger.info(f"➕ User {session.user_id}: added to {self.membership_sheet}")
