"""
Review / edit sub-flow

Entered once every field is filled. The user can re-open any field as
many times as needed, then confirm to hand the record to the
submission pipeline.
"""
import logging
from typing import List, Tuple

from core.exceptions import StoreError
from core.step_engine import Transition, prompt_for, review_directive
from core.validators import validate_field
from models.directives import ErrorNotice, RegistrationComplete
from models.enums import FieldKey, RegistrationStep
from models.session import UserSession
from services.submission import SubmissionPipeline

logger = logging.getLogger(__name__)


class ReviewController:
    """Review screen, field edits and final confirmation"""

    def __init__(self, pipeline: SubmissionPipeline):
        self.pipeline = pipeline

    # -------------------------------------------------
    # Summary
    # -------------------------------------------------
    def render_summary(self, session: UserSession) -> List[Tuple[FieldKey, str]]:
        return list(session.data.summary())

    def show(self, session: UserSession) -> Transition:
        return Transition(directive=review_directive(session))

    # -------------------------------------------------
    # Editing
    # -------------------------------------------------
    def begin_edit(self, session: UserSession, field_key: str) -> Transition:
        if not session.reviewing:
            logger.error(f"💥 User {session.user_id}: edit requested outside review")
            return Transition(directive=ErrorNotice("INVALID_ACTION", session.language))

        try:
            key = FieldKey(field_key)
        except ValueError:
            logger.error(f"💥 User {session.user_id}: edit requested for unknown field {field_key!r}")
            return Transition(directive=ErrorNotice("INVALID_ACTION", session.language))

        logger.info(f"✏️ User {session.user_id}: editing {key.value}")
        return Transition(
            directive=prompt_for(RegistrationStep.for_field(key), session.language, editing=True),
            changes={"editing_field": key},
        )

    def commit_edit(self, session: UserSession, raw_input: str) -> Transition:
        key = session.editing_field
        if key is None or not session.reviewing:
            logger.error(f"💥 User {session.user_id}: no field is being edited")
            return Transition(directive=ErrorNotice("INVALID_ACTION", session.language))

        step = RegistrationStep.for_field(key)
        result = validate_field(key, raw_input, session.language)
        if not result.ok:
            return Transition(
                directive=prompt_for(step, session.language, reason_key=result.reason_key, editing=True)
            )

        data = {key: result.value}
        logger.info(f"✅ User {session.user_id}: {key.value} updated")
        return Transition(
            directive=review_directive(session, data, notice_key="FIELD_UPDATED"),
            changes={"editing_field": None},
            data=data,
        )

    # -------------------------------------------------
    # Confirmation
    # -------------------------------------------------
    async def confirm(self, session: UserSession) -> Transition:
        if session.editing_field is not None:
            # finish the open edit first; nothing is written
            step = RegistrationStep.for_field(session.editing_field)
            return Transition(
                directive=prompt_for(step, session.language, reason_key="FINISH_EDIT_FIRST", editing=True)
            )

        if not session.reviewing or not session.data.is_complete():
            logger.error(f"💥 User {session.user_id}: confirm outside a complete review")
            return Transition(directive=ErrorNotice("INVALID_ACTION", session.language))

        try:
            result = await self.pipeline.submit(session)
        except StoreError as e:
            logger.error(f"💥 User {session.user_id}: submission failed - {e}")
            return Transition(directive=ErrorNotice("SAVE_FAILED", session.language))

        return Transition(
            directive=RegistrationComplete(
                name=session.data.name,
                language=session.language,
                row_index=result.row_index,
                membership_synced=result.membership_synced,
            ),
            changes={"current_step": RegistrationStep.COMPLETE, "reviewing": False},
        )
