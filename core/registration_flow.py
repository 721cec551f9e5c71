"""
Registration flow: one inbound event at a time per user

Binds the session store, step engine, review controller and submission
pipeline. Every public coroutine takes the user's lock, reads the session,
asks the engine or the review controller for a Transition and applies it
through SessionStore.update. It returns the directive to render, or None
when the event came from a button that no longer matches the session.
"""
import logging
from typing import Optional

from core.exceptions import StoreError
from core.review import ReviewController
from core.step_engine import StepEngine, Transition
from models.directives import (
    AlreadyRegistered,
    Directive,
    ErrorNotice,
    NotStarted,
    RegistrationComplete,
    SessionCancelled,
)
from models.enums import Language, RegistrationStep
from models.session import UserSession
from services.admin_notifier import AdminNotifier
from services.session_store import SessionStore
from services.submission import SubmissionPipeline
from utils.logger import log_session_event, log_step_event

logger = logging.getLogger(__name__)


class RegistrationFlow:
    """Application service behind the Telegram handlers"""

    def __init__(
        self,
        store: SessionStore,
        engine: StepEngine,
        review: ReviewController,
        pipeline: SubmissionPipeline,
        notifier: Optional[AdminNotifier] = None,
    ):
        self.store = store
        self.engine = engine
        self.review = review
        self.pipeline = pipeline
        self.notifier = notifier

    def attach_notifier(self, notifier: AdminNotifier) -> None:
        self.notifier = notifier

    # -------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------
    async def start(self, user_id: int, chat_id: int) -> Directive:
        """Begin a registration, unless the user is already on the sheet"""
        async with self.store.user_lock(user_id):
            return await self._start(user_id, chat_id)

    async def restart(self, user_id: int, chat_id: int) -> Directive:
        async with self.store.user_lock(user_id):
            if self.store.destroy(user_id):
                log_session_event(user_id, "restarted")
            return await self._start(user_id, chat_id)

    async def cancel(self, user_id: int) -> Directive:
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            self.store.destroy(user_id)
            self.store.stats.cancelled += 1
            log_session_event(user_id, "cancelled", f"at {session.current_step.name}")
            return SessionCancelled(session.language)

    def get_session(self, user_id: int) -> Optional[UserSession]:
        return self.store.get(user_id)

    # -------------------------------------------------
    # Input
    # -------------------------------------------------
    async def handle_input(self, user_id: int, raw_input: str) -> Directive:
        """Free text typed by the user"""
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            return self._apply(session, self._dispatch(session, raw_input))

    async def select_language(self, user_id: int, code: str) -> Optional[Directive]:
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            if session.current_step is not RegistrationStep.LANGUAGE_SELECTION:
                return None
            return self._apply(session, self.engine.select_language(session, code))

    async def answer_choice(self, user_id: int, field_key: str, value: str) -> Optional[Directive]:
        """A choice button; only valid for the field currently asked for"""
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            expected = session.editing_field if session.reviewing else session.current_step.field
            if expected is None or field_key != expected.value:
                return None
            return self._apply(session, self._dispatch(session, value))

    async def begin_edit(self, user_id: int, field_key: str) -> Optional[Directive]:
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            if not session.reviewing:
                return None
            return self._apply(session, self.review.begin_edit(session, field_key))

    async def confirm(self, user_id: int) -> Optional[Directive]:
        async with self.store.user_lock(user_id):
            session = self.store.get(user_id)
            if session is None:
                return NotStarted()
            if not session.reviewing:
                return None

            transition = await self.review.confirm(session)
            directive = transition.directive

            if not isinstance(directive, RegistrationComplete):
                if isinstance(directive, ErrorNotice) and directive.message_key == "SAVE_FAILED":
                    self.store.stats.submission_failures += 1
                return self._apply(session, transition)

            self.store.destroy(user_id)
            self.store.stats.completed += 1
            log_session_event(user_id, "registration completed", f"row {directive.row_index}")

        if self.notifier is not None:
            await self.notifier.notify_new_candidate(user_id, directive)
        return directive

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    async def _start(self, user_id: int, chat_id: int) -> Directive:
        existing = self.store.get(user_id)
        language = existing.language if existing else Language.EN

        try:
            registered = await self.pipeline.is_registered(user_id)
        except StoreError as e:
            logger.error(f"❌ User {user_id}: registration lookup failed - {e}")
            return ErrorNotice("STORE_UNAVAILABLE", language)

        if registered:
            self.store.destroy(user_id)
            log_session_event(user_id, "already registered")
            return AlreadyRegistered(language)

        session = self.store.create(user_id, chat_id)
        log_session_event(user_id, "registration started")
        return self._apply(session, self.engine.begin(session))

    def _dispatch(self, session: UserSession, raw_input: str) -> Transition:
        if session.reviewing:
            if session.editing_field is not None:
                return self.review.commit_edit(session, raw_input)
            return self.review.show(session)
        return self.engine.handle_input(session, raw_input)

    def _apply(self, session: UserSession, transition: Transition) -> Directive:
        self.store.update(session.user_id, transition.apply)
        for key, value in transition.data.items():
            log_step_event(session.user_id, key.value, value)
        return transition.directive

