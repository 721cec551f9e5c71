#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Step engine of the registration dialog

Pure state machine: given a session and the raw input of the user it
returns a Transition (what to change in the session and what to show
next). Nothing here touches Telegram or the spreadsheet.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from core.exceptions import InvalidStateError
from core.validators import validate_field
from models.directives import Directive, ErrorNotice, PromptChoices, PromptField, ShowReview
from models.enums import CHOICE_FIELDS, FieldKey, Language, RegistrationStep
from models.session import UserSession

logger = logging.getLogger(__name__)

LANGUAGE_CHOICES = tuple(language.value for language in Language)


@dataclass
class Transition:
    """
    Outcome of handling one user event

    Args:
        directive: What the adapter should render
        changes: Session attributes to overwrite
        data: Validated field values to write into session.data
    """
    directive: Directive
    changes: Dict[str, Any] = field(default_factory=dict)
    data: Dict[FieldKey, Any] = field(default_factory=dict)

    @property
    def mutates(self) -> bool:
        return bool(self.changes or self.data)

    def apply(self, session: UserSession) -> None:
        unknown = [name for name in self.changes if not hasattr(session, name)]
        if unknown:
            raise InvalidStateError(f"UserSession has no attributes {unknown}")
        for key, value in self.data.items():
            session.data.set(key, value)
        for name, value in self.changes.items():
            setattr(session, name, value)


def prompt_for(
    step: RegistrationStep,
    language: Language,
    reason_key: Optional[str] = None,
    editing: bool = False,
) -> Directive:
    """Directive asking for the input of ``step``"""
    if step is RegistrationStep.LANGUAGE_SELECTION:
        return PromptChoices(step=step, choices=LANGUAGE_CHOICES, language=language)

    field_key = step.field
    if field_key is None:
        raise ValueError(f"Step {step.name} does not collect input")

    if field_key in CHOICE_FIELDS:
        choices = tuple(option.value for option in CHOICE_FIELDS[field_key])
        return PromptChoices(
            step=step,
            choices=choices,
            language=language,
            field=field_key,
            reason_key=reason_key,
            editing=editing,
        )

    return PromptField(
        step=step,
        field=field_key,
        language=language,
        reason_key=reason_key,
        editing=editing,
    )


def review_directive(session: UserSession, data_changes: Optional[Dict[FieldKey, Any]] = None,
                     notice_key: Optional[str] = None) -> ShowReview:
    """Review screen for the session, with pending changes already applied"""
    data = replace(session.data)
    for key, value in (data_changes or {}).items():
        data.set(key, value)
    return ShowReview(summary=data.summary(), language=session.language, notice_key=notice_key)


class StepEngine:
    """Transition function over RegistrationStep"""

    def begin(self, session: UserSession) -> Transition:
        """First prompt of a fresh session"""
        return Transition(directive=prompt_for(RegistrationStep.LANGUAGE_SELECTION, session.language))

    def current_prompt(self, session: UserSession) -> Directive:
        """Repeat whatever the session is waiting for"""
        if session.current_step >= RegistrationStep.REVIEW:
            if session.editing_field is not None:
                step = RegistrationStep.for_field(session.editing_field)
                return prompt_for(step, session.language, editing=True)
            return review_directive(session)
        return prompt_for(session.current_step, session.language)

    def handle_input(self, session: UserSession, raw_input: str) -> Transition:
        """Validate input for the current step and move forward"""
        step = session.current_step

        if step is RegistrationStep.LANGUAGE_SELECTION:
            return self.select_language(session, raw_input)

        if not step.is_data_step:
            # REVIEW and COMPLETE are driven by the review controller
            logger.warning(f"⚠️ User {session.user_id}: input at step {step.name} ignored by step engine")
            return Transition(directive=self.current_prompt(session))

        field_key = step.field
        result = validate_field(field_key, raw_input, session.language)
        if not result.ok:
            logger.info(f"↩️ User {session.user_id}: {field_key.value} rejected ({result.reason_key})")
            return Transition(directive=prompt_for(step, session.language, reason_key=result.reason_key))

        data = {field_key: result.value}
        next_step = step.next()

        if next_step is RegistrationStep.REVIEW:
            missing = [key for key in session.data.missing_fields() if key not in data]
            if missing:
                # review needs every field; reaching here means the session is inconsistent
                logger.error(f"💥 User {session.user_id}: review requested with missing fields {missing}")
                return Transition(directive=ErrorNotice("INVALID_ACTION", session.language))
            logger.info(f"📋 User {session.user_id}: all fields collected, entering review")
            return Transition(
                directive=review_directive(session, data),
                changes={"current_step": RegistrationStep.REVIEW, "reviewing": True},
                data=data,
            )

        return Transition(
            directive=prompt_for(next_step, session.language),
            changes={"current_step": next_step},
            data=data,
        )

    def select_language(self, session: UserSession, raw_input: str) -> Transition:
        """Language buttons are the only accepted input of the first step"""
        try:
            language = Language((raw_input or "").strip().lower())
        except ValueError:
            return Transition(directive=prompt_for(RegistrationStep.LANGUAGE_SELECTION, session.language))

        logger.info(f"🌐 User {session.user_id}: language {language.value}")
        return Transition(
            directive=prompt_for(RegistrationStep.NAME, language),
            changes={"language": language, "current_step": RegistrationStep.NAME},
        )

