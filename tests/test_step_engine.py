# tests/test_step_engine.py
"""Tests for the registration step engine (core/step_engine.py)."""

import pytest

from core.exceptions import InvalidStateError
from core.step_engine import StepEngine, Transition, prompt_for
from models.directives import ErrorNotice, PromptChoices, PromptField, ShowReview
from models.enums import Bank, FieldKey, Language, LicenseFlag, RegistrationStep, TransportMode
from models.session import UserSession

ANSWERS = [
    "John Smith",
    "30",
    "+30 691 234 5678",
    "john@example.com",
    "Ermou 10, Athens",
    "VEHICLE",
    "ALPHA_BANK",
    "YES",
]


@pytest.fixture
def engine():
    return StepEngine()


def _session(**kwargs) -> UserSession:
    return UserSession(user_id=1, chat_id=1, **kwargs)


def _feed(engine, session, raw) -> Transition:
    transition = engine.handle_input(session, raw)
    transition.apply(session)
    return transition


def test_step_order_is_total():
    steps = list(RegistrationStep)
    assert steps[0] is RegistrationStep.LANGUAGE_SELECTION
    assert steps[-1] is RegistrationStep.COMPLETE
    assert RegistrationStep.LICENSE.next() is RegistrationStep.REVIEW
    assert RegistrationStep.COMPLETE.next() is RegistrationStep.COMPLETE
    assert [step.field for step in RegistrationStep.data_steps()] == list(FieldKey)


def test_begin_asks_for_language(engine):
    directive = engine.begin(_session()).directive
    assert isinstance(directive, PromptChoices)
    assert directive.step is RegistrationStep.LANGUAGE_SELECTION
    assert directive.choices == ("en", "gr")


def test_language_selection_accepts_only_enumerated_languages(engine):
    session = _session()
    transition = engine.handle_input(session, "Klingon")
    assert not transition.mutates
    assert isinstance(transition.directive, PromptChoices)

    transition = _feed(engine, session, "gr")
    assert session.language is Language.GR
    assert session.current_step is RegistrationStep.NAME
    assert isinstance(transition.directive, PromptField)
    assert transition.directive.language is Language.GR


def test_valid_input_advances_one_step(engine):
    session = _session(current_step=RegistrationStep.NAME)
    transition = _feed(engine, session, "John Smith")

    assert session.data.name == "John Smith"
    assert session.current_step is RegistrationStep.AGE
    assert transition.directive.field is FieldKey.AGE


def test_invalid_input_keeps_step_and_reports_reason(engine):
    session = _session(current_step=RegistrationStep.PHONE)
    transition = engine.handle_input(session, "abc")

    assert not transition.mutates
    assert transition.directive.step is RegistrationStep.PHONE
    assert transition.directive.reason_key == "INVALID_PHONE"
    assert session.data.phone is None


def test_age_17_is_stored_as_int(engine):
    session = _session(current_step=RegistrationStep.AGE)
    _feed(engine, session, "17")
    assert session.data.age == 17
    assert session.current_step is RegistrationStep.PHONE


def test_choice_steps_offer_their_enum_values(engine):
    assert prompt_for(RegistrationStep.TRANSPORT, Language.EN).choices == tuple(m.value for m in TransportMode)
    assert prompt_for(RegistrationStep.BANK, Language.EN).choices == tuple(m.value for m in Bank)
    assert prompt_for(RegistrationStep.LICENSE, Language.EN).choices == ("YES", "NO")


def test_prompt_for_non_data_step_is_an_error():
    with pytest.raises(ValueError):
        prompt_for(RegistrationStep.REVIEW, Language.EN)


def test_full_walk_reaches_review_with_every_field(engine):
    session = _session()
    _feed(engine, session, "en")

    steps_seen = []
    for answer in ANSWERS:
        steps_seen.append(session.current_step)
        transition = _feed(engine, session, answer)

    assert steps_seen == RegistrationStep.data_steps()
    assert session.current_step is RegistrationStep.REVIEW
    assert session.reviewing is True
    assert session.data.is_complete()
    assert isinstance(transition.directive, ShowReview)
    assert len(transition.directive.summary) == 8
    assert session.data.license is LicenseFlag.YES


def test_steps_never_regress(engine):
    session = _session()
    _feed(engine, session, "en")
    previous = session.current_step
    for answer in ["John Smith", "not a number", "30", "bad phone", "+306912345678"]:
        _feed(engine, session, answer)
        assert session.current_step >= previous
        previous = session.current_step


def test_review_is_not_entered_with_a_missing_field(engine):
    session = _session(current_step=RegistrationStep.LICENSE)
    session.data.name = "John Smith"
    session.data.age = 30
    # phone is missing
    session.data.email = "john@example.com"
    session.data.address = "Ermou 10"
    session.data.transport = TransportMode.MMM
    session.data.bank = Bank.EURO_BANK

    transition = engine.handle_input(session, "NO")

    assert not transition.mutates
    assert isinstance(transition.directive, ErrorNotice)
    assert transition.directive.message_key == "INVALID_ACTION"


def test_input_at_review_is_left_to_the_review_controller(engine):
    session = _session(current_step=RegistrationStep.REVIEW, reviewing=True)
    transition = engine.handle_input(session, "hello")
    assert not transition.mutates
    assert isinstance(transition.directive, ShowReview)


def test_transition_rejects_unknown_session_attribute():
    session = _session()
    transition = Transition(directive=ShowReview(summary=(), language=Language.EN), changes={"colour": "blue"})
    with pytest.raises(InvalidStateError):
        transition.apply(session)
