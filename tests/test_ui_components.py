# tests/test_ui_components.py
"""Tests for the directive renderer (handlers/ui_components.py)."""

import pytest

from core.step_engine import prompt_for
from handlers.ui_components import DirectiveRenderer, UIComponents
from models.directives import (
    AlreadyRegistered,
    ErrorNotice,
    NotStarted,
    RegistrationComplete,
    SessionCancelled,
    ShowReview,
)
from models.enums import FieldKey, Language, RegistrationStep


@pytest.fixture
def renderer(messages):
    return DirectiveRenderer(messages, location_url="https://maps.example.com/office")


def _callbacks(markup):
    return [[button.callback_data for button in row] for row in markup.inline_keyboard]


def test_progress_bar():
    assert UIComponents.create_progress_bar(0, 8) == "░" * 10 + " 0%"
    assert UIComponents.create_progress_bar(8, 8) == "█" * 10 + " 100%"
    assert UIComponents.create_progress_bar(1, 0) == ""


def test_language_choice_is_bilingual(renderer):
    [message] = renderer.render(prompt_for(RegistrationStep.LANGUAGE_SELECTION, Language.EN))
    assert "Please select your language" in message.text
    assert "Παρακαλώ επιλέξτε γλώσσα" in message.text
    assert _callbacks(message.reply_markup) == [["lang:en", "lang:gr"]]


def test_text_prompt_with_reason_and_progress(renderer):
    directive = prompt_for(RegistrationStep.PHONE, Language.EN, reason_key="INVALID_PHONE")
    [message] = renderer.render(directive)

    lines = message.text.splitlines()
    assert lines[0].startswith("❌")
    assert "Please enter your phone number" in message.text
    assert "Step 3/8" in message.text
    assert message.reply_markup is None


def test_transport_buttons_in_one_row(renderer):
    [message] = renderer.render(prompt_for(RegistrationStep.TRANSPORT, Language.GR))
    assert _callbacks(message.reply_markup) == [["ans:TRANSPORT:MMM", "ans:TRANSPORT:VEHICLE", "ans:TRANSPORT:BOTH"]]
    assert message.reply_markup.inline_keyboard[0][1].text == "ΟΧΗΜΑ"


def test_bank_buttons_in_two_by_two_grid(renderer):
    [message] = renderer.render(prompt_for(RegistrationStep.BANK, Language.EN))
    assert _callbacks(message.reply_markup) == [
        ["ans:BANK:EURO_BANK", "ans:BANK:ALPHA_BANK"],
        ["ans:BANK:PIRAEUS_BANK", "ans:BANK:NATION_ALBANK"],
    ]


def test_editing_prompt_has_header_and_no_progress(renderer):
    [message] = renderer.render(prompt_for(RegistrationStep.AGE, Language.EN, editing=True))
    assert message.text.startswith("✏️ Editing: AGE")
    assert "Step" not in message.text


def test_review_lists_fields_with_edit_and_confirm_buttons(renderer):
    summary = ((FieldKey.NAME, "John Smith"), (FieldKey.BANK, "ALPHA_BANK"))
    rendered = renderer.render(ShowReview(summary=summary, language=Language.GR, notice_key="FIELD_UPDATED"))

    assert len(rendered) == 2
    assert rendered[0].text.startswith("✅")
    review = rendered[1]
    assert "ΟΝΟΜΑ: John Smith" in review.text
    assert "ΤΡΑΠΕΖΑ: ΑΛΦΑ_ΤΡΑΠΕΖΑ" in review.text
    assert _callbacks(review.reply_markup) == [["edit:NAME"], ["edit:BANK"], ["confirm"]]


def test_completion_carries_location_button(renderer):
    rendered = renderer.render(RegistrationComplete(name="John Smith", language=Language.EN, row_index=5))
    assert "saved successfully" in rendered[0].text
    assert rendered[1].reply_markup.inline_keyboard[0][0].url == "https://maps.example.com/office"


def test_completion_ends_with_documents_and_thanks(renderer):
    rendered = renderer.render(RegistrationComplete(name="Γιώργος Παπαδόπουλος", language=Language.GR, row_index=5))

    assert len(rendered) == 4
    documents = rendered[2].text
    assert documents.startswith("Έγγραφα για εργασία")
    assert "ποινικού μητρώου" in documents
    assert "Πιστοποιητικό υγείας" in documents
    assert "ΑΦΜ, ΑΜΑ, ΑΜΚΑ" in documents
    assert rendered[3].text.startswith("Ευχαριστούμε")
    assert rendered[2].reply_markup is None and rendered[3].reply_markup is None


def test_completion_without_location(messages):
    rendered = DirectiveRenderer(messages).render(
        RegistrationComplete(name="John Smith", language=Language.EN, row_index=5)
    )
    assert rendered[1].reply_markup is None


@pytest.mark.parametrize(
    "directive, key",
    [
        (ErrorNotice("SAVE_FAILED", Language.EN), "SAVE_FAILED"),
        (AlreadyRegistered(Language.GR), "ALREADY_REGISTERED"),
        (SessionCancelled(Language.EN), "CANCELLED"),
        (NotStarted(), "NOT_STARTED"),
    ],
)
def test_notices(renderer, messages, directive, key):
    [message] = renderer.render(directive)
    assert message.text == messages.get_message(key, directive.language)


def test_unknown_directive_is_a_type_error(renderer):
    with pytest.raises(TypeError):
        renderer.render("not a directive")
