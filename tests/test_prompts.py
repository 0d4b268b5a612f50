"""Tests for persona rendering and message assembly."""

from config import BusinessProfile
from extraction import BOOKING_END, BOOKING_FIELDS, BOOKING_START
from prompts import assemble_messages, build_system_prompt, load_system_prompt


def test_assemble_messages_exact_sequence():
    history = [
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
    ]
    messages = assemble_messages("PERSONA", history, "book a deck wash")
    assert messages == [
        {"role": "system", "content": "PERSONA"},
        {"role": "user", "content": "hi"},
        {"role": "assistant", "content": "Hello! How can I help?"},
        {"role": "user", "content": "book a deck wash"},
    ]


def test_assemble_messages_does_not_touch_history():
    history = [{"role": "user", "content": "hi"}]
    assemble_messages("PERSONA", history, "next")
    assert history == [{"role": "user", "content": "hi"}]


def test_assemble_messages_empty_history():
    assert assemble_messages("P", [], "hello") == [
        {"role": "system", "content": "P"},
        {"role": "user", "content": "hello"},
    ]


def test_system_prompt_describes_protocol(profile):
    prompt = build_system_prompt(profile)
    assert BOOKING_START in prompt
    assert BOOKING_END in prompt
    for field in BOOKING_FIELDS:
        assert f'"{field}"' in prompt
    assert "Jupiter Power Wash" in prompt
    assert "561.532.7120" in prompt
    assert "residential-driveway" in prompt


def test_alternate_persona():
    profile = BusinessProfile(name="Tequesta Soft Wash", phone="555-0100", services={"roof": "Roof Cleaning"})
    prompt = build_system_prompt(profile)
    assert "Tequesta Soft Wash" in prompt
    assert "roof: Roof Cleaning" in prompt
    assert "Jupiter Power Wash" not in prompt


def test_persona_file_overrides_profile(profile, tmp_path):
    persona = tmp_path / "persona.txt"
    persona.write_text("You are Captain Clean.\n", encoding="utf-8")
    assert load_system_prompt(profile, str(persona)) == "You are Captain Clean."
    assert load_system_prompt(profile, None) == build_system_prompt(profile)
