"""Tests for layer selection, classification and text extraction."""

import pytest

from core.models import EventLog
from core.types import MessageKind
from tests.conftest import make_message
from vectormanager.message_selector import (
    DEFAULT_LAYER_RANGE,
    INJECTION_MESSAGE_TYPE,
    classify_message,
    classify_messages,
    filter_messages_by_type,
    parse_layer_range,
    select_layer_range,
)
from vectormanager.text_extractor import build_query_text, clean_text, extract_passages, format_preview


@pytest.fixture
def five_messages():
    return [make_message(f"message {i}", name="Bob" if i % 2 else "You", is_user=not i % 2) for i in range(5)]


class TestLayerSelection:
    """Test 1-based inclusive layer ranges."""

    def test_first_three_layers(self, five_messages):
        selection = select_layer_range(five_messages, 1, 3)

        assert [index for index, _ in selection] == [0, 1, 2]
        assert selection[0][1].text == "message 0"

    def test_reversed_bounds_swapped(self, five_messages):
        assert select_layer_range(five_messages, 4, 2) == select_layer_range(five_messages, 2, 4)

    def test_start_below_one_clamped(self, five_messages):
        events = EventLog()
        selection = select_layer_range(five_messages, 0, 2, events)

        assert [index for index, _ in selection] == [0, 1]
        assert events.warnings()

    def test_range_past_end_is_empty(self, five_messages):
        assert select_layer_range(five_messages, 8, 12) == []

    def test_range_truncated_to_transcript(self, five_messages):
        assert len(select_layer_range(five_messages, 3, 100)) == 3

    @pytest.mark.parametrize("value,expected", [
        ("1-10", (1, 10)),
        (" 3 - 7 ", (3, 7)),
        ("5", (5, 5)),
    ])
    def test_parse_layer_range(self, value, expected):
        assert parse_layer_range(value) == expected

    @pytest.mark.parametrize("value", ["", None, "abc", "1-2-3", "1..4"])
    def test_parse_invalid_layer_range(self, value):
        events = EventLog()

        assert parse_layer_range(value, events) == DEFAULT_LAYER_RANGE
        assert len(events.warnings()) == 1


class TestClassification:
    """Test the MessageKind decision order."""

    def test_special_system_first(self):
        message = make_message("Welcome!", is_user=True, is_hidden=True, extra={"type": "welcome"})
        assert classify_message(message) is MessageKind.SPECIAL_SYSTEM

    def test_synthetic_injection_is_special(self):
        message = make_message("ctx", extra={"type": INJECTION_MESSAGE_TYPE})
        assert classify_message(message) is MessageKind.SPECIAL_SYSTEM

    def test_hidden_before_user(self):
        message = make_message("secret", is_user=True, is_hidden=True)
        assert classify_message(message) is MessageKind.HIDDEN

    def test_user_and_ai(self):
        assert classify_message(make_message("hi", is_user=True)) is MessageKind.USER
        assert classify_message(make_message("hello")) is MessageKind.AI

    def test_system_without_fallback_is_unknown(self):
        assert classify_message(make_message("note", is_system=True)) is MessageKind.UNKNOWN

    def test_name_fallback_for_all_system_selection(self):
        messages = [
            make_message("hi", name="You", is_system=True),
            make_message("hello", name="Seraphina", is_system=True),
            make_message("hey", name="Kim", is_system=True),
        ]
        events = EventLog()
        classified = classify_messages(list(enumerate(messages)), user_names=["Kim"], events=events)

        assert [c.kind for c in classified] == [MessageKind.USER, MessageKind.AI, MessageKind.USER]
        assert events.warnings()

    def test_no_fallback_for_mixed_selection(self):
        messages = [
            make_message("hi", name="You", is_system=True),
            make_message("hello", name="Seraphina"),
        ]
        classified = classify_messages(list(enumerate(messages)))

        assert [c.kind for c in classified] == [MessageKind.UNKNOWN, MessageKind.AI]

    def test_filter_by_type_flags(self):
        messages = [
            make_message("u", is_user=True),
            make_message("a"),
            make_message("h", is_hidden=True),
            make_message("s", is_system=True),
        ]
        classified = classify_messages(list(enumerate(messages)))

        kept = filter_messages_by_type(classified, {"user": True, "ai": False, "hidden": True})
        assert [c.message.text for c in kept] == ["u", "h"]

        assert filter_messages_by_type(classified, {"user": False, "ai": False, "hidden": False}) == []


class TestTextExtraction:
    """Test markup stripping and passage provenance."""

    def test_clean_text(self):
        assert clean_text("  <i>Hello</i> <br/>world  ") == "Hello world"
        assert clean_text("<p></p>") == ""

    def test_extract_passages(self):
        messages = [
            make_message("<b>Hi</b> there", name="", is_user=True, timestamp=5),
            make_message("<img src='x'>", name="Bob"),
            make_message("Reply", name=""),
        ]
        passages = extract_passages(classify_messages(list(enumerate(messages))))

        assert [p.text for p in passages] == ["Hi there", "Reply"]
        assert [p.speaker for p in passages] == ["User", "Assistant"]
        assert passages[0].is_user is True
        assert passages[0].timestamp == 5
        assert [p.index for p in passages] == [0, 2]

    def test_build_query_text_skips_special(self):
        messages = [
            make_message("old"),
            make_message("<em>recent</em>"),
            make_message("help text", extra={"type": "help"}),
            make_message("latest"),
        ]

        assert build_query_text(messages, 2) == "recent\nlatest"
        assert build_query_text(messages, 0) == ""

    def test_format_preview(self):
        messages = [make_message("one", name="You", is_user=True), make_message("two", name="Bob")]
        passages = extract_passages(classify_messages(list(enumerate(messages))))

        assert format_preview(passages) == "1. [You] one\n\n2. [Bob] two"
