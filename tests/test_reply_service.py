from chat_relay.app.config import NO_TEXT_REPLY
from chat_relay.services.reply_service import (
    extract_reply,
    from_chat_choices,
    from_output_items,
    from_output_text,
)


def test_output_text():
    assert extract_reply({"output_text": "hi"}) == "hi"


def test_output_items():
    data = {
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "content": [
                    {"type": "refusal", "refusal": "no"},
                    {"type": "output_text", "text": "from items"},
                ],
            },
        ]
    }
    assert extract_reply(data) == "from items"


def test_chat_choices_are_trimmed():
    assert extract_reply({"choices": [{"message": {"content": "  hi  "}}]}) == "hi"


def test_priority_order():
    data = {
        "output_text": "first",
        "output": [{"content": [{"type": "output_text", "text": "second"}]}],
        "choices": [{"message": {"content": "third"}}],
    }
    assert extract_reply(data) == "first"

    data["output_text"] = ""
    assert extract_reply(data) == "second"

    data["output"] = []
    assert extract_reply(data) == "third"


def test_placeholder_when_nothing_extractable():
    assert extract_reply({"id": "resp_1", "output": []}) == NO_TEXT_REPLY
    assert extract_reply({"choices": []}) == NO_TEXT_REPLY
    assert extract_reply("plain text body") == NO_TEXT_REPLY
    assert extract_reply(None) == NO_TEXT_REPLY


def test_extractors_in_isolation():
    assert from_output_text({"output_text": "   "}) is None
    assert from_output_items({"output": "nope"}) is None
    assert from_output_items({"output": [None, {"content": None}]}) is None
    assert from_chat_choices({"choices": [{"message": {"content": None}}]}) is None
    assert from_chat_choices({"choices": ["x"]}) is None


def test_custom_extractors():
    assert extract_reply({}, extractors=(lambda data: "custom",)) == "custom"
