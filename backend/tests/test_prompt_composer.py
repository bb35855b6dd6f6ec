"""Prompt layout and attachment decoding."""

from types import SimpleNamespace

import pytest

from adaptive_chat.errors import ValidationError
from adaptive_chat.services.attachments import Attachment, check_allowed, decode_content
from adaptive_chat.services.prompt_composer import compose_prompt, format_history


def _entry(role: str, content: str) -> SimpleNamespace:
    return SimpleNamespace(role=role, content=content)


def test_prompt_without_history():
    payload = compose_prompt("You are helpful.", [], "Hi")

    assert payload.text == "You are helpful.\n\nUser: Hi\nAssistant:"
    assert payload.user_message == "Hi"
    assert not payload.is_image


def test_prompt_sections_are_in_order():
    history = [_entry("user", "What is 2+2?"), _entry("assistant", "4")]
    attachment = Attachment(filename="data.csv", mimetype="text/csv", size=7, text="a,b\n1,2")

    text = compose_prompt("SYSTEM", history, "Sum column b", attachment).text

    system_at = text.index("SYSTEM")
    history_at = text.index("Conversation history:\nUser: What is 2+2?\nAssistant: 4")
    file_at = text.index("**File Information:**\n- File Name: data.csv\n- File Type: text/csv")
    user_at = text.index("User: Sum column b\nAssistant:")
    assert system_at < history_at < file_at < user_at
    assert "**File Content:**\na,b\n1,2" in text


def test_history_keeps_most_recent_entries():
    history = [_entry("user" if i % 2 == 0 else "assistant", f"m{i}") for i in range(14)]

    rendered = format_history(history, limit=10)

    lines = rendered.splitlines()[1:]
    assert len(lines) == 10
    assert lines[0] == "User: m4"
    assert lines[-1] == "Assistant: m13"


def test_empty_history_renders_nothing():
    assert format_history([]) == ""


def test_image_attachment_becomes_image_part():
    attachment = Attachment(filename="a.png", mimetype="image/png", size=3, data=b"abc")

    payload = compose_prompt("SYSTEM", [], "Describe", attachment)

    assert payload.image.media_type == "image/png"
    assert payload.image.data == "YWJj"
    assert "File Information" not in payload.text


def test_check_allowed():
    check_allowed("notes.md", "text/markdown")
    check_allowed("main.rs", "text/plain")
    check_allowed("component.tsx", "application/octet-stream")

    with pytest.raises(ValidationError):
        check_allowed("archive.zip", "application/zip")
    with pytest.raises(ValidationError):
        check_allowed("photo.tiff", "image/tiff")


async def test_decode_text_replaces_invalid_utf8():
    attachment = await decode_content("notes.txt", "text/plain", b"caf\xe9")

    assert attachment.text == "caf�"
    assert attachment.size == 4
    assert attachment.meta().model_dump() == {
        "filename": "notes.txt",
        "mimetype": "text/plain",
        "size": 4,
    }


async def test_decode_unreadable_pdf_is_a_validation_error():
    with pytest.raises(ValidationError, match="Error processing file"):
        await decode_content("broken.pdf", "application/pdf", b"not really a pdf")
