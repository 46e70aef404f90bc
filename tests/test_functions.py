import json

import pytest

from notes_cli.errors import SummarizeNoteError
from notes_cli.functions import handle_request, summarize_note
from notes_cli.summarizer import summarize

from conftest import LONG_NOTE


def test_summarize_note_stores_summary(db):
    note = db.create_note("u1", "Geo", LONG_NOTE)
    result = summarize_note(db, note["id"])
    assert result == {
        "success": True,
        "noteId": note["id"],
        "summary": summarize(LONG_NOTE, 2),
        "message": "Note summarized successfully",
    }
    stored = db.get_note(note["id"])
    assert stored["summary"] == result["summary"]
    assert stored["updated_at"] >= note["updated_at"]


@pytest.mark.parametrize(
    "note_id, status, message",
    [(None, 400, "noteId is required"), ("", 400, "noteId is required"), ("nope", 404, "Note not found")],
)
def test_summarize_note_rejects_bad_ids(db, note_id, status, message):
    with pytest.raises(SummarizeNoteError) as info:
        summarize_note(db, note_id)
    assert info.value.status_code == status
    assert info.value.message == message


def test_summarize_note_rejects_blank_content(db):
    note = db.create_note("u1", "Empty", "   \n ")
    with pytest.raises(SummarizeNoteError) as info:
        summarize_note(db, note["id"])
    assert info.value.status_code == 400
    assert db.get_note(note["id"])["summary"] is None


def test_summarize_note_fails_when_nothing_to_extract(db):
    note = db.create_note("u1", "Dots", "... !!! ???")
    with pytest.raises(SummarizeNoteError) as info:
        summarize_note(db, note["id"])
    assert info.value.status_code == 500
    assert info.value.message == "Failed to generate summary"


def test_handle_request_success_with_json_string(db):
    note = db.create_note("u1", "Geo", LONG_NOTE)
    payload, status = handle_request(db, "POST", json.dumps({"noteId": note["id"]}))
    assert status == 200
    assert payload["success"] is True
    assert payload["noteId"] == note["id"]


def test_handle_request_accepts_bytes_and_mappings(db):
    note = db.create_note("u1", "Short", "Just one line")
    payload, status = handle_request(db, "post", json.dumps({"noteId": note["id"]}).encode())
    assert (status, payload["summary"]) == (200, "Just one line.")
    payload, status = handle_request(db, "POST", {"noteId": note["id"]}, max_sentences=1)
    assert status == 200


@pytest.mark.parametrize(
    "method, body, status",
    [
        ("GET", None, 405),
        ("POST", None, 400),
        ("POST", "", 400),
        ("POST", "{broken", 400),
        ("POST", "[1]", 400),
        ("POST", '{"noteId": "missing"}', 404),
    ],
)
def test_handle_request_errors(db, method, body, status):
    payload, code = handle_request(db, method, body)
    assert code == status
    assert set(payload) == {"error"}


def test_handle_request_maps_unexpected_faults_to_500():
    class BrokenDB:
        def get_note(self, note_id):
            raise RuntimeError("disk on fire")

    payload, status = handle_request(BrokenDB(), "POST", {"noteId": "x"})
    assert status == 500
    assert payload == {"error": "disk on fire"}
