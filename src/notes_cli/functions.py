"""summarize-note: load a note, summarize its content, store the summary back.

The request protocol is the one the notes front end speaks: a POST with a JSON
body ``{"noteId": ...}`` answered by ``{"success", "noteId", "summary",
"message"}`` or ``{"error": ...}`` with an HTTP status.
"""

from __future__ import annotations
import json
import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from .db import DB
from .errors import SummarizeNoteError
from .logging_utils import get_logger, log_event
from .summarizer import DEFAULT_MAX_SENTENCES, summarize

FUNCTION_ID = "summarize-note"

Body = Union[str, bytes, Mapping[str, Any], None]

def summarize_note(
    db: DB,
    note_id: Optional[str],
    max_sentences: int = DEFAULT_MAX_SENTENCES,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    log = logger or get_logger("functions")
    if not note_id:
        raise SummarizeNoteError(400, "noteId is required")

    log_event(log, "info", "load", f"Loading note: {note_id}", note_id=note_id)
    note = db.get_note(note_id)
    if note is None:
        log_event(log, "error", "load", f"Failed to load note: {note_id}", note_id=note_id)
        raise SummarizeNoteError(404, "Note not found")

    content = note["content"] or ""
    if not content.strip():
        raise SummarizeNoteError(400, "Note has no content to summarize")

    log_event(log, "info", "summarize", "Generating summary...", note_id=note_id)
    summary = summarize(content, max_sentences)
    if not summary.strip():
        raise SummarizeNoteError(500, "Failed to generate summary")

    log_event(log, "info", "store", "Updating note with summary...", note_id=note_id)
    updated = db.set_summary(note_id, summary)
    if updated is None:
        # deleted between the read and the write
        raise SummarizeNoteError(404, "Note not found")

    log_event(log, "info", "store", "Summary generated and saved successfully", note_id=note_id)
    return {
        "success": True,
        "noteId": updated["id"],
        "summary": summary,
        "message": "Note summarized successfully",
    }

def _parse_body(body: Body) -> Mapping[str, Any]:
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise SummarizeNoteError(400, f"Invalid JSON body: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise SummarizeNoteError(400, "Request body must be a JSON object")
    return data

def handle_request(
    db: DB,
    method: str,
    body: Body,
    max_sentences: int = DEFAULT_MAX_SENTENCES,
    logger: Optional[logging.Logger] = None,
) -> Tuple[Dict[str, Any], int]:
    """Run summarize-note for one request; returns (payload, status code)."""
    log = logger or get_logger("functions")
    if method.upper() != "POST":
        return {"error": "Method not allowed. Use POST."}, 405
    try:
        data = _parse_body(body)
        return summarize_note(db, data.get("noteId"), max_sentences, logger=log), 200
    except SummarizeNoteError as ex:
        return {"error": ex.message}, ex.status_code
    except Exception as ex:
        log.exception("Function error: %s", ex)
        return {"error": str(ex) or "Internal server error"}, 500
