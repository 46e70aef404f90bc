from __future__ import annotations

class NotesError(Exception):
    pass

class ConfigError(NotesError):
    pass

class SummarizeNoteError(NotesError):
    # status_code is what the HTTP boundary answers with
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
