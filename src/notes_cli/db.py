from __future__ import annotations
import sqlite3
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Union
from datetime import datetime, timezone

def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

# sentinel: "leave the summary column alone"
_UNSET = object()

SCHEMA = """
PRAGMA journal_mode = WAL;
CREATE TABLE IF NOT EXISTS notes (
  id TEXT PRIMARY KEY,
  user_id TEXT NOT NULL,
  title TEXT NOT NULL,
  content TEXT NOT NULL,
  summary TEXT,
  created_at TEXT,
  updated_at TEXT
);
CREATE INDEX IF NOT EXISTS notes_user_updated ON notes(user_id, updated_at);
"""

class DB:
    def __init__(self, path: Union[Path, str]):
        self.path = path
        # one connection shared by the API threadpool; every method holds the lock
        self.conn = sqlite3.connect(path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self):
        with self._lock:
            self.conn.close()

    def create_note(
        self,
        user_id: str,
        title: str,
        content: str,
        summary: Optional[str] = None,
    ) -> sqlite3.Row:
        note_id = uuid.uuid4().hex
        now = _now_iso()
        with self._lock:
            cur = self.conn.cursor()
            cur.execute(
                """INSERT INTO notes(id, user_id, title, content, summary, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (note_id, user_id, title, content, summary or None, now, now),
            )
            self.conn.commit()
            return self.get_note(note_id)

    def get_note(self, note_id: str, user_id: Optional[str] = None) -> Optional[sqlite3.Row]:
        """Fetch a note; a note owned by someone other than `user_id` reads as missing."""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute("SELECT * FROM notes WHERE id = ?", (note_id,))
            row = cur.fetchone()
        if row is None or (user_id is not None and row["user_id"] != user_id):
            return None
        return row

    def list_notes(
        self,
        user_id: Optional[str] = None,
        limit: int = 100,
        search: Optional[str] = None,
    ) -> List[sqlite3.Row]:
        clauses, params = [], []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if search:
            clauses.append("(title LIKE ? OR content LIKE ?)")
            params.extend([f"%{search}%", f"%{search}%"])
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._lock:
            cur = self.conn.cursor()
            cur.execute(
                f"SELECT * FROM notes {where} ORDER BY updated_at DESC, rowid DESC LIMIT ?",
                (*params, limit),
            )
            return cur.fetchall()

    def update_note(
        self,
        note_id: str,
        user_id: Optional[str] = None,
        title: Optional[str] = None,
        content: Optional[str] = None,
        summary=_UNSET,
    ) -> Optional[sqlite3.Row]:
        sets, params = ["updated_at = ?"], [_now_iso()]
        if title is not None:
            sets.append("title = ?")
            params.append(title)
        if content is not None:
            sets.append("content = ?")
            params.append(content)
        if summary is not _UNSET:
            sets.append("summary = ?")
            params.append(summary or None)
        with self._lock:
            if self.get_note(note_id, user_id) is None:
                return None
            cur = self.conn.cursor()
            cur.execute(f"UPDATE notes SET {', '.join(sets)} WHERE id = ?", (*params, note_id))
            self.conn.commit()
            return self.get_note(note_id)

    def set_summary(self, note_id: str, summary: str) -> Optional[sqlite3.Row]:
        return self.update_note(note_id, summary=summary)

    def delete_note(self, note_id: str, user_id: Optional[str] = None) -> bool:
        with self._lock:
            if self.get_note(note_id, user_id) is None:
                return False
            cur = self.conn.cursor()
            cur.execute("DELETE FROM notes WHERE id = ?", (note_id,))
            self.conn.commit()
            return True

    def stats(self) -> Dict[str, int]:
        with self._lock:
            cur = self.conn.cursor()
            cur.execute("SELECT COUNT(*) AS c FROM notes")
            notes = cur.fetchone()["c"]
            cur.execute("SELECT COUNT(*) AS c FROM notes WHERE summary IS NOT NULL")
            summarized = cur.fetchone()["c"]
            cur.execute("SELECT COUNT(DISTINCT user_id) AS c FROM notes")
            users = cur.fetchone()["c"]
        return {"notes": notes, "summarized": summarized, "users": users}
