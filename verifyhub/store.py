"""
In-memory session store.

Maps session id -> session record (a plain dict with the wire field names:
status, decision, dob, age, updatedAt, vendorData, refCode).

There is no persistence: data lives exactly as long as the SessionStore
object, which main.py creates once per application. Tests build their own
store so they never see each other's sessions.

Records handed out are copies. Writers go through upsert()/merge(), which
do read-merge-replace under a lock, so two requests updating the same
session can't interleave halfway through a merge.
"""

import threading


class SessionStore:
    def __init__(self) -> None:
        self._records: dict[str, dict] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._records

    def get(self, session_id: str) -> dict | None:
        with self._lock:
            record = self._records.get(session_id)
            return dict(record) if record is not None else None

    def upsert(self, session_id: str, changes: dict) -> dict:
        """Merge `changes` into the record (creating it if absent) and return the result."""
        with self._lock:
            merged = {**self._records.get(session_id, {}), **changes}
            self._records[session_id] = merged
            return dict(merged)

    def merge(self, session_id: str, changes: dict) -> dict | None:
        """Like upsert(), but only for a record that already exists. Returns None otherwise."""
        with self._lock:
            current = self._records.get(session_id)
            if current is None:
                return None
            merged = {**current, **changes}
            self._records[session_id] = merged
            return dict(merged)

    def all(self) -> list[tuple[str, dict]]:
        """Snapshot of every (session_id, record) pair."""
        with self._lock:
            return [(session_id, dict(record)) for session_id, record in self._records.items()]
