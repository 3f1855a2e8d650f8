"""
============================================================
CRC CARD — infrastructure/repositories/in_memory/comment.py
============================================================
Class: InMemoryCommentRepository

Responsibilities:
  - Report comments in memory, ordered by created_at ASC, id ASC.
  - Author names are resolved by the caller.
============================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from threading import Lock

from ....domain.entities import Comment


class InMemoryCommentRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._items: dict[int, Comment] = {}
        self._ids = count(1)

    def list_comments(self, report_id: int) -> list[Comment]:
        with self._lock:
            return sorted(
                (c for c in self._items.values() if c.daily_report_id == report_id),
                key=lambda c: (c.created_at, c.id),
            )

    def get_comment(self, comment_id: int) -> Comment | None:
        with self._lock:
            return self._items.get(comment_id)

    def create_comment(
        self, *, report_id: int, sales_person_id: int, content: str
    ) -> Comment:
        now = datetime.now(timezone.utc)
        with self._lock:
            comment = Comment(
                id=next(self._ids),
                daily_report_id=report_id,
                sales_person_id=sales_person_id,
                content=content,
                created_at=now,
                updated_at=now,
            )
            self._items[comment.id] = comment
            return comment

    def update_comment(self, comment_id: int, content: str) -> Comment | None:
        with self._lock:
            current = self._items.get(comment_id)
            if current is None:
                return None
            updated = replace(
                current, content=content, updated_at=datetime.now(timezone.utc)
            )
            self._items[comment_id] = updated
            return updated

    def delete_comment(self, comment_id: int) -> bool:
        with self._lock:
            return self._items.pop(comment_id, None) is not None

    def delete_for_report(self, report_id: int) -> int:
        with self._lock:
            doomed = [
                cid for cid, c in self._items.items() if c.daily_report_id == report_id
            ]
            for cid in doomed:
                del self._items[cid]
            return len(doomed)
