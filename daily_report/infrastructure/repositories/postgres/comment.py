"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/comment.py
============================================================
Class: PostgresCommentRepository

Responsibilities:
- Comentarios de reportes en PostgreSQL, con el nombre del autor (JOIN).
- Ordenamiento determinístico: created_at ASC, id ASC.

Collaborators:
- domain.entities.Comment
- PostgresRepositoryBase
- Tablas: comments, sales_persons
============================================================
"""

from __future__ import annotations

from ....domain.entities import Comment
from .base import PostgresRepositoryBase


class PostgresCommentRepository(PostgresRepositoryBase):
    _SELECT = """
        SELECT c.id, c.daily_report_id, c.sales_person_id, c.content,
               sp.name, c.created_at, c.updated_at
        FROM comments c
        LEFT JOIN sales_persons sp ON sp.id = c.sales_person_id
    """

    @staticmethod
    def _row_to_comment(row: tuple) -> Comment:
        (
            comment_id,
            report_id,
            sales_person_id,
            content,
            author_name,
            created_at,
            updated_at,
        ) = row
        return Comment(
            id=comment_id,
            daily_report_id=report_id,
            sales_person_id=sales_person_id,
            content=content,
            author_name=author_name,
            created_at=created_at,
            updated_at=updated_at,
        )

    def list_comments(self, report_id: int) -> list[Comment]:
        rows = self._fetchall(
            query=f"{self._SELECT} WHERE c.daily_report_id = %s ORDER BY c.created_at ASC, c.id ASC",
            params=[report_id],
            context_msg="PostgresCommentRepository: Failed to list comments",
            extra={"report_id": report_id},
        )
        return [self._row_to_comment(r) for r in rows]

    def get_comment(self, comment_id: int) -> Comment | None:
        row = self._fetchone(
            query=f"{self._SELECT} WHERE c.id = %s",
            params=[comment_id],
            context_msg="PostgresCommentRepository: Failed to get comment",
            extra={"comment_id": comment_id},
        )
        return self._row_to_comment(row) if row else None

    def create_comment(
        self, *, report_id: int, sales_person_id: int, content: str
    ) -> Comment:
        row = self._fetchone(
            query="""
                INSERT INTO comments
                    (daily_report_id, sales_person_id, content, created_at, updated_at)
                VALUES (%s, %s, %s, NOW(), NOW())
                RETURNING id
            """,
            params=[report_id, sales_person_id, content],
            context_msg="PostgresCommentRepository: Failed to create comment",
            extra={"report_id": report_id},
        )
        created = self.get_comment(row[0])
        assert created is not None
        return created

    def update_comment(self, comment_id: int, content: str) -> Comment | None:
        row = self._fetchone(
            query="""
                UPDATE comments SET content = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING id
            """,
            params=[content, comment_id],
            context_msg="PostgresCommentRepository: Failed to update comment",
            extra={"comment_id": comment_id},
        )
        return self.get_comment(row[0]) if row else None

    def delete_comment(self, comment_id: int) -> bool:
        deleted = self._execute(
            query="DELETE FROM comments WHERE id = %s",
            params=[comment_id],
            context_msg="PostgresCommentRepository: Failed to delete comment",
            extra={"comment_id": comment_id},
        )
        return deleted > 0

    def delete_for_report(self, report_id: int) -> int:
        return self._execute(
            query="DELETE FROM comments WHERE daily_report_id = %s",
            params=[report_id],
            context_msg="PostgresCommentRepository: Failed to delete report comments",
            extra={"report_id": report_id},
        )
