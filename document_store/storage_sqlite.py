from __future__ import annotations

import sqlite3
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from document_store import records as rec
from document_store.schema import DocumentRecordModel, MessageRecordModel
from document_store.versions import Snapshot, VersionStore


class SQLiteStore:
    def __init__(self, db_path: str | Path = "document_store/techpacks.db"):
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    document_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    schema_version TEXT NOT NULL,
                    title TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    content TEXT NOT NULL,
                    owner_id TEXT NOT NULL,
                    PRIMARY KEY (document_id, created_at)
                );

                CREATE TABLE IF NOT EXISTS messages (
                    message_id TEXT PRIMARY KEY,
                    chat_id TEXT NOT NULL,
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS suggestions (
                    suggestion_id TEXT PRIMARY KEY,
                    document_id TEXT NOT NULL,
                    original_text TEXT NOT NULL,
                    suggested_text TEXT NOT NULL,
                    description TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_documents_owner_id ON documents(owner_id);
                CREATE INDEX IF NOT EXISTS idx_messages_chat_id ON messages(chat_id);
                CREATE INDEX IF NOT EXISTS idx_suggestions_document_id ON suggestions(document_id);
                """
            )

    def save_document(
        self,
        document_id: str,
        title: str,
        content: str,
        kind: str,
        owner_id: str,
    ) -> rec.DocumentRecord:
        """Append one snapshot row for ``document_id``; rows are never rewritten in place."""
        document = rec.DocumentRecord(
            document_id=document_id,
            title=title,
            kind=kind,
            content=content,
            owner_id=owner_id,
            created_at=datetime.now(tz=timezone.utc).isoformat(),
        )
        DocumentRecordModel(**document.__dict__)

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO documents (document_id, created_at, schema_version, title, kind, content, owner_id)
                VALUES (:document_id, :created_at, :schema_version, :title, :kind, :content, :owner_id)
                ON CONFLICT(document_id, created_at) DO UPDATE SET
                    title=excluded.title,
                    kind=excluded.kind,
                    content=excluded.content,
                    owner_id=excluded.owner_id
                """,
                {**asdict(document), "schema_version": rec.SCHEMA_VERSION},
            )
        return document

    def get_documents_by_id(self, document_id: str) -> list[rec.DocumentRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM documents WHERE document_id = ? ORDER BY created_at ASC",
                (document_id,),
            ).fetchall()

        return [self._document_from_row(row) for row in rows]

    def get_latest_document(self, document_id: str) -> rec.DocumentRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM documents WHERE document_id = ? ORDER BY created_at DESC LIMIT 1",
                (document_id,),
            ).fetchone()
        return self._document_from_row(row) if row is not None else None

    def load_versions(self, document_id: str) -> VersionStore:
        documents = self.get_documents_by_id(document_id)
        return VersionStore(
            document_id=document_id,
            snapshots=[
                Snapshot(index=idx, content=doc.content, created_at=doc.created_at)
                for idx, doc in enumerate(documents)
            ],
        )

    def list_documents(self, owner_id: str | None = None) -> list[sqlite3.Row]:
        query = """
            SELECT document_id, title, kind, owner_id,
                   MIN(created_at) AS created_at,
                   MAX(created_at) AS last_modified,
                   COUNT(*) AS version_count
            FROM documents
        """
        params: tuple = ()
        if owner_id is not None:
            query += " WHERE owner_id = ?"
            params = (owner_id,)
        query += " GROUP BY document_id ORDER BY last_modified DESC"

        with self._connect() as conn:
            return conn.execute(query, params).fetchall()

    def insert_message(self, chat_id: str, role: str, content: str) -> rec.MessageRecord:
        message = rec.MessageRecord(
            message_id=str(uuid4()),
            chat_id=chat_id,
            role=role,
            content=content,
            created_at=datetime.now(tz=timezone.utc).isoformat(),
        )
        MessageRecordModel(**message.__dict__)

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO messages (message_id, chat_id, role, content, created_at)
                VALUES (:message_id, :chat_id, :role, :content, :created_at)
                """,
                asdict(message),
            )
        return message

    def get_messages_by_chat_id(self, chat_id: str) -> list[rec.MessageRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM messages WHERE chat_id = ? ORDER BY created_at ASC, rowid ASC",
                (chat_id,),
            ).fetchall()

        return [
            rec.MessageRecord(
                message_id=row["message_id"],
                chat_id=row["chat_id"],
                role=row["role"],
                content=row["content"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def get_suggestions_by_document_id(self, document_id: str) -> list[dict]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM suggestions WHERE document_id = ? ORDER BY created_at ASC",
                (document_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def save_suggestion(
        self,
        document_id: str,
        original_text: str,
        suggested_text: str,
        description: str | None = None,
    ) -> str:
        suggestion_id = str(uuid4())
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO suggestions (
                    suggestion_id, document_id, original_text, suggested_text, description, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    suggestion_id,
                    document_id,
                    original_text,
                    suggested_text,
                    description,
                    datetime.now(tz=timezone.utc).isoformat(),
                ),
            )
        return suggestion_id

    def _document_from_row(self, row: sqlite3.Row) -> rec.DocumentRecord:
        return rec.DocumentRecord(
            document_id=row["document_id"],
            title=row["title"],
            kind=row["kind"],
            content=row["content"],
            owner_id=row["owner_id"],
            created_at=row["created_at"],
        )
