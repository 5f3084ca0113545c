#!/usr/bin/env python3
import argparse
import sqlite3
from pathlib import Path


DEFAULT_DB_PATH = "document_store/techpacks.db"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete every stored snapshot and suggestion of a document, and optionally its chat."
    )
    parser.add_argument("document_id", help="Document id to remove")
    parser.add_argument(
        "--sqlite-db",
        default=DEFAULT_DB_PATH,
        help=f"Path to SQLite database (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--chat-id",
        default=None,
        help="Also delete the dialogue turns of this chat.",
    )
    return parser.parse_args()


def delete_document_records(db_path: str, document_id: str, chat_id: str | None = None) -> dict[str, int]:
    if not Path(db_path).exists():
        raise FileNotFoundError(f"SQLite database not found: {db_path}")

    with sqlite3.connect(db_path) as conn:
        conn.row_factory = sqlite3.Row
        cur = conn.cursor()

        cur.execute("BEGIN")
        try:
            cur.execute("DELETE FROM suggestions WHERE document_id = ?", (document_id,))
            deleted_suggestions = cur.rowcount

            deleted_messages = 0
            if chat_id:
                cur.execute("DELETE FROM messages WHERE chat_id = ?", (chat_id,))
                deleted_messages = cur.rowcount

            cur.execute("DELETE FROM documents WHERE document_id = ?", (document_id,))
            deleted_documents = cur.rowcount

            conn.commit()
        except Exception:
            conn.rollback()
            raise

    return {
        "suggestions": deleted_suggestions,
        "messages": deleted_messages,
        "documents": deleted_documents,
    }


def main() -> None:
    args = parse_args()
    deleted = delete_document_records(args.sqlite_db, args.document_id, chat_id=args.chat_id)

    print(f"document_id={args.document_id}")
    print(f"deleted suggestions: {deleted['suggestions']}")
    if args.chat_id:
        print(f"deleted messages:    {deleted['messages']}")
    else:
        print("deleted messages:    skipped")
    print(f"deleted snapshots:   {deleted['documents']}")

    if deleted["documents"] == 0:
        print("No document row found for this id.")


if __name__ == "__main__":
    main()
