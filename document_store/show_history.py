import argparse
import json

from document_store.storage_sqlite import SQLiteStore
from document_store.versions import VersionViewer


DEFAULT_DB_PATH = "document_store/techpacks.db"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show stored documents or the version history of one document.")
    parser.add_argument("document_id", nargs="?", default=None, help="Document id to inspect")
    parser.add_argument("--sqlite-db", default=DEFAULT_DB_PATH)
    parser.add_argument("--owner-id", default=None, help="Only list documents of this owner")
    parser.add_argument("--version", type=int, default=None, help="Print the content of this version")
    parser.add_argument("--diff", action="store_true", help="Print the diff against the previous version")
    return parser.parse_args()


def list_documents(store: SQLiteStore, owner_id: str | None) -> None:
    rows = store.list_documents(owner_id=owner_id)
    if not rows:
        print("No documents stored.")
        return

    for idx, row in enumerate(rows, start=1):
        print(f"{idx}. {row['title']} ({row['document_id']}) versions={row['version_count']} last_modified={row['last_modified']}")


def show_document(store: SQLiteStore, document_id: str, version: int | None, diff: bool) -> None:
    versions = store.load_versions(document_id)
    if not len(versions):
        raise FileNotFoundError(f"No stored versions for document_id={document_id}")

    viewer = VersionViewer(versions, current_version_index=version)
    snapshot = versions.get(viewer.current_version_index)

    if diff:
        print(versions.unified_diff(snapshot.index))
        return
    if version is not None:
        print(snapshot.content)
        return

    print(
        json.dumps(
            {
                "document_id": document_id,
                "versions": [
                    {"index": s.index, "created_at": s.created_at, "length": len(s.content)}
                    for s in versions.snapshots
                ],
            },
            indent=2,
        )
    )


def main() -> None:
    args = parse_args()
    store = SQLiteStore(args.sqlite_db)
    store.ensure_schema()

    if args.document_id is None:
        list_documents(store, args.owner_id)
    else:
        show_document(store, args.document_id, args.version, args.diff)


if __name__ == "__main__":
    main()
