from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait

from document_store.storage_sqlite import SQLiteStore


logger = logging.getLogger(__name__)


class DocumentSaver:
    """
    Writes document snapshots off the interactive path.

    A single worker keeps writes in submission order. Failures are logged and
    never reach the caller; the in-memory artifact stays authoritative.
    """

    def __init__(self, store: SQLiteStore, max_workers: int = 1):
        self.store = store
        self._executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="document-saver")
        self._pending: set[Future] = set()

    def save(
        self,
        document_id: str,
        title: str,
        content: str,
        kind: str,
        owner_id: str,
    ) -> bool:
        try:
            self.store.save_document(
                document_id=document_id,
                title=title,
                content=content,
                kind=kind,
                owner_id=owner_id,
            )
            return True
        except Exception:
            logger.exception("Failed to save document_id=%s", document_id)
            return False

    def save_in_background(
        self,
        document_id: str,
        title: str,
        content: str,
        kind: str,
        owner_id: str,
    ) -> Future:
        future = self._executor.submit(self.save, document_id, title, content, kind, owner_id)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)
        return future

    def flush(self, timeout: float | None = None) -> None:
        pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)
