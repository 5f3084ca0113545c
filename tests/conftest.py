from __future__ import annotations

import pytest

from document_store.storage_sqlite import SQLiteStore
from techpack.artifacts import ArtifactContext, ArtifactState


class TurnRecorder:
    def __init__(self):
        self.turns: list[tuple[str, str]] = []

    def __call__(self, role: str, content: str) -> str:
        self.turns.append((role, content))
        return f"turn-{len(self.turns)}"


@pytest.fixture
def store(tmp_path) -> SQLiteStore:
    store = SQLiteStore(tmp_path / "techpacks.db")
    store.ensure_schema()
    return store


@pytest.fixture
def recorder() -> TurnRecorder:
    return TurnRecorder()


@pytest.fixture
def make_context():
    def _make(content: str, document_id: str = "doc-1", owner_id: str | None = "user-1") -> ArtifactContext:
        return ArtifactContext(
            ArtifactState(document_id=document_id, title="Tech Pack", content=content),
            owner_id=owner_id,
        )

    return _make
