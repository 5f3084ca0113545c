"""
Append-only snapshot history for one document, plus the viewer cursor used to
browse it (toggle diff mode, step to the previous or next version).
"""
from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal


ViewerMode = Literal["edit", "diff"]
VersionChange = Literal["toggle", "prev", "next", "latest"]


class SnapshotNotFoundError(IndexError):
    pass


class InvalidDiffRequestError(ValueError):
    pass


@dataclass(frozen=True)
class Snapshot:
    index: int
    content: str
    created_at: str


@dataclass
class VersionStore:
    document_id: str
    snapshots: list[Snapshot] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.snapshots)

    @property
    def latest_index(self) -> int:
        return len(self.snapshots) - 1

    def save(self, content: str) -> int:
        index = len(self.snapshots)
        self.snapshots.append(
            Snapshot(
                index=index,
                content=content,
                created_at=datetime.now(tz=timezone.utc).isoformat(),
            )
        )
        return index

    def get(self, index: int) -> Snapshot:
        if index < 0 or index >= len(self.snapshots):
            raise SnapshotNotFoundError(
                f"No snapshot {index} for document {self.document_id} ({len(self.snapshots)} stored)"
            )
        return self.snapshots[index]

    def latest(self) -> Snapshot | None:
        return self.snapshots[-1] if self.snapshots else None

    def diff_pair(self, index: int) -> tuple[str, str]:
        """Return (previous content, content) for the snapshot at ``index``."""
        if index == 0:
            raise InvalidDiffRequestError("The first version has nothing to compare against.")
        new = self.get(index)
        old = self.get(index - 1)
        return old.content, new.content

    def unified_diff(self, index: int) -> str:
        old_content, new_content = self.diff_pair(index)
        return format_unified_diff(old_content, new_content, f"version {index - 1}", f"version {index}")


def format_unified_diff(old_content: str, new_content: str, fromfile: str, tofile: str) -> str:
    diff = difflib.unified_diff(
        old_content.split("\n") if old_content else [],
        new_content.split("\n") if new_content else [],
        lineterm="",
        fromfile=fromfile,
        tofile=tofile,
    )
    return "\n".join(diff)


class VersionViewer:
    """External cursor over a VersionStore. Never changes the store itself."""

    def __init__(self, versions: VersionStore, current_version_index: int | None = None):
        self.versions = versions
        self.mode: ViewerMode = "edit"
        if current_version_index is None:
            current_version_index = max(versions.latest_index, 0)
        self.current_version_index = current_version_index

    @property
    def is_current_version(self) -> bool:
        if len(self.versions) == 0:
            return True
        return self.current_version_index == self.versions.latest_index

    def can_toggle(self) -> bool:
        return self.current_version_index > 0

    def can_prev(self) -> bool:
        return self.current_version_index > 0

    def can_next(self) -> bool:
        return not self.is_current_version

    def handle_version_change(self, change: VersionChange) -> int:
        if change == "toggle":
            self.mode = "edit" if self.mode == "diff" else "diff"
        elif change == "prev":
            if self.current_version_index > 0:
                self.current_version_index -= 1
        elif change == "next":
            if self.current_version_index < self.versions.latest_index:
                self.current_version_index += 1
        elif change == "latest":
            self.mode = "edit"
            self.current_version_index = max(self.versions.latest_index, 0)
        else:
            raise ValueError(f"Unknown version change: {change}")
        return self.current_version_index

    def sync_to_latest(self) -> int:
        # Called after a new snapshot lands; the mode is left alone.
        self.current_version_index = max(self.versions.latest_index, 0)
        return self.current_version_index

    def content(self) -> str:
        if len(self.versions) == 0:
            return ""
        return self.versions.get(self.current_version_index).content

    def diff(self) -> tuple[str, str]:
        return self.versions.diff_pair(self.current_version_index)

    def render_diff(self) -> str:
        """Unified diff for the current index; the first version is compared against an empty document."""
        if len(self.versions) == 0:
            return ""
        if self.current_version_index == 0:
            return format_unified_diff("", self.versions.get(0).content, "empty", "version 0")
        return self.versions.unified_diff(self.current_version_index)
