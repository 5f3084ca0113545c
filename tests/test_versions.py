import pytest

from document_store.versions import (
    InvalidDiffRequestError,
    SnapshotNotFoundError,
    VersionStore,
    VersionViewer,
)


def _store(*contents) -> VersionStore:
    versions = VersionStore(document_id="doc-1")
    for content in contents:
        versions.save(content)
    return versions


def test_save_returns_sequential_indexes():
    versions = VersionStore(document_id="doc-1")
    assert versions.save("a") == 0
    assert versions.save("b") == 1
    assert versions.get(1).content == "b"
    assert versions.latest().content == "b"


def test_get_out_of_range():
    versions = _store("a")
    with pytest.raises(SnapshotNotFoundError):
        versions.get(1)
    with pytest.raises(IndexError):
        versions.get(-1)


def test_diff_pair_and_first_version():
    versions = _store("line one\n", "line one\nline two\n")
    assert versions.diff_pair(1) == ("line one\n", "line one\nline two\n")
    assert "+line two" in versions.unified_diff(1)
    with pytest.raises(InvalidDiffRequestError):
        versions.diff_pair(0)


def test_prev_and_next_clamp_at_boundaries():
    viewer = VersionViewer(_store("a", "b", "c"))
    assert viewer.current_version_index == 2
    assert viewer.can_next() is False

    assert viewer.handle_version_change("next") == 2
    assert viewer.handle_version_change("prev") == 1
    assert viewer.handle_version_change("prev") == 0
    assert viewer.can_prev() is False
    assert viewer.handle_version_change("prev") == 0
    assert viewer.content() == "a"


def test_toggle_keeps_index():
    viewer = VersionViewer(_store("a", "b"))
    assert viewer.handle_version_change("toggle") == 1
    assert viewer.mode == "diff"
    assert viewer.diff() == ("a", "b")
    assert viewer.handle_version_change("toggle") == 1
    assert viewer.mode == "edit"


def test_latest_returns_to_edit_mode():
    viewer = VersionViewer(_store("a", "b", "c"), current_version_index=0)
    viewer.handle_version_change("toggle")
    assert viewer.handle_version_change("latest") == 2
    assert viewer.mode == "edit"
    assert viewer.is_current_version is True


def test_unknown_change_is_rejected():
    with pytest.raises(ValueError):
        VersionViewer(_store("a")).handle_version_change("rewind")


def test_empty_store_viewer():
    viewer = VersionViewer(VersionStore(document_id="doc-1"))
    assert viewer.is_current_version is True
    assert viewer.content() == ""
    assert viewer.handle_version_change("next") == 0


def test_render_diff_at_first_version():
    viewer = VersionViewer(_store("a\n", "b\n"), current_version_index=0)
    assert "+a" in viewer.render_diff()
    viewer.handle_version_change("next")
    rendered = viewer.render_diff()
    assert "-a" in rendered and "+b" in rendered
    assert VersionViewer(VersionStore(document_id="doc-1")).render_diff() == ""
