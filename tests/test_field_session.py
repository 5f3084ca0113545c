from document_store.saver import DocumentSaver
from techpack.field_session import FieldSession, acknowledgment_message
from techpack.prompts import COMPLETION_MESSAGE


CONTENT = "## Brand\n{{Brand}}\n\n## Season\n{{Season}}"


def test_submit_brand_then_season_completes_once(make_context, recorder):
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, fields=["Brand", "Season"])
    assert session.state == "active"
    assert session.prompt_label == "Field 1 of 2: Brand"

    assert session.submit("Nike") is True
    assert context.get_artifact().content == "## Brand\nNike\n\n## Season\n{{Season}}"
    role, turn = recorder.turns[0]
    assert role == "user"
    assert turn.startswith("For Brand: Nike\n\n**AI Response:** ")
    assert 'brand name "Nike"' in turn
    assert "next field" in turn

    assert session.submit("FW24") is True
    assert session.current_field_index == 2
    assert session.state == "complete"
    assert session.is_complete is True
    assert "last field" in recorder.turns[1][1]
    assert [t for t in recorder.turns if t[1] == COMPLETION_MESSAGE] == [("user", COMPLETION_MESSAGE)]
    assert context.get_artifact().content == "## Brand\nNike\n\n## Season\nFW24"


def test_completion_fires_once_when_polled_again(make_context, recorder):
    session = FieldSession(make_context(CONTENT), append=recorder, fields=["Brand", "Season"])
    session.submit("Nike")
    session.skip()

    assert session.check_completion() is False
    assert session.check_completion() is False
    assert sum(1 for _, content in recorder.turns if content == COMPLETION_MESSAGE) == 1


def test_operations_after_the_end_are_noops(make_context, recorder):
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, fields=["Brand", "Season"])
    session.submit("Nike")
    session.submit("FW24")
    content = context.get_artifact().content
    turn_count = len(recorder.turns)
    version_count = len(context.versions)

    assert session.submit("Adidas") is False
    assert session.skip() is False

    assert context.get_artifact().content == content
    assert len(recorder.turns) == turn_count
    assert len(context.versions) == version_count
    assert session.current_field_index == 2


def test_blank_submit_is_rejected(make_context, recorder):
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, fields=["Brand", "Season"])

    assert session.submit("   ") is False
    assert session.current_field_index == 0
    assert recorder.turns == []
    assert context.get_artifact().content == CONTENT


def test_submit_uses_trimmed_value(make_context, recorder):
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, fields=["Brand", "Season"])
    session.submit("  Nike \n")
    assert context.get_artifact().content.startswith("## Brand\nNike\n")


def test_skip_measurements_uses_marker_and_skip_acknowledgment(make_context, recorder):
    context = make_context("## Measurements\n{{Measurements}}\n")
    session = FieldSession(context, append=recorder, fields=["Measurements"])
    assert session.is_long_field is True

    assert session.skip() is True

    assert context.get_artifact().content == "## Measurements\n[Measurements - Not Provided]\n"
    skip_turn = recorder.turns[0][1]
    assert skip_turn.startswith("I'd like to skip providing the Measurements for now.")
    assert "marked Measurements as not provided" in skip_turn
    assert skip_turn != acknowledgment_message("Measurements", "", 0, 1, skipped=False)


def test_zero_fields_never_renders_or_completes(make_context, recorder):
    session = FieldSession(make_context("No placeholders at all."), append=recorder, fields=[])

    assert session.state == "idle"
    assert session.should_render is False
    assert session.check_completion() is False
    assert session.submit("anything") is False
    assert session.skip() is False
    assert recorder.turns == []


def test_missing_placeholder_still_advances(make_context, recorder, caplog):
    context = make_context("## Brand\nAcme")
    session = FieldSession(context, append=recorder, fields=["Brand"])

    assert session.submit("Nike") is True

    assert context.get_artifact().content == "## Brand\nAcme"
    assert session.current_field_index == 1
    assert "No replacement occurred" in caplog.text


def test_fields_loaded_from_metadata_and_not_cleared_by_empty_list(make_context, recorder):
    context = make_context(CONTENT)
    context.set_metadata({"fields_needing_input": ["Brand", "Season"]})
    session = FieldSession(context, append=recorder)
    session.sync_from_metadata()
    assert session.fields == ["Brand", "Season"]

    session.load_fields([])
    assert session.fields == ["Brand", "Season"]


def test_each_update_records_a_snapshot(make_context, recorder):
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, fields=["Brand", "Season"])
    session.submit("Nike")
    session.submit("FW24")

    assert len(context.versions) == 2
    assert context.versions.get(0).content == "## Brand\nNike\n\n## Season\n{{Season}}"
    assert context.viewer.is_current_version is True


def test_updates_are_persisted_in_background(make_context, recorder, store):
    saver = DocumentSaver(store)
    context = make_context(CONTENT)
    session = FieldSession(context, append=recorder, saver=saver, fields=["Brand", "Season"])
    session.submit("Nike")
    session.skip()
    saver.close()

    latest = store.get_latest_document("doc-1")
    assert latest is not None
    assert latest.content == "## Brand\nNike\n\n## Season\n[Season - Not Provided]"
    assert latest.owner_id == "user-1"


def test_no_owner_skips_persistence(make_context, recorder, store):
    saver = DocumentSaver(store)
    session = FieldSession(make_context(CONTENT, owner_id=None), append=recorder, saver=saver, fields=["Brand"])
    session.submit("Nike")
    saver.close()

    assert store.get_documents_by_id("doc-1") == []


def test_acknowledgment_categories():
    assert "brand name" in acknowledgment_message("Brand Name", "Acme", 0, 3, skipped=False)
    assert "designer" in acknowledgment_message("Designer Name", "Jo", 0, 3, skipped=False)
    assert "description" in acknowledgment_message("Brief description", "x", 0, 3, skipped=False)
    assert "measurements" in acknowledgment_message("Key Measurements", "x", 0, 3, skipped=False)
    assert acknowledgment_message("Garment Color", "Red", 2, 3, skipped=False) == (
        "Thank you for providing the garment color. That was the last field! I'll review the tech pack now."
    )
