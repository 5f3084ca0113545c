import asyncio

from techpack.artifacts import ArtifactState
from techpack.data_stream import DataStream
from techpack.models import StreamPart
from techpack.stream_ingestor import StreamIngestor, apply_text_delta


async def _parts(parts):
    for part in parts:
        yield part


def test_consume_concatenates_text_deltas_in_order():
    data_stream = DataStream()
    ingestor = StreamIngestor(data_stream, initial_draft="# Title\n\n")
    parts = [
        StreamPart("text-delta", "## Brand\n"),
        StreamPart("reasoning", "ignored"),
        StreamPart("text-delta", "{{Brand}}"),
        StreamPart("finish", ""),
    ]

    draft = asyncio.run(ingestor.consume(_parts(parts)))

    assert draft == "# Title\n\n## Brand\n{{Brand}}"
    assert ingestor.delta_count == 2
    assert [p.content for p in data_stream.of_type("text-delta")] == ["## Brand\n", "{{Brand}}"]


def test_consume_empty_stream_keeps_initial_draft():
    ingestor = StreamIngestor(DataStream(), initial_draft="preamble")
    assert asyncio.run(ingestor.consume(_parts([]))) == "preamble"


def test_visibility_window_is_exclusive():
    for length, expected in [(400, False), (401, True), (449, True), (450, False)]:
        artifact = ArtifactState(content="x" * length, status="streaming")
        assert apply_text_delta(artifact, "y").is_visible is expected


def test_visibility_requires_streaming_status():
    artifact = ArtifactState(content="x" * 420, status="idle")
    updated = apply_text_delta(artifact, "y")
    assert updated.is_visible is False
    assert updated.status == "streaming"


def test_visibility_never_flips_back():
    artifact = ArtifactState(content="x" * 420, status="streaming")
    artifact = apply_text_delta(artifact, "y" * 100)
    assert artifact.is_visible is True

    artifact = apply_text_delta(artifact, "z" * 1000)
    assert artifact.is_visible is True
    assert len(artifact.content) == 1521


def test_large_delta_can_jump_past_window():
    artifact = ArtifactState(content="x" * 10, status="streaming")
    artifact = apply_text_delta(artifact, "y" * 1000)
    artifact = apply_text_delta(artifact, "z")
    assert artifact.is_visible is False
