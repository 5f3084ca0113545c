"""
Draft assembly from the generation stream.

The server side (StreamIngestor) concatenates text deltas in arrival order and
forwards each one on the data stream. The client side (apply_text_delta)
folds a forwarded delta into the artifact and decides when the partial
draft becomes visible.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, AsyncIterable

from techpack import config
from techpack.models import StreamPart

if TYPE_CHECKING:
    from techpack.artifacts import ArtifactState
    from techpack.data_stream import DataStream


logger = logging.getLogger(__name__)

TEXT_DELTA = "text-delta"


class StreamIngestor:
    def __init__(self, data_stream: DataStream, initial_draft: str = ""):
        self.data_stream = data_stream
        self.draft = initial_draft
        self.delta_count = 0

    async def consume(self, full_stream: AsyncIterable[StreamPart]) -> str:
        async for part in full_stream:
            if part.type != TEXT_DELTA:
                continue
            delta = part.content or ""
            self.draft += delta
            self.delta_count += 1
            self.data_stream.write_data(TEXT_DELTA, delta)

        logger.info("Stream finished after %s deltas, draft length=%s", self.delta_count, len(self.draft))
        return self.draft


def should_reveal(artifact: ArtifactState) -> bool:
    length = len(artifact.content)
    return (
        artifact.status == "streaming"
        and config.VISIBILITY_MIN_LENGTH < length < config.VISIBILITY_MAX_LENGTH
    )


def apply_text_delta(artifact: ArtifactState, delta: str) -> ArtifactState:
    # Visibility is judged on the content before this delta; it never flips back.
    return replace(
        artifact,
        content=artifact.content + delta,
        is_visible=True if should_reveal(artifact) else artifact.is_visible,
        status="streaming",
    )
