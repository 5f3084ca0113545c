from __future__ import annotations

import logging
from typing import Callable

from techpack.artifacts import ArtifactContext, get_artifact_kind
from techpack.models import StreamPart


logger = logging.getLogger(__name__)

Subscriber = Callable[[StreamPart], None]


class DataStream:
    """Ordered metadata/event channel from the generation pipeline to its consumers."""

    def __init__(self):
        self.parts: list[StreamPart] = []
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def write_data(self, type: str, content=None) -> StreamPart:
        part = StreamPart(type=type, content="" if content is None else content)
        self.parts.append(part)
        for subscriber in self._subscribers:
            subscriber(part)
        return part

    def of_type(self, type: str) -> list[StreamPart]:
        return [p for p in self.parts if p.type == type]


class DataStreamHandler:
    """Applies channel events, in order, to one ArtifactContext."""

    def __init__(self, context: ArtifactContext):
        self.context = context

    def __call__(self, part: StreamPart) -> None:
        self.handle(part)

    def handle(self, part: StreamPart) -> None:
        if part.type == "kind":
            get_artifact_kind(part.content)
            self.context.set_artifact(lambda a: a.with_changes(kind=part.content))
        elif part.type == "id":
            self.context.set_artifact(lambda a: a.with_changes(document_id=part.content))
            self.context.reset_versions(part.content)
        elif part.type == "title":
            self.context.set_artifact(lambda a: a.with_changes(title=part.content))
        elif part.type == "clear":
            self.context.set_artifact(lambda a: a.with_changes(content="", status="streaming"))
        elif part.type == "fields-needing-input":
            fields = list(part.content or [])
            self.context.set_metadata(lambda m: {**m, "fields_needing_input": fields})
        elif part.type == "finish":
            artifact = self.context.set_artifact(lambda a: a.with_changes(status="idle"))
            self.context.record_snapshot(artifact.content)
        else:
            kind = get_artifact_kind(self.context.get_artifact().kind)
            kind.on_stream_part(part, self.context)
