from __future__ import annotations

import asyncio
import logging
import uuid
from typing import AsyncIterable, Callable

from langgraph.graph import END, START, StateGraph

from document_store.saver import DocumentSaver
from techpack import config
from techpack.artifacts import get_artifact_kind
from techpack.data_stream import DataStream
from techpack.graph_state import GenerationState
from techpack.models import Attachment, StreamPart
from techpack.placeholders import extract_fields_needing_input
from techpack.prompts import HANDOFF_MESSAGE, MISSING_IMAGE_ERROR, make_image_preamble
from techpack.schema import ToolErrorModel, ToolResultModel
from techpack.stream_ingestor import TEXT_DELTA, StreamIngestor


logger = logging.getLogger(__name__)

StreamFactory = Callable[[Attachment], AsyncIterable[StreamPart]]


def find_image_attachment(attachments: list[Attachment]) -> Attachment | None:
    for attachment in attachments or []:
        if (attachment.content_type or "").startswith("image/"):
            return attachment
    return None


def build_generation_graph(
    data_stream: DataStream,
    stream_factory: StreamFactory,
    saver: DocumentSaver | None = None,
    kind: str = config.DEFAULT_ARTIFACT_KIND,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
):
    def check_attachment(state: GenerationState) -> GenerationState:
        image = find_image_attachment(state.get("attachments", []))
        if image is None:
            logger.warning("No image attachment among %s attachments", len(state.get("attachments", [])))
            return {"image": None, "output": ToolErrorModel(error=MISSING_IMAGE_ERROR)}
        logger.info("Image attachment found: %s", image.name or image.url)
        return {"image": image}

    def declare_artifact(state: GenerationState) -> GenerationState:
        # Raises UnknownArtifactKindError before anything is emitted.
        get_artifact_kind(kind)

        document_id = id_factory()
        title = state.get("title") or config.DEFAULT_TITLE
        image = state["image"]
        preamble = make_image_preamble(title, image.name, image.url)

        data_stream.write_data("kind", kind)
        data_stream.write_data("id", document_id)
        data_stream.write_data("title", title)
        data_stream.write_data("clear", "")
        data_stream.write_data(TEXT_DELTA, preamble)

        return {"document_id": document_id, "kind": kind, "title": title, "draft": preamble}

    async def stream_draft(state: GenerationState) -> GenerationState:
        ingestor = StreamIngestor(data_stream, initial_draft=state["draft"])
        draft = await ingestor.consume(stream_factory(state["image"]))
        return {"draft": draft, "delta_count": ingestor.delta_count}

    def extract_fields(state: GenerationState) -> GenerationState:
        fields = extract_fields_needing_input(state["draft"])
        logger.info("Fields needing input: %s", len(fields))
        data_stream.write_data("fields-needing-input", fields)
        return {"fields_needing_input": fields}

    async def persist_document(state: GenerationState) -> GenerationState:
        saved = False
        owner_id = state.get("owner_id")
        if owner_id and saver is not None:
            saved = await asyncio.to_thread(
                saver.save,
                document_id=state["document_id"],
                title=state["title"],
                content=state["draft"],
                kind=state["kind"],
                owner_id=owner_id,
            )
        else:
            logger.info("Skipping save for document_id=%s (owner=%s)", state["document_id"], owner_id)

        data_stream.write_data("finish", "")
        errors = list(state.get("errors", []))
        if owner_id and not saved:
            errors.append(f"save_failed:{state['document_id']}")
        return {"saved": saved, "errors": errors}

    def finalize(state: GenerationState) -> GenerationState:
        return {
            "output": ToolResultModel(
                id=state["document_id"],
                title=state["title"],
                kind=state["kind"],
                content=HANDOFF_MESSAGE,
                fields_needing_input=state.get("fields_needing_input", []),
            )
        }

    def route_after_check_attachment(state: GenerationState) -> str:
        if state.get("image") is None:
            return "end"
        return "declare_artifact"

    graph = StateGraph(GenerationState)
    graph.add_node("check_attachment", check_attachment)
    graph.add_node("declare_artifact", declare_artifact)
    graph.add_node("stream_draft", stream_draft)
    graph.add_node("extract_fields", extract_fields)
    graph.add_node("persist_document", persist_document)
    graph.add_node("finalize", finalize)

    graph.add_edge(START, "check_attachment")
    graph.add_conditional_edges(
        "check_attachment",
        route_after_check_attachment,
        {
            "declare_artifact": "declare_artifact",
            "end": END,
        },
    )
    graph.add_edge("declare_artifact", "stream_draft")
    graph.add_edge("stream_draft", "extract_fields")
    graph.add_edge("extract_fields", "persist_document")
    graph.add_edge("persist_document", "finalize")
    graph.add_edge("finalize", END)

    return graph.compile()
