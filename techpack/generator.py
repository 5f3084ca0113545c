from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import AsyncIterator

from dotenv import load_dotenv

from document_store.saver import DocumentSaver
from techpack import config
from techpack.data_stream import DataStream
from techpack.graph import StreamFactory, build_generation_graph
from techpack.graph_state import GenerationState
from techpack.models import Attachment, StreamPart
from techpack.prompts import SYSTEM_PROMPT, make_user_prompt
from techpack.schema import ToolErrorModel, ToolResultModel
from techpack.stream_ingestor import TEXT_DELTA


load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_GENERATION_MODEL = os.getenv("OPENAI_GENERATION_MODEL", config.GENERATION_MODEL)

logger = logging.getLogger(__name__)


class OpenAIGenerationBackend:
    def __init__(self, model: str = OPENAI_GENERATION_MODEL):
        try:
            from openai import AsyncOpenAI
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError("openai package is required for tech pack generation.") from exc

        if not OPENAI_API_KEY:
            raise RuntimeError("Missing OPENAI_API_KEY for tech pack generation.")

        self.model = model
        self.client = AsyncOpenAI(api_key=OPENAI_API_KEY)

    async def stream(self, image: Attachment) -> AsyncIterator[StreamPart]:
        response = await self.client.chat.completions.create(
            model=self.model,
            stream=True,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": make_user_prompt(image.url)},
            ],
        )
        async for chunk in response:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield StreamPart(type=TEXT_DELTA, content=delta)


class TechPackGenerator:
    def __init__(
        self,
        data_stream: DataStream,
        stream_factory: StreamFactory | None = None,
        saver: DocumentSaver | None = None,
        model: str = OPENAI_GENERATION_MODEL,
    ):
        if stream_factory is None:
            stream_factory = OpenAIGenerationBackend(model=model).stream

        self.data_stream = data_stream
        self.saver = saver
        self.model = model
        self.graph = build_generation_graph(
            data_stream=data_stream,
            stream_factory=stream_factory,
            saver=saver,
        )

    async def analyze_image(
        self,
        attachments: list[Attachment],
        title: str = config.DEFAULT_TITLE,
        owner_id: str | None = None,
    ) -> ToolResultModel | ToolErrorModel:
        initial_state: GenerationState = {
            "attachments": list(attachments or []),
            "title": title or config.DEFAULT_TITLE,
            "owner_id": owner_id,
            "model": self.model,
            "image": None,
            "document_id": None,
            "draft": "",
            "fields_needing_input": [],
            "saved": False,
            "errors": [],
            "started_at": datetime.now(tz=timezone.utc).isoformat(),
            "output": None,
        }
        final_state = await self.graph.ainvoke(initial_state)
        for error in final_state.get("errors", []):
            logger.warning("Generation issue: %s", error)
        return final_state["output"]

    def analyze_image_sync(
        self,
        attachments: list[Attachment],
        title: str = config.DEFAULT_TITLE,
        owner_id: str | None = None,
    ) -> ToolResultModel | ToolErrorModel:
        return asyncio.run(self.analyze_image(attachments, title=title, owner_id=owner_id))
