from __future__ import annotations

from typing import TypedDict

from techpack.models import Attachment
from techpack.schema import ToolErrorModel, ToolResultModel


class GenerationState(TypedDict, total=False):
    attachments: list[Attachment]
    title: str
    owner_id: str | None
    model: str
    image: Attachment | None
    document_id: str | None
    kind: str
    draft: str
    delta_count: int
    fields_needing_input: list[str]
    saved: bool
    errors: list[str]
    started_at: str
    output: ToolResultModel | ToolErrorModel | None
