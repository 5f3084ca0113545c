"""
Artifact kinds and the context handle they operate on.

A kind is a plain record of capabilities (initialize, on_stream_part, render,
actions, toolbar) looked up by its tag. The context handle carries the live
artifact, its metadata and its version history, and is passed explicitly to
every capability.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from document_store.versions import VersionStore, VersionViewer
from techpack import config
from techpack.models import StreamPart
from techpack.prompts import FINAL_POLISH_MESSAGE, REQUEST_SUGGESTIONS_MESSAGE
from techpack.schema import ArtifactStatus
from techpack.stream_ingestor import apply_text_delta


logger = logging.getLogger(__name__)

AppendMessage = Callable[[str, str], "str | None"]
SuggestionLoader = Callable[[str], list]


class UnknownArtifactKindError(LookupError):
    pass


@dataclass(frozen=True)
class ArtifactState:
    document_id: str = "init"
    title: str = ""
    kind: str = config.DEFAULT_ARTIFACT_KIND
    content: str = ""
    status: ArtifactStatus = "idle"
    is_visible: bool = False

    def with_changes(self, **changes) -> ArtifactState:
        return replace(self, **changes)


class ArtifactContext:
    def __init__(
        self,
        artifact: ArtifactState | None = None,
        metadata: dict | None = None,
        owner_id: str | None = None,
    ):
        self._artifact = artifact or ArtifactState()
        self._metadata: dict = dict(metadata or {})
        self.owner_id = owner_id
        self.versions = VersionStore(document_id=self._artifact.document_id)
        self.viewer = VersionViewer(self.versions)

    def get_artifact(self) -> ArtifactState:
        return self._artifact

    def set_artifact(self, value: ArtifactState | Callable[[ArtifactState], ArtifactState]) -> ArtifactState:
        self._artifact = value(self._artifact) if callable(value) else value
        return self._artifact

    def get_metadata(self) -> dict:
        return self._metadata

    def set_metadata(self, value: dict | Callable[[dict], dict]) -> dict:
        self._metadata = value(self._metadata) if callable(value) else dict(value)
        return self._metadata

    def reset_versions(self, document_id: str, versions: VersionStore | None = None) -> None:
        self.versions = versions or VersionStore(document_id=document_id)
        self.viewer = VersionViewer(self.versions)

    def record_snapshot(self, content: str) -> int:
        index = self.versions.save(content)
        self.viewer.sync_to_latest()
        return index


@dataclass
class ActionContext:
    context: ArtifactContext
    append_message: AppendMessage | None = None


@dataclass(frozen=True)
class ArtifactAction:
    icon: str
    description: str
    on_click: Callable[[ActionContext], Any]
    is_disabled: Callable[[ActionContext], bool] = lambda ctx: False


@dataclass(frozen=True)
class ArtifactKind:
    kind: str
    description: str
    initialize: Callable[..., None]
    on_stream_part: Callable[[StreamPart, ArtifactContext], None]
    render: Callable[[ArtifactContext], str]
    actions: tuple[ArtifactAction, ...] = field(default_factory=tuple)
    toolbar: tuple[ArtifactAction, ...] = field(default_factory=tuple)

    def find_action(self, description: str) -> ArtifactAction:
        for action in (*self.actions, *self.toolbar):
            if action.description == description:
                return action
        raise KeyError(f"{self.kind} artifact has no action {description!r}")

    def run_action(self, description: str, ctx: ActionContext) -> Any:
        action = self.find_action(description)
        if action.is_disabled(ctx):
            logger.info("Action %r is disabled for %s", description, ctx.context.get_artifact().document_id)
            return None
        return action.on_click(ctx)


def _initialize_text(context: ArtifactContext, load_suggestions: SuggestionLoader | None = None) -> None:
    document_id = context.get_artifact().document_id
    suggestions = load_suggestions(document_id) if load_suggestions else []
    context.set_metadata(lambda m: {**m, "suggestions": list(suggestions)})


def _on_text_stream_part(part: StreamPart, context: ArtifactContext) -> None:
    if part.type == "suggestion":
        context.set_metadata(lambda m: {**m, "suggestions": [*m.get("suggestions", []), part.content]})

    if part.type == "text-delta":
        context.set_artifact(lambda a: apply_text_delta(a, part.content or ""))


def _render_text(context: ArtifactContext) -> str:
    viewer = context.viewer
    if viewer.mode == "diff":
        return viewer.render_diff()
    if viewer.is_current_version:
        return context.get_artifact().content
    return viewer.content()


def _change_version(change: str) -> Callable[[ActionContext], int]:
    def on_click(ctx: ActionContext) -> int:
        return ctx.context.viewer.handle_version_change(change)

    return on_click


def _append(message: str) -> Callable[[ActionContext], Any]:
    def on_click(ctx: ActionContext):
        if ctx.append_message is None:
            raise RuntimeError("No conversation is attached to this artifact.")
        return ctx.append_message("user", message)

    return on_click


def _export(ctx: ActionContext):
    from techpack.html_renderer import export_tech_pack

    return export_tech_pack(ctx.context.get_artifact().content)


text_artifact = ArtifactKind(
    kind="text",
    description="Useful for text content, like drafting essays and emails.",
    initialize=_initialize_text,
    on_stream_part=_on_text_stream_part,
    render=_render_text,
    actions=(
        ArtifactAction(
            icon="clock-rewind",
            description="View changes",
            on_click=_change_version("toggle"),
            is_disabled=lambda ctx: not ctx.context.viewer.can_toggle(),
        ),
        ArtifactAction(
            icon="undo",
            description="View Previous version",
            on_click=_change_version("prev"),
            is_disabled=lambda ctx: not ctx.context.viewer.can_prev(),
        ),
        ArtifactAction(
            icon="redo",
            description="View Next version",
            on_click=_change_version("next"),
            is_disabled=lambda ctx: not ctx.context.viewer.can_next(),
        ),
        ArtifactAction(
            icon="copy",
            description="Copy to clipboard",
            on_click=lambda ctx: ctx.context.get_artifact().content,
        ),
    ),
    toolbar=(
        ArtifactAction(icon="pen", description="Add final polish", on_click=_append(FINAL_POLISH_MESSAGE)),
        ArtifactAction(
            icon="message",
            description="Request suggestions",
            on_click=_append(REQUEST_SUGGESTIONS_MESSAGE),
        ),
        ArtifactAction(icon="download", description="Export tech pack", on_click=_export),
    ),
)

ARTIFACT_KINDS: dict[str, ArtifactKind] = {text_artifact.kind: text_artifact}


def get_artifact_kind(kind: str) -> ArtifactKind:
    try:
        return ARTIFACT_KINDS[kind]
    except KeyError:
        raise UnknownArtifactKindError(f"No document handler found for kind: {kind}") from None
