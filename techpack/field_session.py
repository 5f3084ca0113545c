"""
Guided completion of the placeholders left in a generated tech pack.

A FieldSession walks the extracted field list strictly in order. Each submit
or skip rewrites the placeholder in the live document, appends one combined
dialogue turn, advances the cursor, snapshots the new content and hands the
persisted save to the background saver. Once the cursor reaches the end the
closing turn is appended exactly once.
"""
from __future__ import annotations

import logging
from typing import Callable, Literal

from document_store.records import ROLE_USER
from document_store.saver import DocumentSaver
from techpack.artifacts import ArtifactContext
from techpack.models import DialogueTurn
from techpack.placeholders import not_provided_marker, replace_placeholder
from techpack.prompts import COMPLETION_MESSAGE, LAST_FIELD_TAIL, NEXT_FIELD_TAIL


logger = logging.getLogger(__name__)

SessionState = Literal["idle", "active", "complete"]
AppendTurn = Callable[[str, str], "str | None"]

LONG_FIELD_KEYWORDS = ("description", "measurements")


def acknowledgment_message(
    field_name: str,
    value: str,
    current_index: int,
    total_fields: int,
    skipped: bool,
) -> str:
    remaining_fields = total_fields - current_index - 1
    tail = NEXT_FIELD_TAIL if remaining_fields > 0 else LAST_FIELD_TAIL

    if skipped:
        return f"No problem, I've marked {field_name} as not provided. {tail}"

    lowered = field_name.lower()
    if "brand" in lowered:
        return f'Thank you for providing the brand name "{value}". {tail}'
    if "designer" in lowered:
        return f'Got it, the designer is "{value}". {tail}'
    if "description" in lowered:
        return f"Thank you for the description. {tail}"
    if "measurements" in lowered:
        return f"I've updated the measurements as provided. {tail}"
    return f"Thank you for providing the {lowered}. {tail}"


class FieldSession:
    def __init__(
        self,
        context: ArtifactContext,
        append: AppendTurn,
        saver: DocumentSaver | None = None,
        fields: list[str] | None = None,
    ):
        self.context = context
        self._append = append
        self.saver = saver
        self.fields: list[str] = []
        self.current_field_index = 0
        self.is_complete = False
        self.completion_message_sent = False
        self.turns: list[DialogueTurn] = []
        if fields:
            self.load_fields(fields)

    def load_fields(self, fields: list[str]) -> None:
        # An empty list never replaces a loaded one.
        if fields:
            self.fields = list(fields)

    def sync_from_metadata(self) -> None:
        self.load_fields(self.context.get_metadata().get("fields_needing_input") or [])

    @property
    def state(self) -> SessionState:
        if not self.fields:
            return "idle"
        if self.current_field_index < len(self.fields):
            return "active"
        return "complete"

    @property
    def should_render(self) -> bool:
        return bool(self.fields) and not self.is_complete

    @property
    def current_field(self) -> str | None:
        if self.current_field_index < len(self.fields):
            return self.fields[self.current_field_index]
        return None

    @property
    def is_long_field(self) -> bool:
        field_name = (self.current_field or "").lower()
        return any(keyword in field_name for keyword in LONG_FIELD_KEYWORDS)

    @property
    def prompt_label(self) -> str:
        return f"Field {self.current_field_index + 1} of {len(self.fields)}: {self.current_field}"

    def submit(self, value: str) -> bool:
        value = (value or "").strip()
        if self.current_field_index >= len(self.fields) or not value:
            return False

        field_name = self.fields[self.current_field_index]
        self._update_content(field_name, value)

        acknowledgment = acknowledgment_message(
            field_name, value, self.current_field_index, len(self.fields), skipped=False
        )
        self._append_turn(ROLE_USER, f"For {field_name}: {value}\n\n**AI Response:** {acknowledgment}")

        self.current_field_index += 1
        self.check_completion()
        return True

    def skip(self) -> bool:
        if self.current_field_index >= len(self.fields):
            return False

        field_name = self.fields[self.current_field_index]
        self._update_content(field_name, not_provided_marker(field_name))

        acknowledgment = acknowledgment_message(
            field_name, "", self.current_field_index, len(self.fields), skipped=True
        )
        self._append_turn(
            ROLE_USER,
            f"I'd like to skip providing the {field_name} for now.\n\n**AI Response:** {acknowledgment}",
        )

        self.current_field_index += 1
        self.check_completion()
        return True

    def check_completion(self) -> bool:
        """Fire the closing turn the first time the cursor reaches the end; later calls are no-ops."""
        if (
            self.fields
            and self.current_field_index >= len(self.fields)
            and not self.completion_message_sent
        ):
            self.is_complete = True
            self.completion_message_sent = True
            self._append_turn(ROLE_USER, COMPLETION_MESSAGE)
            logger.info("All %s fields have been filled", len(self.fields))
            return True
        return False

    def _append_turn(self, role: str, content: str) -> None:
        self.turns.append(DialogueTurn(role=role, content=content))
        self._append(role, content)

    def _update_content(self, field_name: str, value: str) -> None:
        artifact = self.context.get_artifact()
        if not artifact.content:
            return

        logger.info("Updating field: %s", field_name)
        updated_content, _ = replace_placeholder(artifact.content, field_name, value)

        artifact = self.context.set_artifact(lambda a: a.with_changes(content=updated_content))
        self.context.record_snapshot(updated_content)

        if self.saver is None or not self.context.owner_id:
            return
        self.saver.save_in_background(
            document_id=artifact.document_id,
            title=artifact.title,
            content=updated_content,
            kind=artifact.kind,
            owner_id=self.context.owner_id,
        )
