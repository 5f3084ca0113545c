from __future__ import annotations

import logging

from document_store import records as rec
from document_store.storage_sqlite import SQLiteStore


logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Please upload the image you want to create a tech pack for. After uploading, "
    "type 'Please run the analyzeImage tool' in the same message with the uploaded "
    "image to analyze the clothing item."
)


class ConversationLog:
    def __init__(self, store: SQLiteStore, chat_id: str):
        self.store = store
        self.chat_id = chat_id

    def append(self, role: str, content: str) -> str | None:
        try:
            message = self.store.insert_message(self.chat_id, role, content)
        except Exception:
            logger.exception("Failed to append %s turn to chat_id=%s", role, self.chat_id)
            return None
        return message.message_id

    def messages(self) -> list[rec.MessageRecord]:
        return self.store.get_messages_by_chat_id(self.chat_id)

    def ensure_welcome(self) -> list[rec.MessageRecord]:
        """Seed an empty chat with the upload instructions."""
        existing = self.messages()
        if existing:
            return existing
        self.append(rec.ROLE_ASSISTANT, WELCOME_MESSAGE)
        return self.messages()
