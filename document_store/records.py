from dataclasses import dataclass
from typing import Literal


SCHEMA_VERSION = "1.0"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
MessageRole = Literal["user", "assistant", "system"]


@dataclass
class DocumentRecord:
    document_id: str
    title: str
    kind: str
    content: str
    owner_id: str
    created_at: str


@dataclass
class MessageRecord:
    message_id: str
    chat_id: str
    role: MessageRole
    content: str
    created_at: str
