from typing import Literal

from pydantic import BaseModel, Field


class DocumentRecordModel(BaseModel):
    document_id: str = Field(min_length=1)
    title: str
    kind: str = Field(min_length=1)
    content: str
    owner_id: str = Field(min_length=1)
    created_at: str


class MessageRecordModel(BaseModel):
    message_id: str = Field(min_length=1)
    chat_id: str = Field(min_length=1)
    role: Literal["user", "assistant", "system"]
    content: str
    created_at: str
