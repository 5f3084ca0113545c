from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StreamPart:
    type: str
    content: Any = ""


@dataclass(frozen=True)
class DialogueTurn:
    role: str
    content: str


@dataclass
class Attachment:
    url: str
    name: str | None = None
    content_type: str | None = None


@dataclass
class DocumentBlock:
    tag: str
    text: str = ""
    items: list[str] = field(default_factory=list)
    src: str | None = None

    @property
    def is_heading(self) -> bool:
        return self.tag in {"h1", "h2", "h3", "h4", "h5", "h6"}

    @property
    def is_list(self) -> bool:
        return self.tag in {"ul", "ol"}
