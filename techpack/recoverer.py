"""
Recover the cover-sheet attributes and bill of materials from a finished,
free-form tech pack.

The document is first reduced to a flat sequence of sibling blocks
(headings, paragraphs, lists). Three tiers then run in order, a later tier
only overriding an attribute when it finds a non-empty value:

1. "Key: Value" lines inside paragraphs (last match wins).
2. A heading followed by a non-heading sibling.
3. Bill of materials rows under a materials heading, falling back to any
   list introduced by material/fabric/BOM text, then to unresolved
   {{BOM Item n}} placeholders.
"""
from __future__ import annotations

import logging
import re
from datetime import date

from bs4 import BeautifulSoup, Tag

from techpack import config
from techpack.models import DocumentBlock
from techpack.schema import BomRowModel, TechPackInfoModel, TechPackRecordModel


logger = logging.getLogger(__name__)

KEY_VALUE_PATTERN = re.compile(r"^([^:]+):\s*(.+)$")
BOM_PLACEHOLDER_PATTERN = re.compile(r"\{\{(BOM Item \d+)\}\}")
BOM_HEADING_KEYWORDS = ("bill of materials", "materials", "bom")
BOM_LIST_HINTS = ("material", "fabric", "bom")
BOM_SKIP_PHRASES = ("bill of materials", "list each material", "fill in the")
BOM_FIELD_COUNT = 6

MD_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
MD_BULLET = re.compile(r"^\s*[-*+]\s+(.*)$")
MD_NUMBERED = re.compile(r"^\s*\d+[.)]\s+(.*)$")
MD_IMAGE = re.compile(r"^!\[([^\]]*)\]\(([^)\s]+)[^)]*\)\s*$")

INLINE_MARKUP = (
    (re.compile(r"!?\[([^\]]*)\]\([^)]*\)"), r"\1"),
    (re.compile(r"`([^`]*)`"), r"\1"),
    (re.compile(r"(\*\*|__)(.+?)\1"), r"\2"),
    (re.compile(r"~~(.+?)~~"), r"\1"),
    (re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])"), r"\1"),
    (re.compile(r"(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)"), r"\1"),
)


def canonical_key(label: str) -> str | None:
    """Map a lower-cased label to its canonical attribute, first match wins."""
    if "brand" in label:
        return "brand"
    if "designer" in label:
        return "designer"
    if "description" in label:
        return "description"
    if "season" in label:
        return "season"
    if "fabric" in label and "materials" not in label:
        return "main_fabric"
    if "style name" in label:
        return "style_name"
    if "style number" in label or "style #" in label:
        return "style_number"
    if "size" in label:
        return "size_range"
    return None


def strip_inline_markup(text: str) -> str:
    for pattern, replacement in INLINE_MARKUP:
        text = pattern.sub(replacement, text)
    return text


def split_bom_line(text: str) -> list[str]:
    delimiter = ";" if ";" in text else ","
    parts = [part.strip() for part in text.split(delimiter)]
    parts = parts[:BOM_FIELD_COUNT]
    return parts + [""] * (BOM_FIELD_COUNT - len(parts))


def blocks_from_html(html: str) -> list[DocumentBlock]:
    soup = BeautifulSoup(html or "", "html.parser")
    # Line breaks inside a block separate "Key: Value" lines.
    for line_break in soup.find_all("br"):
        line_break.replace_with("\n")
    root = soup.body or soup
    children = [child for child in root.children if isinstance(child, Tag)]
    # Editor output is usually wrapped in a single container element.
    while len(children) == 1 and children[0].name in {"div", "article", "section", "main"}:
        children = [child for child in children[0].children if isinstance(child, Tag)]

    blocks: list[DocumentBlock] = []
    for element in children:
        image = element if element.name == "img" else element.find("img")
        src = image.get("src") if image is not None else None
        if element.name in {"ul", "ol"}:
            items = [li.get_text().strip() for li in element.find_all("li")]
            blocks.append(DocumentBlock(tag=element.name, text="\n".join(items), items=items, src=src))
        else:
            blocks.append(DocumentBlock(tag=element.name, text=element.get_text().strip(), src=src))
    return blocks


def blocks_from_markdown(text: str) -> list[DocumentBlock]:
    blocks: list[DocumentBlock] = []
    paragraph: list[str] = []
    current_list: DocumentBlock | None = None

    def flush() -> None:
        nonlocal current_list
        if paragraph:
            blocks.append(DocumentBlock(tag="p", text="\n".join(paragraph).strip()))
            paragraph.clear()
        if current_list is not None:
            current_list.text = "\n".join(current_list.items)
            blocks.append(current_list)
            current_list = None

    for raw_line in (text or "").splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            flush()
            continue

        if heading := MD_HEADING.match(line):
            flush()
            heading_text = strip_inline_markup(heading.group(2).strip())
            blocks.append(DocumentBlock(tag=f"h{len(heading.group(1))}", text=heading_text))
            continue

        if image := MD_IMAGE.match(line.strip()):
            flush()
            blocks.append(DocumentBlock(tag="p", text="", src=image.group(2)))
            continue

        bullet = MD_BULLET.match(line)
        numbered = MD_NUMBERED.match(line)
        if bullet or numbered:
            tag = "ul" if bullet else "ol"
            item = strip_inline_markup((bullet or numbered).group(1).strip())
            if paragraph or (current_list is not None and current_list.tag != tag):
                flush()
            if current_list is None:
                current_list = DocumentBlock(tag=tag)
            current_list.items.append(item)
            continue

        if current_list is not None and raw_line[:1].isspace():
            current_list.items[-1] = f"{current_list.items[-1]} {strip_inline_markup(line.strip())}"
            continue

        if current_list is not None:
            flush()
        paragraph.append(strip_inline_markup(line.strip()))

    flush()
    return blocks


class TechPackRecoverer:
    def __init__(self, defaults: dict[str, str] | None = None, today: date | None = None):
        self.defaults = dict(defaults or {})
        self.today = today or date.today()

    def recover_from_markdown(self, text: str) -> TechPackRecordModel:
        return self.recover(blocks_from_markdown(text), raw_text=text)

    def recover_from_html(self, html: str) -> TechPackRecordModel:
        blocks = blocks_from_html(html)
        return self.recover(blocks, raw_text=BeautifulSoup(html or "", "html.parser").get_text("\n"))

    def recover(self, blocks: list[DocumentBlock], raw_text: str = "") -> TechPackRecordModel:
        info = {
            **TechPackInfoModel(date=self.today.strftime("%Y.%m.%d")).model_dump(),
            **self.defaults,
        }

        self._scan_key_value_lines(blocks, info)
        self._scan_headings(blocks, info)
        bom_items = self._recover_bill_of_materials(blocks, raw_text)

        title = next((b.text for b in blocks if b.tag == "h1" and b.text), "Document")
        sketch = next((b.src for b in blocks if b.src), None)

        return TechPackRecordModel(
            document_title=title,
            info=TechPackInfoModel(**info),
            bom_items=bom_items,
            sketch_image_url=sketch,
        )

    def _scan_key_value_lines(self, blocks: list[DocumentBlock], info: dict[str, str]) -> None:
        for block in blocks:
            if block.tag != "p":
                continue
            for line in block.text.splitlines():
                match = KEY_VALUE_PATTERN.match(line.strip())
                if not match:
                    continue
                key = canonical_key(match.group(1).strip().lower())
                if key is not None:
                    info[key] = match.group(2).strip()

    def _scan_headings(self, blocks: list[DocumentBlock], info: dict[str, str]) -> None:
        for idx, block in enumerate(blocks):
            if not block.is_heading:
                continue
            following = blocks[idx + 1] if idx + 1 < len(blocks) else None
            if following is not None and following.is_heading:
                continue

            value = following.text.strip() if following is not None else ""
            key = canonical_key(block.text.strip().lower())
            if key is not None:
                info[key] = value or info[key]

    def _recover_bill_of_materials(self, blocks: list[DocumentBlock], raw_text: str) -> list[BomRowModel]:
        rows: list[list[str]] = []
        placeholders: list[str] = []

        bom_idx = next(
            (
                idx
                for idx, block in enumerate(blocks)
                if block.is_heading and any(k in block.text.lower() for k in BOM_HEADING_KEYWORDS)
            ),
            None,
        )

        if bom_idx is not None:
            for block in blocks[bom_idx + 1:]:
                if block.is_heading:
                    break
                if block.is_list:
                    rows.extend(split_bom_line(item) for item in block.items[: config.BOM_MAX_ROWS])
                    break
                if block.tag == "p":
                    for line in block.text.splitlines():
                        line = line.strip()
                        if not line or any(p in line.lower() for p in BOM_SKIP_PHRASES):
                            continue
                        parts = [part.strip() for part in line.split(";" if ";" in line else ",")]
                        if len(parts) >= 2:
                            rows.append(split_bom_line(line))

        if not rows:
            for idx, block in enumerate(blocks):
                if not block.is_list:
                    continue
                previous_text = blocks[idx - 1].text.lower() if idx > 0 else ""
                if any(hint in previous_text for hint in BOM_LIST_HINTS):
                    rows.extend(split_bom_line(item) for item in block.items[: config.BOM_MAX_ROWS])

        if not rows:
            for name in BOM_PLACEHOLDER_PATTERN.findall(raw_text or ""):
                if name not in placeholders:
                    placeholders.append(name)
            if placeholders:
                logger.info("Bill of materials still unresolved: %s", ", ".join(placeholders))
            return [
                BomRowModel(label=label, source_placeholder=name)
                for label, name in zip(config.BOM_ROW_LABELS, placeholders[: config.BOM_MAX_ROWS])
            ]

        return [
            BomRowModel(
                label=label,
                item=parts[0],
                description=parts[1],
                color=parts[2],
                code=parts[3],
                quantity=parts[4],
                supplier=parts[5],
            )
            for label, parts in zip(config.BOM_ROW_LABELS, rows[: config.BOM_MAX_ROWS])
        ]


def recover_tech_pack(content: str, defaults: dict[str, str] | None = None) -> TechPackRecordModel:
    return TechPackRecoverer(defaults=defaults).recover_from_markdown(content)
