from __future__ import annotations

import argparse
import base64
import json
import logging
import mimetypes
import re
import sys
import uuid
from datetime import datetime
from pathlib import Path

if __package__ in {None, ""}:
    # Allow running as a script: `python techpack/run.py` from repo root or from `techpack/`.
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from document_store.conversation import ConversationLog
from document_store.records import ROLE_ASSISTANT, ROLE_USER
from document_store.saver import DocumentSaver
from document_store.storage_sqlite import SQLiteStore
from techpack import config
from techpack.artifacts import ArtifactContext
from techpack.data_stream import DataStream, DataStreamHandler
from techpack.field_session import FieldSession
from techpack.generator import TechPackGenerator
from techpack.html_renderer import export_tech_pack
from techpack.models import Attachment
from techpack.schema import ToolErrorModel


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

SKIP_COMMAND = "/skip"
QUIT_COMMAND = "/quit"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a tech pack from a garment image and fill in its fields.")
    parser.add_argument("image", help="Path or URL of the garment image")
    parser.add_argument("--title", default=config.DEFAULT_TITLE)
    parser.add_argument("--owner-id", default="local-user")
    parser.add_argument("--chat-id", default=None)
    parser.add_argument("--sqlite-db", default=config.SQLITE_DB_PATH)
    return parser.parse_args()


def load_attachment(image: str) -> Attachment:
    if image.startswith(("http://", "https://", "data:")):
        content_type = mimetypes.guess_type(image)[0] or "image/jpeg"
        return Attachment(url=image, name=Path(image).name or None, content_type=content_type)

    path = Path(image)
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")

    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return Attachment(url=f"data:{content_type};base64,{encoded}", name=path.name, content_type=content_type)


def sanitize_filename_base(file_name: str) -> str:
    base = Path(file_name).stem
    base = re.sub(r"[^A-Za-z0-9]+", "_", base)
    base = re.sub(r"_+", "_", base).strip("_")
    return base or "document"


def build_output_paths(file_name: str, now: datetime) -> tuple[Path, Path]:
    config.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    safe_base = sanitize_filename_base(file_name)
    timestamp = now.strftime("%Y%m%d_%H%M%S")
    json_path = config.OUTPUT_DIR / f"{safe_base}__{timestamp}.json"
    html_path = config.OUTPUT_DIR / f"{safe_base}__{timestamp}.html"
    return json_path, html_path


def fill_fields(session: FieldSession) -> None:
    while session.state == "active":
        hint = " (multi-line, finish with an empty line)" if session.is_long_field else ""
        print(f"\n{session.prompt_label}{hint}")
        print(f"Type {SKIP_COMMAND} to skip or {QUIT_COMMAND} to stop.")

        if session.is_long_field:
            lines = []
            while True:
                line = input("> ")
                if not line.strip():
                    break
                lines.append(line)
            value = "\n".join(lines)
        else:
            value = input("> ")

        command = value.strip().lower()
        if command == QUIT_COMMAND:
            logger.info("Field completion stopped at field %s", session.current_field_index + 1)
            return
        if command == SKIP_COMMAND:
            session.skip()
        elif not session.submit(value):
            print("Please enter a value or skip this field.")


def main() -> None:
    args = parse_args()

    logger.info("Stage 1/5: Opening document store")
    store = SQLiteStore(args.sqlite_db)
    store.ensure_schema()
    saver = DocumentSaver(store)
    chat = ConversationLog(store, chat_id=args.chat_id or str(uuid.uuid4()))
    for message in chat.ensure_welcome():
        print(f"[{message.role}] {message.content}")

    logger.info("Stage 2/5: Loading image attachment")
    attachment = load_attachment(args.image)
    logger.info("Selected image: %s (%s)", attachment.name, attachment.content_type)
    chat.append(ROLE_USER, "Please run the analyzeImage tool")

    logger.info("Stage 3/5: Generating tech pack draft")
    context = ArtifactContext(owner_id=args.owner_id)
    data_stream = DataStream()
    data_stream.subscribe(DataStreamHandler(context))
    generator = TechPackGenerator(data_stream=data_stream, saver=saver)
    result = generator.analyze_image_sync([attachment], title=args.title, owner_id=args.owner_id)

    if isinstance(result, ToolErrorModel):
        chat.append(ROLE_ASSISTANT, result.error)
        saver.close()
        raise RuntimeError(result.error)

    chat.append(ROLE_ASSISTANT, result.content)
    print(f"\n{context.get_artifact().content}\n")
    print(result.content)

    logger.info("Stage 4/5: Filling %s fields", len(result.fields_needing_input))
    session = FieldSession(context, append=chat.append, saver=saver)
    session.sync_from_metadata()
    fill_fields(session)

    logger.info("Stage 5/5: Exporting cover sheet")
    export = export_tech_pack(context.get_artifact().content)
    json_path, html_path = build_output_paths(export.filename, datetime.now())
    json_path.write_text(export.record.model_dump_json(indent=2), encoding="utf-8")
    html_path.write_text(export.html, encoding="utf-8")
    logger.info("Wrote JSON output: %s", json_path)
    logger.info("Wrote HTML output: %s", html_path)

    saver.close()
    print(
        json.dumps(
            {
                "document_id": result.id,
                "chat_id": chat.chat_id,
                "versions": len(context.versions),
                "is_complete": session.is_complete,
                "json_output": str(json_path),
                "html_output": str(html_path),
            },
            indent=2,
        )
    )
    logger.info("Tech pack run complete")


if __name__ == "__main__":
    main()
