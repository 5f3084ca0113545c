from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent
SQLITE_DB_PATH = str(BASE_DIR / "document_store" / "techpacks.db")
OUTPUT_DIR = BASE_DIR / "techpack" / "output"

GENERATION_MODEL = "gpt-4o"
DEFAULT_TITLE = "Clothing Tech Pack Analysis"
DEFAULT_ARTIFACT_KIND = "text"

# Partial draft is revealed once its length falls strictly inside this window.
VISIBILITY_MIN_LENGTH = 400
VISIBILITY_MAX_LENGTH = 450

BOM_MAX_ROWS = 11
BOM_ROW_LABELS = "ABCDEFGHIJK"
