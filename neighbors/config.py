import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# Paths
INPUT_DIR = Path(os.getenv("NEIGHBORS_INPUT_DIR", str(_PROJECT_ROOT / "input")))
REGISTER_NAME = os.getenv("NEIGHBORS_REGISTER", "register.xlsx")
TEMPLATE_NAME = os.getenv("NEIGHBORS_TEMPLATE", "template.docx")
OUTPUT_PATTERN = "output_{start}_{end}_{timestamp}.docx"

# Register layout (1-based spreadsheet columns)
FIRST_DATA_ROW = int(os.getenv("NEIGHBORS_FIRST_DATA_ROW", "2"))
ID_COLUMN = 1
FLAT_COLUMN = 1
AREA_COLUMN = 3
BASIS_COLUMN = 4
NAME_COLUMN = 5
SHARE_COLUMN = 6

# Register content
SKIP_MARKER = os.getenv("NEIGHBORS_SKIP_MARKER", "данные о правообладателе отсутствуют")
SPLIT_SEPARATOR = os.getenv("NEIGHBORS_SPLIT_SEPARATOR", "/")

# Shares divided across co-owners: "even" or "exact"
SHARE_SPLIT = os.getenv("NEIGHBORS_SHARE_SPLIT", "even").strip().lower()
SHARE_PLACES = int(os.getenv("NEIGHBORS_SHARE_PLACES", "6"))

# Template
NAME_ANCHOR = "_" * 82
DATA_ROW_INDEX = int(os.getenv("NEIGHBORS_DATA_ROW_INDEX", "2"))

# Batching
BATCH_SIZE = int(os.getenv("NEIGHBORS_BATCH_SIZE", "50"))
WORKERS = int(os.getenv("NEIGHBORS_WORKERS", "0")) or (os.cpu_count() or 1) * 2
