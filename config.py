"""folio configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent / ".env")

# --- Paths ---
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("CMS_DB_PATH", str(DATA_DIR / "folio.db")))

# --- API ---
API_HOST = os.getenv("CMS_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("CMS_API_PORT", "8001"))
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CMS_CORS_ORIGINS", "*").split(",") if o.strip()
]

# --- Articles ---
ARTICLE_STATUSES: tuple[str, ...] = ("draft", "published")
DEFAULT_STATUS = "draft"
UNCATEGORIZED = "Uncategorized"
CATEGORY_KEY_PREFIX = "category-"
RECENT_DAYS: int = 7

# --- Table view ---
PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 20, 50)
DEFAULT_PAGE_SIZE: int = 10

# --- Media library ---
MEDIA_MAX_BYTES: int = 5 * 1024 * 1024
MEDIA_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "video/mp4": "mp4",
    "video/avi": "avi",
    "video/mov": "mov",
    "application/pdf": "pdf",
    "text/plain": "txt",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}
