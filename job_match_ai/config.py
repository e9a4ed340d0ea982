"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env

# API keys – never hardcode
ADZUNA_APP_ID: str = os.getenv("ADZUNA_APP_ID", "")
ADZUNA_APP_KEY: str = os.getenv("ADZUNA_APP_KEY", "")
HUGGINGFACE_API_KEY: str = os.getenv("HUGGINGFACE_API_KEY", "")
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")

# Job index (Adzuna)
ADZUNA_COUNTRY: str = os.getenv("ADZUNA_COUNTRY", "us")
ADZUNA_API_BASE: str = "https://api.adzuna.com/v1/api/jobs"
JOB_SEARCH_LOCATION: str = os.getenv("JOB_SEARCH_LOCATION", "remote")
PAGE_SIZE: int = 10  # A page shorter than this means end of results

# HTTP / fetch settings
HTTP_TIMEOUT_SECONDS: float = 30.0
HTTP_MAX_RETRIES: int = 3

# Resume upload
MAX_UPLOAD_BYTES: int = 1024 * 1024
ALLOWED_CONTENT_TYPES: frozenset = frozenset({"text/plain", "application/pdf"})
MAX_KEYWORDS: int = 15

# Search input coalescing
SEARCH_DEBOUNCE_SECONDS: float = 0.3

# Embeddings
EMBEDDING_PROVIDER: str = os.getenv("EMBEDDING_PROVIDER", "sentence_transformers")
SENTENCE_TRANSFORMERS_MODEL: str = os.getenv("SENTENCE_TRANSFORMERS_MODEL", "all-MiniLM-L6-v2")
OPENAI_EMBEDDING_MODEL: str = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")

# Text generation (chat advice)
TEXT_GENERATION_PROVIDER: str = os.getenv("TEXT_GENERATION_PROVIDER", "huggingface")
TEXT_GENERATION_MODEL: str = os.getenv("TEXT_GENERATION_MODEL", "gpt2")
HUGGINGFACE_INFERENCE_BASE: str = "https://api-inference.huggingface.co/models"
GENERATION_MAX_NEW_TOKENS: int = 150
GENERATION_TEMPERATURE: float = 0.7
GENERATION_TOP_P: float = 0.95
GENERATION_REPETITION_PENALTY: float = 1.2

# Persisted state: single durable key/value slot for resume keywords
KEYWORD_STORE_PATH: Path = Path(
    os.getenv("KEYWORD_STORE_PATH", str(_base.parent / "data" / "session_store.json"))
)
RESUME_KEYWORDS_KEY: str = "resumeKeywords"
