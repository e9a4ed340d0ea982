"""Durable key/value slot for resume keywords (JSON file)."""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence

from job_match_ai.config import KEYWORD_STORE_PATH, RESUME_KEYWORDS_KEY
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


class KeywordStore:
    """
    Holds one key (resumeKeywords) as a JSON array of strings.
    Read once at session start, written once per successful resume analysis.
    """

    def __init__(self, path: Optional[Path] = None, key: str = RESUME_KEYWORDS_KEY) -> None:
        self._path = Path(path) if path is not None else KEYWORD_STORE_PATH
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Keyword store %s unreadable, ignoring: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> List[str]:
        """Persisted keywords, or [] when nothing valid is stored."""
        value = self._read_all().get(self._key)
        if not isinstance(value, list):
            return []
        return [str(v) for v in value if isinstance(v, str)]

    def save(self, keywords: Sequence[str]) -> None:
        data = self._read_all()
        data[self._key] = list(keywords)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".keywords-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self._path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.info("Persisted %s resume keywords to %s", len(keywords), self._path.name)
