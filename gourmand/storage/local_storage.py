"""File-backed key/value store with the browser localStorage contract.

Keys and values are strings; callers serialize their own JSON into values.
The whole store is one JSON object on disk, rewritten on every change.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from gourmand.utils.errors import safe_execute_sync
from gourmand.utils.logger import logger


def safe_json_parse(json_string: Optional[str], initial_value: Any) -> Any:
    """Parse JSON, returning initial_value if the string is empty or invalid."""
    if not json_string:
        return initial_value
    try:
        return json.loads(json_string)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Stored value is not valid JSON, using initial value")
        return initial_value


class LocalStorage:
    """Persist string items under string keys in a JSON file."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        raw = safe_execute_sync(
            lambda: self.path.read_text(encoding="utf-8"),
            f"Read storage file {self.path}",
            log_level="warning",
            default_return="",
        )
        data = safe_json_parse(raw, {})
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed storage file: {self.path}")
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear(self) -> None:
        self._write({})
