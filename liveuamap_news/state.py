"""File-backed key-value store for the JSON config document."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Read-modify-write access to a flat key-value document."""

    def read(self, key: Optional[str] = None) -> Any:
        ...

    def write(self, data: Dict[str, Any]) -> None:
        ...


class JsonStateStore:
    """Store backed by a JSON file, re-read on every call."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Config file is not valid JSON: {self.path}") from exc

        if not isinstance(payload, dict):
            raise RuntimeError(f"Config file must contain a JSON object: {self.path}")
        return payload

    def read(self, key: Optional[str] = None) -> Any:
        document = self._load()
        if key is None:
            return document
        return document.get(key)

    def write(self, data: Dict[str, Any]) -> None:
        document = self._load()
        document.update(data)

        # Replace the symlink target, keeping its permissions; readers only
        # ever see a complete document.
        target = self.path.resolve()
        fd, tmp_name = tempfile.mkstemp(
            dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, indent=2, ensure_ascii=False)
            os.chmod(tmp_name, stat.S_IMODE(target.stat().st_mode))
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Wrote keys %s to %s", sorted(data), self.path)
