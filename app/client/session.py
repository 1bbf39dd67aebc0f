from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)


class SessionStore:
    """Token and profile of the signed-in user.

    Kept in memory, and mirrored to a JSON file when `path` is given so a
    session survives restarts.
    """

    def __init__(self, path: Path | None = None):
        self._path = Path(path) if path else None
        self.token: str | None = None
        self.user: dict[str, Any] | None = None
        self._load()

    def _load(self) -> None:
        if not self._path or not self._path.exists():
            return
        try:
            state = json.loads(self._path.read_text())
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self._path)
            return
        self.token = state.get("token")
        self.user = state.get("user")

    def _persist(self) -> None:
        if not self._path:
            return
        if self.token is None and self.user is None:
            self._path.unlink(missing_ok=True)
            return
        self._path.write_text(json.dumps({"token": self.token, "user": self.user}, indent=2))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self._persist()

    def clear_token(self) -> None:
        self.token = None
        self._persist()

    def clear(self) -> None:
        self.token = None
        self.user = None
        self._persist()
