"""JSON file storage for stage sessions.

All state is stored in flat JSON files under a configurable base directory.
There is no database or ORM — reads and writes go through plain helper
methods that load and dump JSON.

Directory layout:

    {base}/
      sessions/
        {session_id}.json       ← session metadata: title, bot name, stage config
        {session_id}/
          state.json            ← TurnState, rewritten after every eligible turn
          messages.json         ← append-only log of incoming messages
"""

from __future__ import annotations

import json
import re
import shutil
import unicodedata
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from portrait_stage.models import IncomingMessage, StageConfig, TurnState


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "Guild Hall Demo" → "guild-hall-demo"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "session"


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._sessions_root = base_path / "sessions"
        self._sessions_root.mkdir(parents=True, exist_ok=True)

    @property
    def sessions_dir(self) -> Path:
        return self._sessions_root

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _session_file(self, session_id: str) -> Path:
        return self._sessions_root / f"{session_id}.json"

    def _session_dir(self, session_id: str) -> Path:
        return self._sessions_root / session_id

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text())

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2))

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(
        self,
        session_id: str,
        config: StageConfig,
        title: str = "",
        bot_name: str = "",
    ) -> dict[str, Any]:
        """Create a session. Raises FileExistsError if the id is already taken."""
        session_id = slugify(session_id)
        if self._session_file(session_id).exists():
            raise FileExistsError(f"Session {session_id!r} already exists")
        meta = {
            "session_id": session_id,
            "title": title or session_id,
            "bot_name": bot_name,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "config": config.model_dump(by_alias=True),
        }
        self._write_json(self._session_file(session_id), meta)
        self._session_dir(session_id).mkdir(exist_ok=True)
        return meta

    def get_session(self, session_id: str) -> dict[str, Any] | None:
        path = self._session_file(session_id)
        if not path.is_file():
            return None
        return self._read_json(path)

    def list_sessions(self) -> list[dict[str, Any]]:
        """All sessions, oldest first."""
        sessions = [self._read_json(p) for p in self._sessions_root.glob("*.json")]
        return sorted(sessions, key=lambda s: s.get("created_at", ""))

    def delete_session(self, session_id: str) -> bool:
        path = self._session_file(session_id)
        if not path.is_file():
            return False
        path.unlink()
        if self._session_dir(session_id).is_dir():
            shutil.rmtree(self._session_dir(session_id))
        return True

    # ------------------------------------------------------------------
    # Turn state
    # ------------------------------------------------------------------

    def get_state(self, session_id: str) -> TurnState | None:
        path = self._session_dir(session_id) / "state.json"
        if not path.is_file():
            return None
        return TurnState.model_validate(self._read_json(path))

    def save_state(self, session_id: str, state: TurnState) -> None:
        path = self._session_dir(session_id) / "state.json"
        path.write_text(state.model_dump_json(by_alias=True, indent=2))

    # ------------------------------------------------------------------
    # Messages (append-only)
    # ------------------------------------------------------------------

    def get_messages(self, session_id: str) -> list[IncomingMessage]:
        path = self._session_dir(session_id) / "messages.json"
        if not path.is_file():
            return []
        return [IncomingMessage.model_validate(m) for m in self._read_json(path)]

    def append_message(self, session_id: str, message: IncomingMessage) -> None:
        existing = self.get_messages(session_id)
        existing.append(message)
        self._write_json(
            self._session_dir(session_id) / "messages.json",
            [m.model_dump(by_alias=True, exclude_none=True) for m in existing],
        )
