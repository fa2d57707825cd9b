"""Per-session working directories for service layers.

A :class:`SessionStore` is owned by the service layer (upload endpoint,
progress channel) and passed explicitly into the pipeline. Each session gets
its own subdirectory of the store's base directory, so concurrent sessions
never share card files. Destructive operations are confined to that base
directory.

Examples
--------
>>> from pathlib import Path
>>> store = SessionStore(Path("output/sessions"))  # doctest: +SKIP
>>> sid = store.new_session_id()  # doctest: +SKIP
>>> working_dir = store.working_dir(sid)  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import re
import secrets
import shutil
import time
from pathlib import Path

from src.config import SESSIONS_DIR
from src.exceptions import UserInputError

logger = logging.getLogger(__name__)

_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class SessionStore:
    """Map session identifiers to isolated working directories.

    Parameters
    ----------
    base_dir : Path, optional
        Parent of all session directories. Defaults to ``SESSIONS_DIR``.
    """

    def __init__(self, base_dir: Path = SESSIONS_DIR) -> None:
        self.base_dir = Path(base_dir).resolve()
        self._active: dict[str, Path] = {}

    @staticmethod
    def new_session_id() -> str:
        """Return a fresh ``session_<millis>_<random>`` identifier."""
        return f"session_{int(time.time() * 1000)}_{secrets.token_hex(5)}"

    def _session_path(self, session_id: str) -> Path:
        if not _SESSION_ID_PATTERN.match(session_id or ""):
            raise UserInputError(
                f"Invalid session id {session_id!r}", context={"session": session_id}
            )
        return self.base_dir / session_id

    def working_dir(self, session_id: str) -> Path:
        """Create (if needed) and return the session's working directory."""
        path = self._session_path(session_id)
        path.mkdir(parents=True, exist_ok=True)
        self._active[session_id] = path
        return path

    def is_active(self, session_id: str) -> bool:
        return session_id in self._active

    def reset(self, session_id: str) -> Path:
        """Remove everything a previous run left for this session."""
        path = self._session_path(session_id)
        if path.exists():
            logger.warning(f"Clearing session directory: {path}")
            shutil.rmtree(path)
        return self.working_dir(session_id)

    def release(self, session_id: str, remove_files: bool = False) -> None:
        """Forget an active session, optionally deleting its directory."""
        path = self._active.pop(session_id, None)
        if remove_files and path is not None and path.exists():
            shutil.rmtree(path)
            logger.info(f"Removed session directory: {path}")

    def resolve_artifact(self, session_id: str, artifact: Path | str) -> Path:
        """Return an artifact path after checking it belongs to the session.

        Raises
        ------
        UserInputError
            If the path escapes the session directory or does not exist.
        """
        session_dir = self._session_path(session_id).resolve()
        candidate = Path(artifact)
        if not candidate.is_absolute():
            candidate = session_dir / candidate
        resolved = candidate.resolve()
        if not resolved.is_relative_to(session_dir):
            raise UserInputError(
                "Access denied: artifact is outside the session directory",
                context={"session": session_id, "artifact": str(artifact)},
            )
        if not resolved.is_file():
            raise UserInputError(
                f"Artifact not found: {resolved.name}",
                context={"session": session_id, "artifact": str(artifact)},
            )
        return resolved
