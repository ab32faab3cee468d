from __future__ import annotations
import os
import tempfile
from pathlib import Path

from ssap.log import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """
    Plain-text file holding the client-key the TV issued at pairing.

    A missing or unreadable file means "not paired yet".
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> str:
        if not self.path.exists():
            return ""
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except OSError as e:
            logger.warning("Could not read client key from %s: %s", self.path, e)
            return ""

    def save(self, client_key: str) -> None:
        """Atomically replace the stored key (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=f"{self.path.name}_",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(client_key)
                tmp.flush()
                os.fsync(tmp.fileno())

            # Atomic rename
            os.replace(tmp_path, self.path)
            logger.debug(f"Saved client key to {self.path}")

        except Exception as e:
            logger.error(f"Failed to write {self.path}: {e}")
            # Clean up temp file on error
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
