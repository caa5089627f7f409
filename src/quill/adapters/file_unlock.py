"""File-based unlock marker adapter."""

from pathlib import Path

from quill.config import UNLOCK_FILE


class FileUnlockStore:
    """
    Unlock marker kept in a private file.

    Implements UnlockStore protocol.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path).expanduser() if path else UNLOCK_FILE

    def read(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text().strip() or None

    def write(self, pin: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(pin)
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
