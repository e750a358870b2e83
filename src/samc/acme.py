"""Access to acme windows through its file server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "/mnt/acme"


class AcmeFS:
    """The mounted acme file tree."""

    def __init__(self, root: Path | str = DEFAULT_ROOT) -> None:
        self.root = Path(root)

    def new_window(self) -> "Window":
        """Create a window; reading ``new/ctl`` makes acme allocate it."""
        ctl = (self.root / "new" / "ctl").read_text(encoding="utf-8")
        fields = ctl.split()
        if not fields:
            raise OSError(f"empty ctl line from {self.root / 'new' / 'ctl'}")
        try:
            win_id = int(fields[0])
        except ValueError as exc:
            raise OSError(f"unexpected ctl line: {ctl.strip()!r}") from exc
        logger.debug("Created window %s", win_id)
        return Window(self, win_id)

    def window(self, win_id: int) -> "Window":
        return Window(self, win_id)


class Window:
    """One acme window, addressed by id."""

    def __init__(self, fs: AcmeFS, win_id: int) -> None:
        self.fs = fs
        self.id = win_id
        self._body: Optional[TextIO] = None

    def __repr__(self) -> str:
        return f"Window({self.id})"

    def file(self, name: str) -> Path:
        return self.fs.root / str(self.id) / name

    def _append(self, name: str, text: str) -> None:
        with open(self.file(name), "a", encoding="utf-8") as handle:
            handle.write(text)

    def ctl(self, message: str) -> None:
        """Send one control message."""
        self._append("ctl", message + "\n")

    def set_name(self, name: str) -> None:
        self.ctl(f"name {name}")

    def write_tag(self, tags: str) -> None:
        self._append("tag", tags)

    def delete(self) -> None:
        self.close()
        self.ctl("delete")

    def body_length(self) -> int:
        """Return the body length in runes, as reported by ``ctl``."""
        line = self.file("ctl").read_text(encoding="utf-8")
        fields = line.split()
        try:
            return int(fields[2])
        except (IndexError, ValueError) as exc:
            raise OSError(f"unexpected ctl line: {line.strip()!r}") from exc

    def open_body(self) -> TextIO:
        return open(self.file("body"), "a", encoding="utf-8")

    def write_body(self, text: str) -> None:
        """Append to the body; acme treats ``\\b`` as erasing one rune."""
        if self._body is None:
            self._body = self.open_body()
        self._body.write(text)
        self._body.flush()

    def erase_body(self, count: int) -> None:
        if count > 0:
            self.write_body("\b" * count)

    def clear_body(self) -> None:
        self.erase_body(self.body_length())

    def open_events(self) -> TextIO:
        return open(
            self.file("event"), "r", encoding="utf-8", errors="replace", newline=""
        )

    def close(self) -> None:
        body, self._body = self._body, None
        if body is not None:
            try:
                body.close()
            except OSError:
                logger.debug("Closing body of %s failed", self, exc_info=True)
