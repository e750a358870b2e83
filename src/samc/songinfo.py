"""The external song-information helper and its output window."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Any, Callable, Optional

from samc.acme import AcmeFS
from samc.ui.reporter import Reporter

logger = logging.getLogger(__name__)

INFO_WINDOW_NAME = "/tmp/songinfo"
INFO_WINDOW_TAGS = "Delete"


class InfoLauncher:
    """Runs ``command <path>`` with its stdout going into a fresh window."""

    def __init__(
        self,
        fs: AcmeFS,
        command: str,
        reporter: Reporter,
        *,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self._fs = fs
        self._command = command
        self._reporter = reporter
        self._popen = popen

    def launch(self, path: str) -> Optional[threading.Thread]:
        """Start the helper; return the thread waiting for it, or None."""
        try:
            window = self._fs.new_window()
            window.set_name(INFO_WINDOW_NAME)
            window.write_tag(INFO_WINDOW_TAGS)
            body = window.open_body()
        except OSError as exc:
            self._reporter.warn(f"cannot open an info window: {exc}")
            return None
        try:
            process = self._popen(
                [self._command, path], stdin=subprocess.DEVNULL, stdout=body
            )
        except OSError as exc:
            body.close()
            self._reporter.error(f"cannot run {self._command}: {exc}")
            return None
        logger.info("Started %s for %s", self._command, path)
        waiter = threading.Thread(
            target=self._wait, args=(process, body), name="songinfo", daemon=True
        )
        waiter.start()
        return waiter

    @staticmethod
    def _wait(process: Any, body: Any) -> None:
        try:
            process.wait()
        finally:
            body.close()
