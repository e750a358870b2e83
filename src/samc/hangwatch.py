"""faulthandler integration for diagnosing blocked reader loops.

Nothing in samc times out: every loop blocks on an acme file or the MPD
socket. Sending ``SIGUSR1`` dumps all thread stacks to ``hangdump.log``.
"""

from __future__ import annotations

from datetime import datetime
import faulthandler
import logging
import signal
import threading
from pathlib import Path
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

_dump_file: Optional[TextIO] = None
_lock = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Send fatal-error and on-demand dumps to ``hangdump.log`` beside the log."""
    global _dump_file
    dump_path = log_path.with_name("hangdump.log")
    try:
        dump_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(dump_path, "a", encoding="utf-8")
    except OSError as exc:
        logger.warning("Thread dumps disabled, cannot open %s: %s", dump_path, exc)
        return dump_path
    faulthandler.enable(file=handle, all_threads=True)
    register_dump_signal(handle)
    with _lock:
        previous, _dump_file = _dump_file, handle
    if previous is not None:
        previous.close()
    return dump_path


def register_dump_signal(handle: TextIO) -> bool:
    """Dump every thread to ``handle`` on SIGUSR1, where the platform has it."""
    signum = getattr(signal, "SIGUSR1", None)
    if signum is None or not hasattr(faulthandler, "register"):
        return False
    faulthandler.register(signum, file=handle, all_threads=True, chain=False)
    return True


def dump_threads(label: str) -> None:
    """Append a labelled stack dump of every thread, if dumps are enabled."""
    with _lock:
        handle = _dump_file
        if handle is None:
            return
        stamp = datetime.now().isoformat(sep=" ", timespec="seconds")
        try:
            handle.write(f"\n[{stamp}] {label}\n")
            handle.flush()
            faulthandler.dump_traceback(file=handle, all_threads=True)
            handle.flush()
        except (OSError, ValueError):
            logger.debug("Thread dump for %r failed", label, exc_info=True)
