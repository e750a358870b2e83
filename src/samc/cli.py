"""Command-line interface for samc."""

from __future__ import annotations

import argparse
import sys
import logging
import threading
from typing import Iterable, Optional, Tuple
from types import TracebackType

from samc.acme import AcmeFS
from samc.app import SamcApp
from samc.config import AppConfig, load_config, resolve_target
from samc.hangwatch import enable_faulthandler, dump_threads
from samc.logging_setup import init_logging, set_console_level
from samc.session import Session
from samc.songinfo import InfoLauncher
from samc.ui.reporter import Reporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="samc", description="acme front-end for the Music Player Daemon"
    )
    parser.add_argument(
        "--acme-root",
        default=None,
        help="Mount point of acme's file server (default from config, /mnt/acme)",
    )
    parser.add_argument(
        "--info-command",
        default=None,
        help="Helper run by Info with the song path (default: songinfo)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print errors to stderr",
    )
    return parser


def _apply_overrides(cfg: AppConfig, args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        acme_root=args.acme_root or cfg.acme_root,
        info_command=args.info_command or cfg.info_command,
    )


def _install_hooks() -> None:
    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))
        dump_threads("uncaught exception")

    sys.excepthook = excepthook

    def thread_hook(args: threading.ExceptHookArgs) -> None:
        exc_value = args.exc_value or RuntimeError("unknown")
        exc_info: Tuple[
            type[BaseException], BaseException, Optional[TracebackType]
        ] = (
            args.exc_type,
            exc_value,
            args.exc_traceback,
        )
        thread_name = args.thread.name if args.thread else "thread"
        logger.exception("Thread exception in %s", thread_name, exc_info=exc_info)
        dump_threads(f"thread exception in {thread_name}")

    threading.excepthook = thread_hook


def build_app(cfg: AppConfig, reporter: Reporter) -> SamcApp:
    fs = AcmeFS(cfg.acme_root)
    session = Session(resolve_target())
    info = InfoLauncher(fs, cfg.info_command, reporter)
    return SamcApp(fs, session, reporter, info)


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    log_path = init_logging()
    if args.quiet:
        set_console_level(logging.ERROR)
    enable_faulthandler(log_path)
    _install_hooks()
    cfg = _apply_overrides(load_config(), args)
    logger.info("samc starting, acme at %s", cfg.acme_root)
    app = build_app(cfg, Reporter())
    exit_code = app.run()
    logger.info("samc exiting with status %s", exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
