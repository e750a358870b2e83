"""Configuration for samc: user settings on disk, MPD target from the environment."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from samc.acme import DEFAULT_ROOT

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
DEFAULT_INFO_COMMAND = "songinfo"


@dataclass(frozen=True)
class AppConfig:
    """Immutable user configuration loaded from disk."""

    acme_root: str = DEFAULT_ROOT
    info_command: str = DEFAULT_INFO_COMMAND


@dataclass(frozen=True)
class ConnectionTarget:
    """Where the MPD server lives and how to authenticate."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def resolve_target(env: Optional[Mapping[str, str]] = None) -> ConnectionTarget:
    """Build the MPD target from ``MPD_HOST`` and ``MPD_PORT``.

    ``MPD_HOST`` may be given as ``password@host``.
    """
    if env is None:
        env = os.environ
    host = env.get("MPD_HOST") or DEFAULT_HOST
    password: Optional[str] = None
    if "@" in host:
        password, host = host.split("@", 1)
        password = password or None
        host = host or DEFAULT_HOST
    port = DEFAULT_PORT
    raw_port = env.get("MPD_PORT")
    if raw_port:
        try:
            port = int(raw_port)
        except ValueError:
            logger.warning("Ignoring invalid MPD_PORT %r", raw_port)
    return ConnectionTarget(host=host, port=port, password=password)


def config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Return ``$XDG_CONFIG_HOME/samc/config.json`` (``~/.config`` by default)."""
    if env is None:
        env = os.environ
    base = env.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "samc" / "config.json"


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Read the JSON settings file; anything unusable yields the defaults."""
    if path is None:
        path = config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return AppConfig()
    except OSError:
        logger.exception("Failed to read config from %s", path)
        return AppConfig()
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring malformed config %s: %s", path, exc)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return AppConfig()
    return AppConfig(
        acme_root=os.path.expanduser(_setting(raw, "acme_root", DEFAULT_ROOT)),
        info_command=_setting(raw, "info_command", DEFAULT_INFO_COMMAND),
    )


def _setting(raw: Mapping[str, Any], key: str, default: str) -> str:
    """Return a non-empty string setting, or ``default``."""
    value = raw.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if value is not None:
        logger.warning("Ignoring config value %s=%r", key, value)
    return default
