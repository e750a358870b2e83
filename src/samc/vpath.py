"""Helpers for MPD's virtual music tree paths."""

from __future__ import annotations

ROOT = "/"


def resolve(current: str, relative: str) -> str:
    """Resolve ``relative`` against the absolute browse path ``current``."""
    if relative in ("", "."):
        return current
    if relative == "..":
        parent = current.rstrip(" /")
        if not parent:
            return current
        parent = parent[: parent.rfind("/")]
        # Going up from a top-level directory keeps the current path.
        if not parent:
            return current
        return parent
    if relative.startswith("/"):
        return relative
    return current.rstrip(" /") + "/" + relative.strip("/ ")


def to_service(path: str) -> str:
    """Return the form MPD expects: no leading or trailing slashes."""
    return path.strip(" /")


def leaf_name(path: str) -> str:
    """Return the last segment of a service path."""
    return path.strip("/").split("/")[-1]


def parent_dir(path: str) -> str:
    """Return the absolute parent directory of a service file path."""
    segments = path.strip("/").split("/")[:-1]
    if not segments:
        return ROOT
    return "/" + "/".join(segments)
