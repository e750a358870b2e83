"""Plain-text rendering of MPD data for window bodies."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from samc.ui.pathcodec import encode

Entry = Mapping[str, Any]


def _tag(entry: Entry, key: str) -> str:
    """Return a tag value; repeated tags come back from MPD as lists."""
    value = entry.get(key, "")
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def _seconds(value: object) -> int:
    try:
        return max(0, int(float(str(value))))
    except ValueError:
        return 0


def track_seconds(entry: Entry) -> int:
    """Return a playlist entry's duration, preferring the integer ``Time`` tag."""
    if "Time" in entry:
        return _seconds(entry["Time"])
    return _seconds(entry.get("duration", 0))


def format_duration(seconds: int) -> str:
    minutes, seconds = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_total(seconds: int) -> str:
    minutes, seconds = divmod(max(0, seconds), 60)
    return f"{minutes}:{seconds:02d}"


def format_track_line(entry: Entry) -> str:
    """Render ``# pos # Artist - Title # mm:ss``, or the file when untagged."""
    pos = _tag(entry, "Pos")
    artist = _tag(entry, "Artist")
    title = _tag(entry, "Title")
    if artist and title:
        label = f"{artist} - {title}"
    else:
        label = encode(_tag(entry, "file"))
    return f"# {pos} # {label} # {format_duration(track_seconds(entry))}\n"


def format_playlist(entries: Iterable[Entry]) -> str:
    lines: list[str] = []
    total = 0
    for entry in entries:
        total += track_seconds(entry)
        lines.append(format_track_line(entry))
    lines.append(f"TOTAL: {format_total(total)}\n")
    return "".join(lines)


def format_status_line(status: Entry) -> str:
    state = _tag(status, "state")
    song = _tag(status, "song")
    elapsed = _tag(status, "time")
    return f"State: {state:<5} Song: {song:<5} Time: {elapsed:<20}\n"
