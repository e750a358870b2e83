"""Tests for the acme window file helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from samc.acme import AcmeFS


def _make_window(root: Path, win_id: int, body_length: int = 0) -> None:
    win_dir = root / str(win_id)
    win_dir.mkdir(parents=True)
    for name in ("ctl", "tag", "body", "event"):
        (win_dir / name).write_text("", encoding="utf-8")
    (win_dir / "ctl").write_text(
        f"{win_id} 12 {body_length} 0 0 640 /lib/font 0 \n", encoding="utf-8"
    )


def test_new_window_reads_id_from_new_ctl(tmp_path: Path) -> None:
    (tmp_path / "new").mkdir()
    (tmp_path / "new" / "ctl").write_text("   7 0 0 0 0 640 font 0 ", encoding="utf-8")
    window = AcmeFS(tmp_path).new_window()
    assert window.id == 7
    assert window.file("body") == tmp_path / "7" / "body"


def test_new_window_rejects_garbage(tmp_path: Path) -> None:
    (tmp_path / "new").mkdir()
    (tmp_path / "new" / "ctl").write_text("oops", encoding="utf-8")
    with pytest.raises(OSError):
        AcmeFS(tmp_path).new_window()


def test_new_window_missing_mount(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        AcmeFS(tmp_path / "missing").new_window()


def test_control_messages_are_appended(tmp_path: Path) -> None:
    _make_window(tmp_path, 3)
    window = AcmeFS(tmp_path).window(3)
    window.set_name("samc:")
    window.write_tag("Quit Play")
    window.delete()
    ctl = (tmp_path / "3" / "ctl").read_text(encoding="utf-8")
    assert ctl.endswith("name samc:\ndelete\n")
    assert (tmp_path / "3" / "tag").read_text(encoding="utf-8") == "Quit Play"


def test_body_length_and_clear(tmp_path: Path) -> None:
    _make_window(tmp_path, 4, body_length=5)
    window = AcmeFS(tmp_path).window(4)
    assert window.body_length() == 5
    window.clear_body()
    window.write_body("hi\n")
    window.close()
    assert (tmp_path / "4" / "body").read_text(encoding="utf-8") == "\b" * 5 + "hi\n"


def test_body_length_bad_ctl(tmp_path: Path) -> None:
    _make_window(tmp_path, 5)
    (tmp_path / "5" / "ctl").write_text("5 1", encoding="utf-8")
    with pytest.raises(OSError):
        AcmeFS(tmp_path).window(5).body_length()


def test_erase_body_ignores_zero(tmp_path: Path) -> None:
    _make_window(tmp_path, 6)
    window = AcmeFS(tmp_path).window(6)
    window.erase_body(0)
    window.close()
    assert (tmp_path / "6" / "body").read_text(encoding="utf-8") == ""


def test_open_events_reads_text(tmp_path: Path) -> None:
    _make_window(tmp_path, 8)
    (tmp_path / "8" / "event").write_text("MX1 2 0 1 a\n", encoding="utf-8")
    with AcmeFS(tmp_path).window(8).open_events() as stream:
        assert stream.read() == "MX1 2 0 1 a\n"
