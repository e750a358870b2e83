"""Tests for the playlist and browse window rendering."""

from __future__ import annotations

import pytest
from mpd import CommandError

from samc.session import ConnectError, ServiceError
from samc.ui.views import BrowseView, PlaylistView


@pytest.fixture
def playlist_view(acme, session, reporter) -> PlaylistView:
    return PlaylistView(acme.new_window(), session, reporter)


@pytest.fixture
def browse_view(acme, session, reporter) -> BrowseView:
    return BrowseView(acme.new_window(), session, reporter)


def _queue(mpd_server) -> None:
    mpd_server.responses["playlistinfo"] = [
        {"Pos": "0", "file": "rock/a.flac", "Time": "61"},
        {"Pos": "1", "file": "b.flac", "Artist": "X", "Title": "Y", "Time": "2"},
    ]
    mpd_server.responses["status"] = {"state": "play", "song": "0", "time": "3:61"}


def test_full_refresh_paints_list_and_status(acme, mpd_server, playlist_view) -> None:
    _queue(mpd_server)
    playlist_view.refresh(True)
    assert acme.body(1).splitlines() == [
        "# 0 # rock/a。flac # 01:01",
        "# 1 # X - Y # 00:02",
        "TOTAL: 1:03",
        "State: play  Song: 0     Time: 3:61                ",
    ]


def test_status_refresh_replaces_only_status(acme, mpd_server, playlist_view) -> None:
    _queue(mpd_server)
    playlist_view.refresh(True)
    mpd_server.responses["status"] = {"state": "pause", "song": "1", "time": "0:2"}
    playlist_view.refresh(False)
    lines = acme.body(1).splitlines()
    assert lines[2] == "TOTAL: 1:03"
    assert lines[3].startswith("State: pause Song: 1 ")
    assert len(lines) == 4


def test_full_refresh_clears_previous_body(acme, mpd_server, playlist_view) -> None:
    _queue(mpd_server)
    playlist_view.refresh(True)
    acme.sync_length(1)
    mpd_server.responses["playlistinfo"] = []
    playlist_view.refresh(True)
    assert acme.body(1).splitlines()[0] == "TOTAL: 0:00"


def test_startup_listing_failure_is_raised(mpd_server, session, playlist_view) -> None:
    session.connect()
    mpd_server.fail("playlistinfo", EOFError())
    mpd_server.connect_failures.append(ConnectionRefusedError("down"))
    with pytest.raises(ConnectError):
        playlist_view.show_playlist(fatal=True)


def test_interactive_listing_failure_is_reported(
    acme, mpd_server, console, playlist_view
) -> None:
    mpd_server.fail("playlistinfo", CommandError("boom"))
    playlist_view.show_playlist()
    assert "cannot list the playlist" in console.file.getvalue()
    assert acme.body(1) == "TOTAL: 0:00\n"


def test_status_failure_keeps_old_line(acme, mpd_server, console, playlist_view) -> None:
    playlist_view.show_status(replace=False)
    before = acme.body(1)
    mpd_server.fail("status", CommandError("boom"))
    playlist_view.show_status(replace=True)
    assert acme.body(1) == before
    assert "cannot read the player status" in console.file.getvalue()
    with pytest.raises(ServiceError):
        mpd_server.fail("status", CommandError("boom"))
        playlist_view.show_status(replace=True, fatal=True)


def test_browse_lists_directory(acme, mpd_server, browse_view) -> None:
    mpd_server.responses["lsinfo"] = [
        {"directory": "music/Some Band"},
        {"file": "music/01 - intro.flac"},
        {"playlist": "music/list.m3u"},
    ]
    assert browse_view.show("/music") is True
    assert mpd_server.calls == [("lsinfo", ("music",))]
    assert acme.body(1).splitlines() == [
        "current path: /music",
        "Some⋯Band",
        "01⋯‒⋯intro。flac",
    ]


def test_browse_root_lists_without_argument(acme, mpd_server, browse_view) -> None:
    assert browse_view.show("/") is True
    assert mpd_server.calls == [("lsinfo", ())]
    assert acme.body(1) == "current path: /\n"


def test_browse_failure_leaves_body(acme, mpd_server, browse_view) -> None:
    mpd_server.fail("lsinfo", CommandError("No such directory"))
    assert browse_view.show("/nope") is False
    assert acme.body(1) == ""


def test_browse_lost_connection_is_reported(
    mpd_server, console, browse_view
) -> None:
    mpd_server.fail("lsinfo", EOFError())
    mpd_server.connect_failures.append(ConnectionRefusedError("down"))
    assert browse_view.show("/music") is False
    assert "cannot list /music" in console.file.getvalue()


def test_browse_window_gone_is_reported(acme, mpd_server, console, browse_view) -> None:
    (acme.root / "1" / "ctl").unlink()
    assert browse_view.show("/") is False
    assert "cannot write the browse window" in console.file.getvalue()
