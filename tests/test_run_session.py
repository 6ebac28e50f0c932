from bb_player import DecodeError, DecodedTrack
from player_session import SessionState, play_track, run_session
import sys
from pathlib import Path
import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

TRACKS = ["music/a.mp3", "music/b.wav"]


class FakeSink:
    def __init__(self):
        self.calls = []

    def load(self, track):
        self.calls.append(("load", track.path))

    def play(self):
        self.calls.append("play")

    def pause(self):
        self.calls.append("pause")

    def stop(self):
        self.calls.append("stop")


def fake_decode(path):
    return DecodedTrack(path=path, samples=np.zeros((2, 1), dtype=np.float32), sample_rate=8000)


def loaded(sink):
    return [c[1] for c in sink.calls if isinstance(c, tuple)]


def test_next_cycles_through_tracks(capsys):
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["n\n", "n\n", "q\n"], decode=fake_decode)

    assert state == SessionState(0, True)
    assert loaded(sink) == ["music/b.wav", "music/a.mp3"]
    out = capsys.readouterr().out
    assert "Now playing: music/b.wav" in out
    assert "Now playing: music/a.mp3" in out


def test_previous_from_first_plays_last():
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["b"], decode=fake_decode)

    assert state.current_track == 1
    assert loaded(sink) == ["music/b.wav"]


def test_track_change_stops_before_loading():
    sink = FakeSink()

    run_session(TRACKS, sink, ["2", "q"], decode=fake_decode)

    assert sink.calls == ["stop", ("load", "music/b.wav"), "play", "stop"]


def test_out_of_range_number_reports_and_keeps_index(capsys):
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["5", "0", "q"], decode=fake_decode)

    assert state == SessionState(0, False)
    assert sink.calls == ["stop"]
    out = capsys.readouterr().out
    assert out.count("Invalid track number. Enter a number between 1 and 2.") == 2


def test_garbage_reports_invalid_input(capsys):
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["  hello  ", "q"], decode=fake_decode)

    assert state == SessionState()
    assert "Invalid input. Enter 'q', 'p', 'n', 'b', or a track number." in capsys.readouterr().out


def test_toggle_twice_resumes_then_pauses():
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["p", "p", "q"], decode=fake_decode)

    assert state.is_playing is False
    assert sink.calls == ["play", "pause", "stop"]


def test_toggle_after_track_change_pauses():
    sink = FakeSink()

    run_session(TRACKS, sink, ["1", "p", "q"], decode=fake_decode)

    assert sink.calls[-2:] == ["pause", "stop"]


def test_quit_ignores_remaining_lines():
    sink = FakeSink()

    run_session(TRACKS, sink, ["q", "n"], decode=fake_decode)

    assert sink.calls == ["stop"]


def test_end_of_input_stops_sink():
    sink = FakeSink()

    state = run_session(TRACKS, sink, iter(["n"]), decode=fake_decode)

    assert state.current_track == 1
    assert sink.calls[-1] == "stop"


def test_decode_failure_is_fatal(capsys):
    sink = FakeSink()

    def broken_decode(path):
        raise DecodeError("Failed to decode audio: corrupt frame")

    with pytest.raises(DecodeError):
        run_session(TRACKS, sink, ["n", "q"], decode=broken_decode)

    assert sink.calls[-1] == "stop"
    assert "Invalid input" not in capsys.readouterr().out


def test_empty_track_list_is_rejected():
    with pytest.raises(ValueError):
        run_session([], FakeSink(), ["q"])


def test_play_track_prints_now_playing(capsys):
    sink = FakeSink()

    play_track("music/a.mp3", sink, decode=fake_decode)

    assert sink.calls == ["stop", ("load", "music/a.mp3"), "play"]
    assert capsys.readouterr().out == "Now playing: music/a.mp3\n"


def test_huge_number_reports_and_keeps_playing(capsys):
    sink = FakeSink()

    state = run_session(TRACKS, sink, ["1" * 5000, "n", "q"], decode=fake_decode)

    assert state.current_track == 1
    assert "Invalid track number. Enter a number between 1 and 2." in capsys.readouterr().out
