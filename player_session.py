"""player_session.py

Interactive playback session: turns input lines into commands, applies them
to the session state, and drives the output sink.

Parsing and state transitions are pure; only run_session() and play_track()
touch the sink or print.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from bb_player import DecodedTrack, decode_track


class Action(Enum):
    QUIT = "q"
    TOGGLE = "p"
    NEXT = "n"
    PREVIOUS = "b"
    SELECT = "select"
    INVALID_NUMBER = "invalid_number"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Command:
    action: Action
    track_number: Optional[int] = None  # 1-based, SELECT only


@dataclass(frozen=True)
class SessionState:
    current_track: int = 0
    is_playing: bool = False


TRACK_CHANGES = {Action.NEXT, Action.PREVIOUS, Action.SELECT}

_LETTER_COMMANDS = {
    "q": Action.QUIT,
    "p": Action.TOGGLE,
    "n": Action.NEXT,
    "b": Action.PREVIOUS,
}

_TRACK_NUMBER_RE = re.compile(r"\+?[0-9]+")

# More digits than any usable track count; also keeps int() under its digit limit.
_MAX_TRACK_DIGITS = 19


# ----------------------------
# Pure logic
# ----------------------------

def parse_command(text: str, track_count: int) -> Command:
    """Interpret one stripped input line."""
    action = _LETTER_COMMANDS.get(text)
    if action is not None:
        return Command(action)

    if not _TRACK_NUMBER_RE.fullmatch(text):
        return Command(Action.INVALID_INPUT)

    digits = text.lstrip("+").lstrip("0")
    if len(digits) > _MAX_TRACK_DIGITS:
        return Command(Action.INVALID_NUMBER)

    number = int(digits or "0")
    if 1 <= number <= track_count:
        return Command(Action.SELECT, number)
    return Command(Action.INVALID_NUMBER, number)


def next_state(state: SessionState, command: Command, track_count: int) -> SessionState:
    """Return the state after applying `command`.

    Track changes always leave the session playing.
    """
    action = command.action

    if action is Action.TOGGLE:
        return replace(state, is_playing=not state.is_playing)
    if action is Action.NEXT:
        return SessionState((state.current_track + 1) % track_count, True)
    if action is Action.PREVIOUS:
        return SessionState((state.current_track - 1 + track_count) % track_count, True)
    if action is Action.SELECT:
        return SessionState(command.track_number - 1, True)
    return state


def invalid_number_message(track_count: int) -> str:
    return f"Invalid track number. Enter a number between 1 and {track_count}."


INVALID_INPUT_MESSAGE = "Invalid input. Enter 'q', 'p', 'n', 'b', or a track number."


# ----------------------------
# I/O
# ----------------------------

def print_controls(directory: str, track_count: int) -> None:
    print(f"Playing music from {directory}.")
    print("Press 'q' to quit.")
    print("Press 'p' to toggle pause/play.")
    print("Press 'n' for the next track.")
    print("Press 'b' for the previous track.")
    print(f"Enter a track number (1 to {track_count}):")


def play_track(
    file_path: str,
    sink,
    decode: Callable[[str], DecodedTrack] = decode_track,
) -> None:
    """Replace whatever the sink holds with `file_path` and start it.

    Decode errors propagate; there is no fallback to another track.
    """
    sink.stop()
    track = decode(file_path)
    sink.load(track)
    sink.play()
    print(f"Now playing: {file_path}")


def run_session(
    tracks: Sequence[str],
    sink,
    lines: Iterable[str],
    decode: Callable[[str], DecodedTrack] = decode_track,
) -> SessionState:
    """Run the command loop until 'q' or end of input.

    Args:
        tracks: Non-empty track list.
        sink: Output sink with load/play/pause/stop.
        lines: Input lines, one command each (e.g. sys.stdin).
        decode: Decoder used on track changes.

    Returns:
        The final session state.
    """
    track_count = len(tracks)
    if track_count == 0:
        raise ValueError("run_session needs at least one track.")

    state = SessionState()

    try:
        for line in lines:
            command = parse_command(line.strip(), track_count)
            action = command.action

            if action is Action.QUIT:
                break

            if action is Action.TOGGLE:
                if state.is_playing:
                    sink.pause()
                else:
                    sink.play()
                state = next_state(state, command, track_count)
            elif action in TRACK_CHANGES:
                state = next_state(state, command, track_count)
                play_track(tracks[state.current_track], sink, decode)
            elif action is Action.INVALID_NUMBER:
                print(invalid_number_message(track_count))
            else:
                print(INVALID_INPUT_MESSAGE)
    finally:
        sink.stop()

    return state
