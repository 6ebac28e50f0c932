#!/usr/bin/env python3

# -------------------------------------------------------------
# BlueByte Music Player - Terminal Player
# Scans a folder for mp3/wav files and plays them, controlled
# by one command per line on stdin.
# -------------------------------------------------------------

from __future__ import annotations

import argparse
import os
import sys

from bb_player import list_music_files
from player_session import print_controls, run_session


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Play the mp3/wav files of a folder from the terminal."
    )

    p.add_argument("directory", help="Music directory.")

    p.add_argument(
        "--device",
        default=None,
        help="Output device name or index (default: system default output).",
    )
    p.add_argument(
        "--list",
        action="store_true",
        help="Print the numbered track list before starting.",
    )

    args = p.parse_args(argv)

    # sounddevice takes either a name or an integer index
    if args.device is not None and args.device.isdigit():
        args.device = int(args.device)

    return args


def open_output(device=None):
    """Open the audio output. Imported here so scanning never touches PortAudio."""
    from bb_output import SoundDeviceSink

    return SoundDeviceSink(device)


def print_track_list(tracks: list[str]) -> None:
    print("=" * 40)
    for idx, path in enumerate(tracks, start=1):
        print(f"{idx: 2d}. {os.path.basename(path)}")
    print("=" * 40)


def main(argv=None, stdin=None) -> int:
    args = parse_args(argv)
    if stdin is None:
        stdin = sys.stdin

    try:
        tracks = list_music_files(args.directory)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not tracks:
        print("No music files found in the specified directory.")
        return 0

    try:
        sink = open_output(args.device)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list:
        print_track_list(tracks)

    print_controls(args.directory, len(tracks))

    try:
        run_session(tracks, sink, stdin)
    except KeyboardInterrupt:
        return 130
    except (RuntimeError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
