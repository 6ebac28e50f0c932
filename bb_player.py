import os
from dataclasses import dataclass

import numpy as np
import librosa


# ---------- File utilities ----------

# Extensions the player picks up when scanning (case-sensitive, no leading dot).
SUPPORTED_EXTENSIONS: set[str] = {"mp3", "wav"}


def file_extension(name: str) -> str | None:
    """Return the extension of `name` without the dot, or None if it has none.

    A leading dot does not start an extension, so ".mp3" has none.
    """
    _, ext = os.path.splitext(name)
    if not ext:
        return None
    return ext[1:]


def list_music_files(folder: str = ".", allowed_extensions: set[str] | None = None) -> list[str]:
    """Return full paths to playable files in `folder`, in directory order.

    Only immediate entries are considered. The order is whatever the OS
    yields; no sorting is applied.

    Args:
        folder: Folder to scan.
        allowed_extensions: Optional set of allowed extensions (case-sensitive, no dots).

    Returns:
        List of full file paths.
    """
    if allowed_extensions is None:
        allowed_extensions = SUPPORTED_EXTENSIONS

    try:
        entries = os.listdir(folder)
    except OSError as e:
        raise RuntimeError(f"Could not read folder '{folder}': {e}") from e

    music_files = []
    for name in entries:
        full_path = os.path.join(folder, name)

        if not os.path.isfile(full_path):
            continue

        if file_extension(name) not in allowed_extensions:
            continue

        # Undecodable bytes come back as surrogates. The whole path must be
        # valid text, so a non-UTF-8 folder name skips every entry.
        try:
            full_path.encode("utf-8")
        except UnicodeEncodeError:
            continue

        music_files.append(full_path)

    return music_files


# ---------- Audio utilities ----------


class DecodeError(RuntimeError):
    """Raised when a track cannot be opened or decoded."""


@dataclass
class DecodedTrack:
    path: str
    samples: np.ndarray  # float32, shape (frames, channels)
    sample_rate: int

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])


def to_frames(audio: np.ndarray) -> np.ndarray:
    """Convert librosa's (channels, samples) or (samples,) layout to (frames, channels) float32."""
    audio = np.atleast_2d(np.asarray(audio, dtype=np.float32))
    return np.ascontiguousarray(audio.T)


def decode_track(path: str) -> DecodedTrack:
    """Decode a file into a playable buffer at its native sample rate.

    Args:
        path: Input file path.

    Returns:
        DecodedTrack with all channels preserved.

    Raises:
        DecodeError: the file could not be opened or decoded.
    """
    try:
        audio, sr = librosa.load(path, sr=None, mono=False)
    except Exception as e:
        raise DecodeError(f"Failed to decode audio: {e}") from e

    return DecodedTrack(path=path, samples=to_frames(audio), sample_rate=int(sr))
