"""bb_output.py

Audio output for the player: a single sounddevice stream fed from a decoded
buffer. The stream runs on PortAudio's callback thread, so nothing here
blocks waiting for a track to finish.
"""

import numpy as np
import sounddevice as sd

from bb_player import DecodedTrack


class AudioOutputError(RuntimeError):
    """Raised when the output device cannot be opened."""


class SoundDeviceSink:
    """The one output sink of a playback session.

    Supports load/play/pause/stop. Loading a new track replaces whatever was
    queued; the sink is never duplicated.
    """

    def __init__(self, device=None):
        try:
            sd.query_devices(device, kind="output")
        except Exception as e:
            raise AudioOutputError(f"Could not open audio output: {e}") from e

        self.device = device
        self._stream = None
        self._samples: np.ndarray | None = None
        self._pos = 0

    # ----------------------------
    # Stream callback
    # ----------------------------

    def _callback(self, outdata, frames, time, status):
        chunk = self._samples[self._pos:self._pos + frames]
        n = len(chunk)
        outdata[:n] = chunk
        self._pos += n

        if n < frames:
            outdata[n:] = 0
            raise sd.CallbackStop

    # ----------------------------
    # Sink operations
    # ----------------------------

    def load(self, track: DecodedTrack) -> None:
        self.stop()

        try:
            stream = sd.OutputStream(
                samplerate=track.sample_rate,
                channels=track.channels,
                dtype="float32",
                device=self.device,
                callback=self._callback,
            )
        except Exception as e:
            raise AudioOutputError(
                f"Could not open audio output for '{track.path}': {e}") from e

        self._samples = track.samples
        self._pos = 0
        self._stream = stream

    def play(self) -> None:
        if self._stream is None or self._stream.active:
            return
        # A stream whose callback finished is not stopped until told so.
        if not self._stream.stopped:
            self._stream.stop()
        self._stream.start()

    def pause(self) -> None:
        if self._stream is not None and self._stream.active:
            self._stream.stop()

    def stop(self) -> None:
        if self._stream is not None:
            self._stream.abort()
            self._stream.close()
        self._stream = None
        self._samples = None
        self._pos = 0
