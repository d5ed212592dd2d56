# --- ToneGenerator Class ---
import logging
import threading
from typing import Callable, Dict, List, Optional

import numpy as np

from core.music_theory import ChordTheory

# --- Constants ---
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_INITIAL_GAIN = 0.5
DEFAULT_FINAL_GAIN = 0.01
DEFAULT_RELEASE_SECONDS = 0.5

# --- Logging Setup ---
logger = logging.getLogger(__name__)


class Voice:
    """One sounding sine tone, owned by the generator until released."""

    def __init__(self, note: int, frequency: float, total_frames: int):
        self.note = note
        self.frequency = frequency
        self.total_frames = total_frames
        self.frame = 0
        self.release_timer = None

    @property
    def finished(self) -> bool:
        return self.frame >= self.total_frames

    def cancel_release(self):
        if self.release_timer is not None:
            self.release_timer.cancel()
            self.release_timer = None


def _open_sounddevice_stream(sample_rate: int, callback: Callable):
    # Imported lazily: sounddevice raises OSError at import time when
    # PortAudio is not installed.
    import sounddevice as sd

    return sd.OutputStream(
        samplerate=sample_rate, channels=1, dtype="float32", callback=callback
    )


class ToneGenerator:
    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        initial_gain: float = DEFAULT_INITIAL_GAIN,
        final_gain: float = DEFAULT_FINAL_GAIN,
        release_seconds: float = DEFAULT_RELEASE_SECONDS,
        enabled: bool = True,
        stream_factory: Optional[Callable] = None,
        timer_factory: Callable = threading.Timer,
    ):
        self.sample_rate = sample_rate
        self.initial_gain = initial_gain
        self.final_gain = final_gain
        self.release_seconds = release_seconds
        self.enabled = enabled
        self.voices: Dict[int, Voice] = {}
        self.stream = None
        self.lock = threading.Lock()
        self._stream_factory = stream_factory or _open_sounddevice_stream
        self._timer_factory = timer_factory
        self._audio_failed = False

    @property
    def available(self) -> bool:
        return self.stream is not None

    @property
    def sounding_notes(self) -> List[int]:
        with self.lock:
            return sorted(self.voices)

    def open(self) -> bool:
        """Opens the output stream on first use. Returns False when sound is unavailable."""
        if self.stream is not None:
            return True
        if not self.enabled or self._audio_failed:
            return False
        try:
            stream = self._stream_factory(self.sample_rate, self._stream_callback)
            stream.start()
            self.stream = stream
            logger.info(f"Audio output opened at {self.sample_rate} Hz.")
            return True
        except Exception as e:
            # Reported once; later calls stay silent.
            self._audio_failed = True
            logger.warning(f"Audio output unavailable, continuing without sound: {e}")
            return False

    def close(self):
        logger.debug("Closing tone generator...")
        with self.lock:
            voices = list(self.voices.values())
            self.voices.clear()
        for voice in voices:
            voice.cancel_release()
        if self.stream is not None:
            try:
                self.stream.stop()
                self.stream.close()
                logger.debug("Audio stream closed.")
            except Exception as e:
                logger.warning(f"Error closing audio stream: {e}")
        self.stream = None

    def start(self, note: int):
        if not self.open():
            return
        voice = Voice(
            note,
            ChordTheory.midi_to_frequency(note),
            int(round(self.release_seconds * self.sample_rate)),
        )
        timer = self._timer_factory(self.release_seconds, self._auto_release, args=(note, voice))
        timer.daemon = True
        voice.release_timer = timer
        with self.lock:
            previous = self.voices.get(note)
            self.voices[note] = voice
        if previous is not None:
            previous.cancel_release()
        timer.start()
        logger.debug(f"Tone start: {note} ({voice.frequency:.2f} Hz)")

    def stop(self, note: int):
        with self.lock:
            voice = self.voices.pop(note, None)
        if voice is not None:
            voice.cancel_release()
            logger.debug(f"Tone stop: {note}")

    def _auto_release(self, note: int, voice: Voice):
        with self.lock:
            # A newer voice for the same note keeps sounding.
            if self.voices.get(note) is voice:
                del self.voices[note]
                voice.release_timer = None
                logger.debug(f"Tone auto-released: {note}")

    def envelope(self, seconds: np.ndarray) -> np.ndarray:
        """Exponential decay from initial_gain to final_gain over release_seconds."""
        ratio = self.final_gain / self.initial_gain
        return self.initial_gain * np.power(ratio, seconds / self.release_seconds)

    def render(self, frames: int) -> np.ndarray:
        mix = np.zeros(frames, dtype=np.float32)
        with self.lock:
            for voice in self.voices.values():
                if voice.finished:
                    continue
                count = min(frames, voice.total_frames - voice.frame)
                t = np.arange(voice.frame, voice.frame + count) / self.sample_rate
                samples = self.envelope(t) * np.sin(2 * np.pi * voice.frequency * t)
                mix[:count] += samples.astype(np.float32)
                voice.frame += count
        return np.clip(mix, -1.0, 1.0)

    def _stream_callback(self, outdata, frames, time_info, status):
        if status:
            logger.debug(f"Audio stream status: {status}")
        outdata[:, 0] = self.render(frames)
