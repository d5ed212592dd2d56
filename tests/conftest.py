"""
Pytest fixtures for the chord display tests.
"""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Qt widgets are created without a display.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.held_notes import HeldNotesTracker
from core.tone_generator import ToneGenerator


class RecordingToneGenerator:
    """Stands in for the audio side and records start/stop calls."""

    def __init__(self):
        self.calls = []

    def start(self, note):
        self.calls.append(("start", note))

    def stop(self, note):
        self.calls.append(("stop", note))


class ManualTimer:
    """threading.Timer lookalike that only fires when the test says so."""

    created = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        ManualTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function(*self.args, **self.kwargs)


class FakeStream:
    def __init__(self, sample_rate, callback):
        self.sample_rate = sample_rate
        self.callback = callback
        self.started = False
        self.closed = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True


@pytest.fixture
def recording_tones():
    return RecordingToneGenerator()


@pytest.fixture
def updates():
    """List collecting (display_text, details) pairs from the tracker."""
    return []


@pytest.fixture
def tracker(recording_tones, updates):
    return HeldNotesTracker(
        tone_generator=recording_tones,
        update_callback=lambda text, details: updates.append((text, details)),
    )


@pytest.fixture
def manual_timers():
    ManualTimer.created = []
    yield ManualTimer.created
    ManualTimer.created = []


@pytest.fixture
def tone_generator(manual_timers):
    generator = ToneGenerator(
        sample_rate=8000,
        stream_factory=FakeStream,
        timer_factory=ManualTimer,
    )
    yield generator
    generator.close()
