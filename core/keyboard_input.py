# --- OnScreenKeyboard Class ---
import logging
from typing import List, Set, Tuple

from core.music_theory import ChordTheory

# --- Constants ---
START_MIDI_NOTE = 21  # A0
END_MIDI_NOTE = 108  # C8 (88 keys)

# --- Logging Setup ---
logger = logging.getLogger(__name__)


class OnScreenKeyboard:
    """Pointer interactions on the 88 on-screen keys, forwarded to a HeldNotesTracker."""

    def __init__(self, tracker, start_note: int = START_MIDI_NOTE, end_note: int = END_MIDI_NOTE):
        self.tracker = tracker
        self.start_note = start_note
        self.end_note = end_note
        self.pressed_keys: Set[int] = set()

    def in_range(self, midi_note: int) -> bool:
        return self.start_note <= midi_note <= self.end_note

    def keys(self) -> List[Tuple[int, bool]]:
        """(midi_note, is_black) for every key, lowest first."""
        return [
            (note, ChordTheory.is_black_key(note))
            for note in range(self.start_note, self.end_note + 1)
        ]

    def pointer_down(self, midi_note: int):
        if not self.in_range(midi_note):
            return
        self.pressed_keys.add(midi_note)
        self.tracker.note_on(midi_note)

    def pointer_up(self, midi_note: int):
        if not self.in_range(midi_note):
            return
        self.pressed_keys.discard(midi_note)
        self.tracker.note_off(midi_note)

    def pointer_leave(self, midi_note: int):
        # Dragging off a held key releases it, otherwise the note would stick.
        if midi_note in self.pressed_keys:
            logger.debug(f"Pointer left held key {midi_note}; releasing.")
            self.pointer_up(midi_note)

    def release_all(self):
        for note in sorted(self.pressed_keys):
            self.pointer_up(note)
