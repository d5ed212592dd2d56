# --- HeldNotesTracker Class ---
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from core.midi_input import NoteEvent
from core.music_theory import MIDI_NOTE_MAX, MIDI_NOTE_MIN, ChordTheory

# --- Logging Setup ---
logger = logging.getLogger(__name__)


class HeldNotesTracker:
    """
    Owns the set of currently held notes and the display text derived from it.

    Every input source funnels into note_on/note_off. Callers must deliver
    events from a single thread; the tracker does no locking.
    """

    def __init__(
        self,
        tone_generator=None,
        update_callback: Optional[Callable[[str, Optional[Dict[str, Any]]], None]] = None,
    ):
        self.tone_generator = tone_generator
        self.update_callback = update_callback
        # Insertion-ordered: the earliest held note is the bass reference.
        self._active_notes: Dict[int, None] = {}
        self._display_text = ""
        self._details: Optional[Dict[str, Any]] = None

    @property
    def active_notes(self) -> Tuple[int, ...]:
        return tuple(self._active_notes)

    @property
    def display_text(self) -> str:
        return self._display_text

    @property
    def details(self) -> Optional[Dict[str, Any]]:
        return self._details

    def __contains__(self, note: int) -> bool:
        return note in self._active_notes

    def __len__(self) -> int:
        return len(self._active_notes)

    @staticmethod
    def _valid_note(note: int) -> bool:
        if MIDI_NOTE_MIN <= note <= MIDI_NOTE_MAX:
            return True
        logger.warning(f"Ignoring note outside MIDI range: {note}")
        return False

    def note_on(self, note: int):
        if not self._valid_note(note):
            return
        self._active_notes.setdefault(note, None)
        logger.debug(f"Note ON: {note} | Active: {list(self._active_notes)}")
        self._refresh()
        if self.tone_generator is not None:
            self.tone_generator.start(note)
        self._notify()

    def note_off(self, note: int):
        if not self._valid_note(note):
            return
        self._active_notes.pop(note, None)
        logger.debug(f"Note OFF: {note} | Active: {list(self._active_notes)}")
        self._refresh()
        if self.tone_generator is not None:
            self.tone_generator.stop(note)
        self._notify()

    def all_notes_off(self):
        for note in list(self._active_notes):
            self.note_off(note)

    def handle_event(self, event: NoteEvent):
        if event.is_note_on:
            self.note_on(event.note)
        else:
            self.note_off(event.note)

    def _refresh(self):
        notes = list(self._active_notes)
        self._details = ChordTheory.analyze(notes)
        self._display_text = self._details["full_chord_name"] if self._details else ""
        if self._details:
            logger.info(f"Display: {self._display_text} Notes: {self._details['played_notes_midi']}")

    def _notify(self):
        if self.update_callback:
            try:
                self.update_callback(self._display_text, self._details)
            except Exception as e:
                logger.error(f"Error in update_callback: {e}", exc_info=True)
