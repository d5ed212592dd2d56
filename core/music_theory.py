# --- ChordTheory Class ---
from collections import OrderedDict
from collections.abc import Set as AbstractSet
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

# --- Constants ---
MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127
A4_MIDI_NOTE = 69
A4_FREQUENCY = 440.0

UNKNOWN_QUALITY = "?"

# --- Logging Setup ---
logger = logging.getLogger(__name__)


class ChordTheory:
    NOTE_PITCH_CLASSES = [
        "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
    ]

    WHITE_KEY_PITCH_CLASSES = frozenset([0, 2, 4, 5, 7, 9, 11])

    # Label shown after the root name -> (description, intervals from root).
    # Matching walks this table in order, so order decides ties.
    CHORD_DEFINITIONS: Dict[str, Tuple[str, FrozenSet[int]]] = OrderedDict(
        [
            # --- TRIADS ---
            ('', ("Major Triad", frozenset([0, 4, 7]))),
            ('m', ("Minor Triad", frozenset([0, 3, 7]))),
            ('dim', ("Diminished Triad", frozenset([0, 3, 6]))),
            ('aug', ("Augmented Triad", frozenset([0, 4, 8]))),
            ('sus4', ("Suspended 4th", frozenset([0, 5, 7]))),
            ('sus2', ("Suspended 2nd", frozenset([0, 2, 7]))),

            # --- SEVENTHS ---
            ('7', ("Dominant 7th", frozenset([0, 4, 7, 10]))),
            ('m7', ("Minor 7th", frozenset([0, 3, 7, 10]))),
            ('maj7', ("Major 7th", frozenset([0, 4, 7, 11]))),
            ('m(maj7)', ("Minor Major 7th", frozenset([0, 3, 7, 11]))),
            ('dim7', ("Diminished 7th", frozenset([0, 3, 6, 9]))),

            # --- SIXTHS ---
            ('6', ("Major Sixth", frozenset([0, 4, 7, 9]))),
            ('m6', ("Minor Sixth", frozenset([0, 3, 7, 9]))),
        ]
    )

    INTERVAL_NAMES = {
        0: "R", 1: "b2", 2: "2", 3: "b3", 4: "3", 5: "4", 6: "b5/#4",
        7: "5", 8: "#5/b6", 9: "6", 10: "b7", 11: "M7"
    }

    INVERSION_NAMES = {
        0: "Root Position",
        1: "1st Inversion",
        2: "2nd Inversion",
        3: "3rd Inversion",
    }

    @staticmethod
    def _check_midi_note(midi_note: int) -> None:
        if not (MIDI_NOTE_MIN <= midi_note <= MIDI_NOTE_MAX):
            raise ValueError(f"MIDI note out of range 0-127: {midi_note}")

    @staticmethod
    def midi_to_pitch_class_name(midi_note: int) -> str:
        ChordTheory._check_midi_note(midi_note)
        return ChordTheory.NOTE_PITCH_CLASSES[midi_note % 12]

    @staticmethod
    def octave_of(midi_note: int) -> int:
        return midi_note // 12 - 1

    @staticmethod
    def midi_to_note_name(midi_note: int) -> str:
        """Pitch class name plus octave, e.g. 60 -> 'C4', 21 -> 'A0'."""
        name = ChordTheory.midi_to_pitch_class_name(midi_note)
        return f"{name}{ChordTheory.octave_of(midi_note)}"

    @staticmethod
    def midi_to_frequency(midi_note: int) -> float:
        """Equal-temperament frequency in Hz with A4 (note 69) at 440 Hz."""
        return A4_FREQUENCY * (2 ** ((midi_note - A4_MIDI_NOTE) / 12))

    @classmethod
    def is_white_key(cls, midi_note: int) -> bool:
        return midi_note % 12 in cls.WHITE_KEY_PITCH_CLASSES

    @classmethod
    def is_black_key(cls, midi_note: int) -> bool:
        return not cls.is_white_key(midi_note)

    @classmethod
    def interval_to_name(cls, interval: int) -> str:
        return cls.INTERVAL_NAMES.get(interval % 12, str(interval))

    @classmethod
    def format_intervals(cls, intervals: Iterable[int]) -> str:
        """Interval names joined for display, e.g. [0, 4, 7] -> 'R, 3, 5'."""
        return ", ".join(cls.interval_to_name(i) for i in intervals)

    @staticmethod
    def unique_intervals(midi_notes: Iterable[int]) -> List[int]:
        """Sorted distinct intervals (mod 12) of every note above the lowest one."""
        notes = list(midi_notes)
        if not notes:
            return []
        lowest = min(notes)
        return sorted({(note - lowest) % 12 for note in notes})

    @classmethod
    def match_quality(cls, unique_intervals: List[int]) -> Tuple[str, int]:
        """
        Finds the first rotation of `unique_intervals` that equals a catalog
        pattern. Returns (label, root offset) or ('?', 0) when nothing matches.
        """
        for root_offset in unique_intervals:
            shifted = frozenset((i - root_offset) % 12 for i in unique_intervals)
            for chord_type, (_, intervals) in cls.CHORD_DEFINITIONS.items():
                if shifted == intervals:
                    return chord_type, root_offset
        return UNKNOWN_QUALITY, 0

    @staticmethod
    def _bass_reference(midi_notes: Iterable[int]) -> Tuple[List[int], int]:
        # Unordered sets use the lowest note as bass; ordered input uses the
        # first (earliest held) note.
        if isinstance(midi_notes, AbstractSet):
            notes = sorted(midi_notes)
            return notes, notes[0] if notes else -1
        notes = list(midi_notes)
        return notes, notes[0] if notes else -1

    @classmethod
    def analyze(cls, midi_notes: Iterable[int]) -> Optional[Dict[str, Any]]:
        notes, bass_note = cls._bass_reference(midi_notes)
        if not notes:
            return None
        for note in notes:
            cls._check_midi_note(note)

        sorted_notes = sorted(set(notes))
        lowest_midi_note = sorted_notes[0]

        if len(sorted_notes) == 1:
            note_name = cls.midi_to_note_name(lowest_midi_note)
            return {
                "full_chord_name": note_name,
                "root_note_name": cls.midi_to_pitch_class_name(lowest_midi_note),
                "bass_note_name": cls.midi_to_pitch_class_name(lowest_midi_note),
                "chord_type": None,
                "chord_description": "Single Note",
                "inversion_type": None,
                "played_notes_midi": sorted_notes,
                "intervals_from_root": [0],
            }

        intervals = cls.unique_intervals(sorted_notes)
        chord_type, root_offset = cls.match_quality(intervals)

        root_pc = (lowest_midi_note + root_offset) % 12
        bass_pc = bass_note % 12
        root_name = cls.NOTE_PITCH_CLASSES[root_pc]
        bass_name = cls.NOTE_PITCH_CLASSES[bass_pc]

        if chord_type == UNKNOWN_QUALITY:
            full_chord_name = f"{root_name}{chord_type}"
            description = "Unrecognized"
            inversion_text = "Unrecognized"
        else:
            description = cls.CHORD_DEFINITIONS[chord_type][0]
            if bass_pc != root_pc:
                full_chord_name = f"{root_name}{chord_type}/{bass_name}"
            else:
                full_chord_name = f"{root_name}{chord_type}"
            pattern = sorted(cls.CHORD_DEFINITIONS[chord_type][1])
            inversion_index = pattern.index((bass_pc - root_pc) % 12)
            inversion_text = cls.INVERSION_NAMES.get(
                inversion_index, f"Inversion (bass is {inversion_index + 1}th tone)"
            )

        result = {
            "full_chord_name": full_chord_name,
            "root_note_name": root_name,
            "bass_note_name": bass_name,
            "chord_type": chord_type,
            "chord_description": description,
            "inversion_type": inversion_text,
            "played_notes_midi": sorted_notes,
            "intervals_from_root": sorted((i - root_offset) % 12 for i in intervals),
        }
        logger.debug(f"Analyzed {notes}: {full_chord_name} ({inversion_text})")
        return result

    @classmethod
    def identify(cls, midi_notes: Iterable[int]) -> str:
        """Display text for the held notes: '' for none, 'C4' for one, 'C/E' etc. for chords."""
        chord_info = cls.analyze(midi_notes)
        if chord_info is None:
            return ""
        return chord_info["full_chord_name"]


identify = ChordTheory.identify
