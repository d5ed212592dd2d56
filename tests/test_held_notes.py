"""
Tests for core/held_notes.py - the held-notes state machine.
"""
import mido

from core.held_notes import HeldNotesTracker
from core.midi_input import NoteEvent


class TestTransitions:
    def test_starts_empty(self, tracker):
        assert tracker.active_notes == ()
        assert tracker.display_text == ""
        assert tracker.details is None

    def test_note_on_updates_display_and_starts_tone(self, tracker, recording_tones, updates):
        tracker.note_on(60)
        assert tracker.active_notes == (60,)
        assert tracker.display_text == "C4"
        assert recording_tones.calls == [("start", 60)]
        assert updates[-1][0] == "C4"

    def test_chord_builds_up(self, tracker):
        for note in (60, 64, 67):
            tracker.note_on(note)
        assert tracker.display_text == "C"

    def test_note_off_recomputes_from_remaining_notes(self, tracker, recording_tones):
        for note in (60, 64, 67):
            tracker.note_on(note)
        tracker.note_off(64)
        assert tracker.active_notes == (60, 67)
        assert tracker.display_text == "C?"
        assert recording_tones.calls[-1] == ("stop", 64)

    def test_releasing_everything_clears_display(self, tracker, updates):
        tracker.note_on(60)
        tracker.note_off(60)
        assert tracker.display_text == ""
        assert updates[-1] == ("", None)

    def test_duplicate_note_on_is_not_double_counted(self, tracker):
        tracker.note_on(60)
        tracker.note_on(60)
        tracker.note_off(60)
        assert 60 not in tracker
        assert len(tracker) == 0

    def test_note_off_for_absent_note_is_a_noop(self, tracker, updates):
        tracker.note_on(60)
        tracker.note_off(62)
        assert tracker.active_notes == (60,)
        assert tracker.display_text == "C4"

    def test_arrival_order_sets_bass(self, tracker):
        for note in (64, 67, 60):
            tracker.note_on(note)
        assert tracker.display_text == "C/E"

    def test_readding_keeps_original_position(self, tracker):
        for note in (64, 67, 60, 64):
            tracker.note_on(note)
        assert tracker.active_notes == (64, 67, 60)

    def test_out_of_range_notes_are_ignored(self, tracker, recording_tones, updates):
        tracker.note_on(128)
        tracker.note_off(-1)
        assert tracker.active_notes == ()
        assert recording_tones.calls == []
        assert updates == []

    def test_all_notes_off(self, tracker, recording_tones):
        for note in (60, 64, 67):
            tracker.note_on(note)
        tracker.all_notes_off()
        assert tracker.active_notes == ()
        assert tracker.display_text == ""
        stops = [call for call in recording_tones.calls if call[0] == "stop"]
        assert sorted(note for _, note in stops) == [60, 64, 67]

    def test_works_without_tone_generator_or_callback(self):
        tracker = HeldNotesTracker()
        tracker.note_on(60)
        tracker.note_on(63)
        tracker.note_on(67)
        assert tracker.display_text == "Cm"

    def test_callback_errors_do_not_break_transitions(self):
        def broken(text, details):
            raise RuntimeError("boom")

        tracker = HeldNotesTracker(update_callback=broken)
        tracker.note_on(60)
        assert tracker.display_text == "C4"


class TestEvents:
    def test_note_event_on_and_off(self, tracker):
        tracker.handle_event(NoteEvent("on", 60, 100))
        assert tracker.active_notes == (60,)
        tracker.handle_event(NoteEvent("off", 60, 0))
        assert tracker.active_notes == ()

    def test_velocity_zero_note_on_is_note_off(self, tracker):
        tracker.handle_event(NoteEvent("on", 60, 90))
        tracker.handle_event(NoteEvent("on", 60, 0))
        assert tracker.active_notes == ()

    def test_midi_messages(self, tracker):
        messages = [
            mido.Message("note_on", note=57, velocity=80),
            mido.Message("note_on", note=60, velocity=80),
            mido.Message("note_on", note=64, velocity=80),
        ]
        for msg in messages:
            tracker.handle_event(NoteEvent.from_message(msg))
        assert tracker.display_text == "Am"
        tracker.handle_event(NoteEvent.from_message(mido.Message("note_on", note=64, velocity=0)))
        tracker.handle_event(NoteEvent.from_message(mido.Message("note_off", note=60)))
        assert tracker.active_notes == (57,)
