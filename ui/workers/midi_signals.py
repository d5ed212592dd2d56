# --- Custom Signal Emitter for MIDI input ---
from PyQt6.QtCore import pyqtSignal, QObject

class MIDISignals(QObject):
    note_event = pyqtSignal(object) # Emits core.midi_input.NoteEvent
    midi_ports_listed = pyqtSignal(list)
    listener_status = pyqtSignal(str)
