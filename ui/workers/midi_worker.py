# --- Bridge from the MIDI listener thread to the Qt GUI thread ---
from typing import List, Optional

from PyQt6.QtCore import QObject

from core.midi_input import MIDIInputListener, list_input_names
from ui.workers.midi_signals import MIDISignals


class MIDIInputWorker(QObject):
    """
    Runs a MIDIInputListener and re-emits its note events as a Qt signal.

    The listener calls back on its own thread; slots connected to
    `signals.note_event` in the GUI thread get the events queued, so the
    tracker is only ever touched from the GUI thread.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.signals = MIDISignals()
        self.listener: Optional[MIDIInputListener] = None
        self.port_names: List[str] = []

    def scan_ports(self) -> List[str]:
        self.port_names = list_input_names()
        self.signals.midi_ports_listed.emit(self.port_names)
        return self.port_names

    def start_listening(self, port_names: Optional[List[str]] = None) -> bool:
        self.stop_listening()
        self.listener = MIDIInputListener(
            port_names=port_names,
            event_callback=self.signals.note_event.emit,
        )
        if self.listener.start():
            opened = ", ".join(p.name for p in self.listener.ports)
            self.signals.listener_status.emit(f"Listening on: {opened}")
            return True
        self.listener = None
        self.signals.listener_status.emit("MIDI input unavailable. Use the on-screen keyboard.")
        return False

    def stop_listening(self):
        if self.listener:
            self.listener.stop()
            self.listener = None
