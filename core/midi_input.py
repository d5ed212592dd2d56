# --- MIDI controller input ---
from dataclasses import dataclass
import logging
import threading
import time
from typing import Callable, List, Optional

import mido

# --- Constants ---
DEFAULT_POLL_INTERVAL = 0.002
NOTE_ON = "on"
NOTE_OFF = "off"

# --- Logging Setup ---
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteEvent:
    type: str
    note: int
    velocity: int = 0

    @property
    def is_note_on(self) -> bool:
        # Running-status keyboards send note_on with velocity 0 instead of note_off.
        return self.type == NOTE_ON and self.velocity > 0

    @classmethod
    def from_message(cls, msg: mido.Message) -> Optional["NoteEvent"]:
        if msg.type == "note_on":
            return cls(NOTE_ON, msg.note, msg.velocity)
        if msg.type == "note_off":
            return cls(NOTE_OFF, msg.note, msg.velocity)
        return None


def list_input_names() -> List[str]:
    """Names of the available MIDI inputs, or [] when the backend cannot be used."""
    try:
        return list(mido.get_input_names())
    except Exception as e:
        logger.error(f"Could not list MIDI input ports: {e}")
        return []


class MIDIInputListener:
    def __init__(
        self,
        port_names: Optional[List[str]] = None,
        event_callback: Optional[Callable[[NoteEvent], None]] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.port_names = port_names
        self.event_callback = event_callback
        self.poll_interval = poll_interval
        self.ports: List[mido.ports.BaseInput] = []
        self.running = False
        self.lock = threading.Lock()
        self.midi_thread: Optional[threading.Thread] = None

    def _setup_midi(self) -> bool:
        available_ports = list_input_names()
        if not available_ports:
            logger.warning("No MIDI input ports found.")
            return False

        if self.port_names:
            ports_to_open = [p for p in self.port_names if p in available_ports]
            missing = [p for p in self.port_names if p not in available_ports]
            if missing:
                logger.warning(
                    f"MIDI ports not found: {missing}. Available ports: {available_ports}."
                )
        else:
            ports_to_open = available_ports
            logger.info(f"No MIDI port specified. Listening on all inputs: {available_ports}.")

        for name in ports_to_open:
            try:
                self.ports.append(mido.open_input(name))
                logger.info(f"Successfully opened MIDI port: '{name}'.")
            except Exception as e:
                logger.error(f"Failed to open MIDI port '{name}': {e}")
        return bool(self.ports)

    def dispatch(self, msg: mido.Message) -> Optional[NoteEvent]:
        event = NoteEvent.from_message(msg)
        if event is None:
            return None
        logger.debug(f"MIDI {event.type}: {event.note} Vel: {event.velocity}")
        if self.event_callback:
            try:
                self.event_callback(event)
            except Exception as e:
                logger.error(f"Error in event_callback: {e}", exc_info=True)
        return event

    def _midi_handler(self):
        logger.info("MIDI handler thread started.")
        while self.running:
            try:
                for port in self.ports:
                    for msg in port.iter_pending():
                        self.dispatch(msg)
            except Exception as e:
                if self.running:
                    logger.error(f"Error in MIDI handler thread: {e}", exc_info=True)
            time.sleep(self.poll_interval)
        logger.info("MIDI handler thread stopped.")

    def start(self) -> bool:
        with self.lock:
            if self.running:
                logger.info("MIDI listener already running.")
                return True
            if not self._setup_midi():
                logger.warning("MIDI input unavailable. Continuing with on-screen input only.")
                self._cleanup()
                return False
            self.running = True
            self.midi_thread = threading.Thread(
                target=self._midi_handler, name="MIDIHandlerThread", daemon=True
            )
            self.midi_thread.start()
            return True

    def stop(self):
        with self.lock:
            if not self.running:
                return
            self.running = False
        if self.midi_thread and self.midi_thread.is_alive():
            self.midi_thread.join(timeout=2.0)
            if self.midi_thread.is_alive():
                logger.warning("MIDI handler thread did not join in time.")
        self.midi_thread = None
        with self.lock:
            self._cleanup()
        logger.info("MIDI listener stopped.")

    def _cleanup(self):
        for port in self.ports:
            try:
                port.close()
            except Exception as e:
                logger.warning(f"Error closing MIDI port: {e}")
        self.ports = []
