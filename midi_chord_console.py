"""
Headless chord display: listens to MIDI inputs and prints the held note or
chord name after every note-on/note-off.
"""
import argparse
import logging
import queue
import sys
from typing import Optional

from core.held_notes import HeldNotesTracker
from core.midi_input import MIDIInputListener, list_input_names
from core.tone_generator import ToneGenerator

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(threadName)s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"
QUEUE_POLL_SECONDS = 0.5

logger = logging.getLogger(__name__)


def print_display(display_text: str, details: Optional[dict] = None):
    print(display_text if display_text else "-", flush=True)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Print note and chord names played on a MIDI controller.")
    parser.add_argument(
        "--midi-port", action="append", default=None,
        help="MIDI input port to listen on (repeatable, default: all ports).",
    )
    parser.add_argument(
        "--list-midi-ports", action="store_true", help="List MIDI input ports and exit."
    )
    parser.add_argument("--no-sound", action="store_true", help="Disable tone playback.")
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL}).",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    if args.list_midi_ports:
        available_ports = list_input_names()
        if available_ports:
            print("Available MIDI input ports:")
            for port in available_ports:
                print(f'  - "{port}"')
        else:
            print("No MIDI input ports found.")
        return 0

    tone_generator = ToneGenerator(enabled=not args.no_sound)
    tracker = HeldNotesTracker(tone_generator=tone_generator, update_callback=print_display)

    # The listener thread only enqueues; the tracker runs on this thread.
    events: "queue.Queue" = queue.Queue()
    listener = MIDIInputListener(port_names=args.midi_port, event_callback=events.put)
    if not listener.start():
        logger.error("No MIDI input could be opened.")
        tone_generator.close()
        return 1

    print("Listening for MIDI notes. Press Ctrl+C to stop.", flush=True)
    try:
        while True:
            try:
                event = events.get(timeout=QUEUE_POLL_SECONDS)
            except queue.Empty:
                continue
            tracker.handle_event(event)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received.")
    finally:
        listener.stop()
        tracker.update_callback = None
        tracker.all_notes_off()
        tone_generator.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
