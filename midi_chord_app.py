import argparse
import logging
import sys
from PyQt6.QtWidgets import (
    QApplication
)

from core.tone_generator import ToneGenerator
from ui.main_window import ChordAppMainWindow

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(threadName)s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Live chord display with on-screen piano.")
    parser.add_argument(
        "--midi-port", action="append", default=None,
        help="MIDI input port to listen on (repeatable, default: all ports).",
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


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    app = QApplication(sys.argv[:1])
    main_window = ChordAppMainWindow(
        tone_generator=ToneGenerator(enabled=not args.no_sound),
        midi_port_names=args.midi_port,
    )
    main_window.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
