from typing import Any, Dict, List, Optional
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QGridLayout, QFrame, QSizePolicy, QListWidget,
    QScrollArea
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from core.held_notes import HeldNotesTracker
from core.keyboard_input import OnScreenKeyboard
from core.music_theory import ChordTheory, UNKNOWN_QUALITY
from core.tone_generator import ToneGenerator
from ui.piano_keyboard_window import PianoKeyboardWidget
from ui.workers.midi_worker import MIDIInputWorker


# --- Main Application Window ---
class ChordAppMainWindow(QMainWindow):
    def __init__(self, tone_generator: Optional[ToneGenerator] = None,
                 midi_port_names: Optional[List[str]] = None):
        super().__init__()
        self.setWindowTitle("Live Chord Display")
        self.setGeometry(100, 100, 1100, 520)

        self.tone_generator = tone_generator or ToneGenerator()
        self.tracker = HeldNotesTracker(
            tone_generator=self.tone_generator,
            update_callback=self.update_chord_display,
        )
        self.keyboard = OnScreenKeyboard(self.tracker)
        self.midi_worker = MIDIInputWorker(self)
        self.piano_keyboard_widget: Optional[PianoKeyboardWidget] = None

        # --- Styling ---
        self.setStyleSheet("""
            QMainWindow {
                background-color: #2E2E2E;
            }
            QLabel {
                color: #E0E0E0;
                font-size: 11pt;
            }
            QListWidget {
                background-color: #333333;
                color: #D0D0D0;
                border: 1px solid #444444;
                font-size: 10pt;
            }
            QFrame#chordDisplayFrame {
                border: 1px solid #555555;
                border-radius: 5px;
                background-color: #3A3A3A;
            }
            QLabel#chordNameLabel {
                font-size: 40pt;
                font-weight: bold;
                color: #4CAF50;
                padding: 10px;
                border-bottom: 1px solid #555555;
            }
            QLabel#statusLabel {
                font-size: 9pt;
                color: #AAAAAA;
            }
        """)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self._setup_ui()
        self._connect_midi(midi_port_names)

    def _setup_ui(self):
        # Detected MIDI devices
        self.layout.addWidget(QLabel("Detected MIDI devices:"))
        self.midi_device_list = QListWidget()
        self.midi_device_list.setFixedHeight(70)
        self.midi_device_list.setSelectionMode(QListWidget.SelectionMode.NoSelection)
        self.layout.addWidget(self.midi_device_list)

        # Chord Display Area
        chord_display_frame = QFrame()
        chord_display_frame.setObjectName("chordDisplayFrame")
        chord_display_frame.setFrameShape(QFrame.Shape.StyledPanel)
        chord_display_layout = QVBoxLayout(chord_display_frame)

        self.chord_name_label = QLabel("\u00a0")
        self.chord_name_label.setObjectName("chordNameLabel")
        self.chord_name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        chord_display_layout.addWidget(self.chord_name_label)

        self.details_grid_layout = QGridLayout()
        self.details_labels: Dict[str, QLabel] = {}
        for row, label_text in enumerate(["Root:", "Bass:", "Type:", "Inversion:", "Intervals:", "Notes:"]):
            val_lbl = QLabel("---")
            val_lbl.setFont(QFont("Segoe UI", 10, QFont.Weight.Bold))
            self.details_labels[label_text.rstrip(":").lower()] = val_lbl
            self.details_grid_layout.addWidget(QLabel(label_text), row, 0)
            self.details_grid_layout.addWidget(val_lbl, row, 1)
        chord_display_layout.addLayout(self.details_grid_layout)

        self.layout.addWidget(chord_display_frame)

        # --- Piano Keyboard Widget ---
        self.piano_keyboard_widget = PianoKeyboardWidget(self.keyboard, self)
        scroll_area = QScrollArea()
        scroll_area.setWidget(self.piano_keyboard_widget)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        scroll_area.setFixedHeight(self.piano_keyboard_widget.height() + 24)
        scroll_area.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.layout.addWidget(scroll_area)

        # Status Label
        self.status_label = QLabel("Play a MIDI controller or click the keys.")
        self.status_label.setObjectName("statusLabel")
        self.layout.addWidget(self.status_label)

    def _connect_midi(self, midi_port_names: Optional[List[str]]):
        self.midi_worker.signals.note_event.connect(self.tracker.handle_event)
        self.midi_worker.signals.listener_status.connect(self.status_label.setText)
        self.midi_worker.signals.midi_ports_listed.connect(self._populate_midi_ports)
        # Device list is read once per session.
        if self.midi_worker.scan_ports():
            self.midi_worker.start_listening(midi_port_names)

    def _populate_midi_ports(self, ports: List[str]):
        self.midi_device_list.clear()
        if ports:
            self.midi_device_list.addItems(ports)
        else:
            self.midi_device_list.addItem("No MIDI input devices found.")

    def update_chord_display(self, display_text: str, chord_data: Optional[Dict[str, Any]]):
        # Non-breaking space keeps the label height when nothing is held.
        self.chord_name_label.setText(display_text or "\u00a0")

        if chord_data and chord_data.get("chord_type") not in (None, UNKNOWN_QUALITY):
            self.chord_name_label.setStyleSheet("color: #4CAF50;") # Green for recognized chord
        else:
            self.chord_name_label.setStyleSheet("color: #E0E0E0;")

        chord_data = chord_data or {}
        self.details_labels["root"].setText(chord_data.get("root_note_name") or "---")
        self.details_labels["bass"].setText(chord_data.get("bass_note_name") or "---")
        self.details_labels["type"].setText(chord_data.get("chord_description") or "---")
        self.details_labels["inversion"].setText(chord_data.get("inversion_type") or "---")
        self.details_labels["intervals"].setText(
            ChordTheory.format_intervals(chord_data.get("intervals_from_root", [])) or "---"
        )
        notes_midi = chord_data.get("played_notes_midi", [])
        self.details_labels["notes"].setText(
            ", ".join(f"{ChordTheory.midi_to_note_name(n)}({n})" for n in notes_midi) or "---"
        )

        if self.piano_keyboard_widget:
            self.piano_keyboard_widget.update_active_notes(self.tracker.active_notes)

    def closeEvent(self, event):
        self.status_label.setText("Closing...")
        self.midi_worker.stop_listening()
        self.keyboard.release_all()
        self.tracker.all_notes_off()
        self.tone_generator.close()
        super().closeEvent(event)
