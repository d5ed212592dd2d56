# --- PianoKeyboardWidget ---
from typing import Dict, Iterable
from PyQt6.QtWidgets import QFrame

from core.keyboard_input import OnScreenKeyboard
from ui.piano_keyboard_widget import PianoKeyWidget

class PianoKeyboardWidget(QFrame):
    WHITE_KEY_WIDTH = 24
    WHITE_KEY_HEIGHT = 144
    BLACK_KEY_WIDTH = 16
    BLACK_KEY_HEIGHT = 96
    MARGIN = 5

    def __init__(self, keyboard: OnScreenKeyboard, parent=None):
        super().__init__(parent)
        self.keyboard = keyboard
        self.setObjectName("PianoKeyboardFrame")
        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)
        self.setStyleSheet("""
            QFrame#PianoKeyboardFrame {
                background-color: #E5E7EB;
                border: 2px solid #444444;
                border-radius: 5px;
            }
        """)

        self.keys: Dict[int, PianoKeyWidget] = {} # midi_note -> PianoKeyWidget
        self._setup_keyboard_ui()

    def _setup_keyboard_ui(self):
        # White keys side by side; each black key straddles the boundary
        # after the white key below it and is raised above both.
        current_x = self.MARGIN
        for midi_note, is_black in self.keyboard.keys():
            key_widget = PianoKeyWidget(midi_note, is_black, self)
            key_widget.pointer_down.connect(self.keyboard.pointer_down)
            key_widget.pointer_up.connect(self.keyboard.pointer_up)
            key_widget.pointer_leave.connect(self.keyboard.pointer_leave)
            self.keys[midi_note] = key_widget

            if is_black:
                key_widget.setGeometry(
                    current_x - self.BLACK_KEY_WIDTH // 2, self.MARGIN,
                    self.BLACK_KEY_WIDTH, self.BLACK_KEY_HEIGHT,
                )
            else:
                key_widget.setGeometry(
                    current_x, self.MARGIN, self.WHITE_KEY_WIDTH, self.WHITE_KEY_HEIGHT
                )
                current_x += self.WHITE_KEY_WIDTH

        for key_widget in self.keys.values():
            if key_widget.is_black:
                key_widget.raise_()

        self.setFixedHeight(self.WHITE_KEY_HEIGHT + 2 * self.MARGIN)
        self.setMinimumWidth(current_x + self.MARGIN)
        self.resize(self.minimumWidth(), self.height())

    def update_active_notes(self, active_notes_midi: Iterable[int]):
        """
        Highlights exactly the keys in `active_notes_midi`.
        """
        pressed_notes = set(active_notes_midi)
        for note, key_widget in self.keys.items():
            key_widget.set_pressed(note in pressed_notes)
