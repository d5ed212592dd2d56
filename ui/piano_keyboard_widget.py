# --- PianoKeyWidget ---
from PyQt6.QtWidgets import QWidget
from PyQt6.QtGui import QPainter, QColor, QBrush, QPen
from PyQt6.QtCore import Qt, pyqtSignal

class PianoKeyWidget(QWidget):
    pointer_down = pyqtSignal(int) # midi_note
    pointer_up = pyqtSignal(int)
    pointer_leave = pyqtSignal(int)

    def __init__(self, midi_note: int, is_black: bool, parent=None):
        super().__init__(parent)
        self.midi_note = midi_note
        self.is_black = is_black
        self.is_pressed = False
        self._mouse_down = False

        self.setMinimumSize(10, 30) # Ensure it's visible

        self.color_white_key = QColor("#FFFFFF")
        self.color_black_key = QColor("#000000")
        self.color_pressed_white = QColor("#93C5FD") # Light blue for pressed white
        self.color_pressed_black = QColor("#3B82F6") # Brighter blue for pressed black
        self.color_border = QColor("#D1D5DB")

    def set_pressed(self, pressed: bool):
        if self.is_pressed != pressed:
            self.is_pressed = pressed
            self.update() # Trigger a repaint

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self.is_black:
            key_color = self.color_pressed_black if self.is_pressed else self.color_black_key
        else:
            key_color = self.color_pressed_white if self.is_pressed else self.color_white_key

        painter.setBrush(QBrush(key_color))
        painter.setPen(QPen(self.color_border, 1))
        painter.drawRect(self.rect().adjusted(0, 0, -1, -1))

    def _release_pointer(self, signal):
        if self._mouse_down:
            self._mouse_down = False
            signal.emit(self.midi_note)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._mouse_down = True
            self.pointer_down.emit(self.midi_note)
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._release_pointer(self.pointer_up)
        super().mouseReleaseEvent(event)

    def mouseMoveEvent(self, event):
        # Qt keeps the mouse grabbed while the button is down, so leaveEvent
        # does not arrive during a drag; detect the exit here instead.
        if self._mouse_down and not self.rect().contains(event.position().toPoint()):
            self._release_pointer(self.pointer_leave)
        super().mouseMoveEvent(event)

    def leaveEvent(self, event):
        self._release_pointer(self.pointer_leave)
        super().leaveEvent(event)
