"""
Tests for midi_chord_console.py - the headless front-end.
"""
import midi_chord_console
from core import midi_input


def test_list_midi_ports(monkeypatch, capsys):
    monkeypatch.setattr(midi_input.mido, "get_input_names", lambda: ["Keys A"])
    assert midi_chord_console.main(["--list-midi-ports"]) == 0
    out = capsys.readouterr().out
    assert "Available MIDI input ports:" in out
    assert '"Keys A"' in out


def test_list_midi_ports_when_none(monkeypatch, capsys):
    monkeypatch.setattr(midi_input.mido, "get_input_names", lambda: [])
    assert midi_chord_console.main(["--list-midi-ports"]) == 0
    assert "No MIDI input ports found." in capsys.readouterr().out


def test_exits_with_error_without_midi_input(monkeypatch):
    monkeypatch.setattr(midi_input.mido, "get_input_names", lambda: [])
    assert midi_chord_console.main(["--no-sound"]) == 1


def test_print_display(capsys):
    midi_chord_console.print_display("C/E")
    midi_chord_console.print_display("")
    assert capsys.readouterr().out == "C/E\n-\n"


def test_parse_args_defaults():
    args = midi_chord_console.parse_args([])
    assert args.midi_port is None
    assert not args.no_sound
    assert args.log_level == "WARNING"


def test_parse_args_repeated_ports():
    args = midi_chord_console.parse_args(["--midi-port", "A", "--midi-port", "B"])
    assert args.midi_port == ["A", "B"]
