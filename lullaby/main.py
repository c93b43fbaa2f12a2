"""
Main entry point for the Lullaby flute player.

Usage:
    lullaby-flute                       # headless voice pool, default profile
    lullaby-flute --backend osc         # play through SuperCollider
    lullaby-flute --backend midi --midi-port "IAC Driver Bus 1"
    lullaby-flute --profile my_player.json --log-level debug
"""

import argparse
import sys

from PyQt5.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget
from PyQt5.QtCore import Qt

from lullaby import __version__
from lullaby.audio import MidiInstrument, OSCInstrument, VoicePool
from lullaby.config import DEFAULT_NUM_VOICES, OSC_HOST, OSC_SEND_PORT
from lullaby.config.player_profile import ProfileValidationError, load_profile
from lullaby.engine.flute_player import ConfigurationError, FlutePlayer
from lullaby.engine.tick_driver import TickDriver
from lullaby.gui.log_view import LogView
from lullaby.input.keyboard_input import KeyboardInput
from lullaby.model.note import NoteColour
from lullaby.model.player import PlayingState
from lullaby.utils.logger import LogLevel, logger, set_log_level

LOG_LEVELS = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lullaby-flute",
        description="Play the Lullaby flute from the keyboard",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--profile", help="Player profile JSON (default: app data dir)")
    parser.add_argument("--backend", choices=["pool", "osc", "midi"], default="pool",
                        help="Instrument backend (default: pool, silent)")
    parser.add_argument("--voices", type=int, default=DEFAULT_NUM_VOICES,
                        help="Number of instrument voices")
    parser.add_argument("--osc-host", default=OSC_HOST)
    parser.add_argument("--osc-port", type=int, default=OSC_SEND_PORT)
    parser.add_argument("--midi-port", help="MIDI output port name (default: first preferred)")
    parser.add_argument("--log-level", choices=sorted(LOG_LEVELS), default="info")
    parser.add_argument("--log-file", help="Also write the log to this file")
    return parser


def create_instrument(args: argparse.Namespace):
    """Instrument for the chosen backend, or None if it could not connect."""
    if args.backend == "osc":
        instrument = OSCInstrument(args.voices)
        return instrument if instrument.connect(args.osc_host, args.osc_port) else None
    if args.backend == "midi":
        instrument = MidiInstrument(args.voices)
        return instrument if instrument.open(args.midi_port) else None
    return VoicePool(args.voices)


def create_window(player: FlutePlayer, log_level: LogLevel = LogLevel.INFO) -> QWidget:
    """Minimal window showing the key bindings, the current note and the log."""
    window = QWidget()
    window.setWindowTitle("Lullaby Flute")
    layout = QVBoxLayout(window)

    bindings = ", ".join(f"{key}={colour.name.lower()}"
                         for colour, key in zip(NoteColour, player.keys))
    layout.addWidget(QLabel(f"Keys: {bindings}"))

    status = QLabel("Resting")
    status.setAlignment(Qt.AlignCenter)
    layout.addWidget(status)

    def on_note_start(colour, note):
        status.setText(f"Playing {colour.name.lower()} (tone {note.tone})")

    def on_enter_state(state, _player):
        if state is not PlayingState.PLAYING:
            status.setText(state.name.capitalize())

    player.add_on_note_start_listener(on_note_start)
    player.add_on_enter_state_listener(on_enter_state)

    window.log_view = LogView(log_level)
    layout.addWidget(window.log_view)
    return window


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_level = LOG_LEVELS[args.log_level]
    set_log_level(log_level)
    logger.set_gui_level(log_level)
    if args.log_file:
        logger.enable_file_logging(args.log_file)

    logger.info(f"Lullaby flute {__version__} starting", component="APP")

    try:
        profile = load_profile(args.profile)
    except ProfileValidationError as e:
        logger.error("Cannot load player profile", component="APP", details=str(e))
        return 2

    app = QApplication(sys.argv[:1])

    instrument = create_instrument(args)
    if instrument is None:
        logger.error(f"Instrument backend '{args.backend}' unavailable", component="APP")
        return 1

    player = FlutePlayer.from_profile(instrument, profile)
    try:
        player.setup()
    except ConfigurationError as e:
        logger.error("Invalid player configuration", component="APP", details=str(e))
        return 2

    try:
        keyboard = KeyboardInput(player.keys)
    except ValueError as e:
        logger.error("Invalid key table", component="APP", details=str(e))
        return 2
    app.installEventFilter(keyboard)

    def on_application_state(state):
        if state != Qt.ApplicationActive:
            keyboard.release_all()

    app.applicationStateChanged.connect(on_application_state)

    driver = TickDriver(player, keyboard)
    window = create_window(player, log_level)
    window.show()
    driver.start()

    code = app.exec_()
    driver.stop()
    instrument.all_notes_off()
    return code


if __name__ == "__main__":
    sys.exit(main())
