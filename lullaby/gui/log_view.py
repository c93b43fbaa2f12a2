"""
Log View - in-window logging console

Follows the global logger's Qt signal:
- Color-coded log levels
- Level filter (set from --log-level)
- Max 300 lines (memory limit)
"""

import html
import logging

from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import QPlainTextEdit

from lullaby.utils.logger import LogLevel, logger


LOG_COLORS = {
    logging.DEBUG: "#666666",     # Grey
    logging.INFO: "#2e8b57",      # Green
    logging.WARNING: "#d2691e",   # Orange
    logging.ERROR: "#cc3333",     # Red
}

LOG_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
}


def format_log_line(message: str, level: int, timestamp: str) -> str:
    """HTML line for one log record."""
    level_name = LOG_LEVEL_NAMES.get(level, "???")
    color = LOG_COLORS.get(level, "#000000")
    return (f"<span style='color: #888888'>{timestamp}</span> "
            f"<span style='color: {color}'>[{level_name}]</span> "
            f"{html.escape(message)}")


class LogView(QPlainTextEdit):
    """Read-only view of the log records at or above a level."""

    MAX_LINES = 300

    def __init__(self, level: LogLevel = LogLevel.INFO, parent=None):
        super().__init__(parent)
        self._filter_level = level

        self.setReadOnly(True)
        self.setFont(QFont("Monospace", 9))
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setMaximumBlockCount(self.MAX_LINES)

        self.connect_logger()

    @property
    def filter_level(self) -> LogLevel:
        return self._filter_level

    def set_filter_level(self, level: LogLevel):
        self._filter_level = level

    def connect_logger(self):
        """Connect to the global logger's signal."""
        logger.signal_emitter.log_message.connect(self.on_log_message)

    def disconnect_logger(self):
        logger.signal_emitter.log_message.disconnect(self.on_log_message)

    def on_log_message(self, message: str, level: int, timestamp: str):
        if level < self._filter_level:
            return
        self.appendHtml(format_log_line(message, level, timestamp))
        self.verticalScrollBar().setValue(self.verticalScrollBar().maximum())
