"""
Lullaby flute player.

Turns key presses into a glitch-free, time-ordered stream of note starts
and stops on a polyphonic instrument.
"""

__version__ = "0.1.0"
