"""Instrument backends implementing the voice interface."""
from .voice_interface import VoiceInterface
from .voice_pool import VoicePool
from .osc_instrument import OSCInstrument
from .midi_instrument import MidiInstrument

__all__ = ['VoiceInterface', 'VoicePool', 'OSCInstrument', 'MidiInstrument']
