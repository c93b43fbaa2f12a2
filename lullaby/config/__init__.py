"""
Central Configuration
All constants, mappings, and defaults in one place
"""

# === PLAYER TIMING (seconds) ===
# Delay before the first note when the player was resting
DELAY_START_DEFAULT = 0.5
# Delay before switching notes while playing (or just after stopping)
DELAY_SWITCH_DEFAULT = 0.0
# Delay before a released note actually stops
DELAY_STOP_DEFAULT = 0.2
# Silence needed after a stop before the player is back at rest
DELAY_REST_DEFAULT = 1.0

VOLUME_DEFAULT = 1.0
VOLUME_MIN = 0.0
VOLUME_MAX = 1.0

# === TONES ===
# One MIDI tone per note colour, in NoteColour order (C major from middle C)
DEFAULT_TONES = [60, 62, 64, 65, 67, 69, 71]
TONE_MIN = 0
TONE_MAX = 127

# === KEYS ===
# One Qt key name per note colour, in NoteColour order (home row)
DEFAULT_KEYS = ["A", "S", "D", "F", "G", "H", "J"]

# === VOICES ===
# The player only ever holds one voice but keeps headroom in the instrument
MIN_PLAYER_VOICES = 2
DEFAULT_NUM_VOICES = 4
MAX_NUM_VOICES = 16  # one MIDI channel per voice

# === TICK DRIVER ===
TICK_INTERVAL_MS = 16  # ~60 frames per second

# === OSC ===
OSC_HOST = "127.0.0.1"
OSC_SEND_PORT = 57120

OSC_PATHS = {
    'voice_note_on': '/lullaby/voice/noteOn',
    'voice_note_off': '/lullaby/voice/noteOff',
    'voice_count': '/lullaby/voice/count',
    'all_notes_off': '/lullaby/voice/allNotesOff',
}

# === MIDI ===
# Output port name substrings, tried in order
MIDI_PREFERRED_PORTS = ["Lullaby", "IAC", "Through", "FluidSynth"]
MIDI_VELOCITY_MAX = 127
