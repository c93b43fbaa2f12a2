"""
Flute Player - delayed, self-cancelling note scheduler

Turns raw key edges into a time-ordered sequence of note starts and stops
against an instrument, holding at most one voice at a time.

Per tick (update):
1. key edges become delayed NoteCommands in the queue
2. the queue is re-sorted and pruned of cancelled commands
3. due commands execute in order, driving the playing state
4. time-based transitions run (STOPPED -> RESTING after delay_rest)

Key invariants:
- At most one voice is owned (playing_voice is NO_VOICE or the held voice)
- The playing state is only ever changed here, never from outside
- Clock time is always supplied by the caller, never read internally
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence, Tuple

from lullaby.audio.voice_interface import VoiceInterface
from lullaby.config import MIN_PLAYER_VOICES, VOLUME_DEFAULT, DEFAULT_TONES, DEFAULT_KEYS
from lullaby.engine.command_queue import CommandQueue
from lullaby.engine.commands import NoteCommand, SchedulingContext
from lullaby.engine.events import PlayerEvents
from lullaby.model.note import KeyEdge, MusicalNote, NoteColour, NO_VOICE
from lullaby.model.player import PlayingState, PlayerTiming
from lullaby.utils.logger import logger


class ConfigurationError(ValueError):
    """Raised when the player cannot start with the given configuration."""
    pass


class FlutePlayer:
    """
    Instrument-playing component of the player.

    Watch notes with events.note_started / events.note_stopped, and the
    pending commands with events.command_received / events.command_cancelled
    (useful to animate the flute before the note actually sounds).
    """

    def __init__(
        self,
        instrument: VoiceInterface,
        timing: Optional[PlayerTiming] = None,
        tones: Optional[Sequence[int]] = None,
        keys: Optional[Sequence[str]] = None,
        volume: float = VOLUME_DEFAULT,
    ):
        """
        Args:
            instrument: Voice interface to play on
            timing: Scheduling delays (defaults from config)
            tones: One MIDI tone per NoteColour
            keys: One key name per NoteColour
            volume: Volume of every note, in [0, 1]
        """
        self._instrument = instrument
        self.timing = timing if timing is not None else PlayerTiming()
        self.tones: Tuple[int, ...] = tuple(tones if tones is not None else DEFAULT_TONES)
        self.keys: Tuple[str, ...] = tuple(keys if keys is not None else DEFAULT_KEYS)
        self.volume = volume

        self.events = PlayerEvents()

        self._queue = CommandQueue(
            get_context=self._scheduling_context,
            execute=self._execute_command,
            on_received=self.events.command_received.emit,
            on_cancelled=self.events.command_cancelled.emit,
        )

        self._playing_voice = NO_VOICE
        self._playing_colour: Optional[NoteColour] = None
        self._state = PlayingState.RESTING
        self._time_stopped = 0.0
        self._ready = False

    @classmethod
    def from_profile(cls, instrument: VoiceInterface, profile) -> "FlutePlayer":
        """Build a player from a PlayerProfile."""
        return cls(
            instrument,
            timing=profile.timing(),
            tones=profile.tones,
            keys=profile.keys,
            volume=profile.volume,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def instrument(self) -> VoiceInterface:
        return self._instrument

    @property
    def state(self) -> PlayingState:
        return self._state

    @property
    def playing_voice(self) -> int:
        return self._playing_voice

    @property
    def playing_colour(self) -> Optional[NoteColour]:
        return self._playing_colour

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def pending_commands(self) -> Tuple[NoteCommand, ...]:
        """Queued commands in execution order."""
        return self._queue.snapshot()

    def tone_for(self, colour: NoteColour) -> int:
        return self.tones[int(colour)]

    # =========================================================================
    # SETUP
    # =========================================================================

    def setup(self):
        """
        Validate configuration, settle at rest and prepare the instrument.

        Raises:
            ConfigurationError: tables do not match the colours, or volume
                is out of range
        """
        colours = NoteColour.count()
        if not (colours == len(self.keys) == len(self.tones)):
            raise ConfigurationError(
                f"keys ({len(self.keys)}) and tones ({len(self.tones)}) "
                f"must both have one entry per note colour ({colours})"
            )
        if not 0.0 <= self.volume <= 1.0:
            raise ConfigurationError(f"volume must be in [0, 1], got {self.volume}")

        # Settle without emitting anything
        self._queue.clear()
        self._release_voice()
        self._state = PlayingState.RESTING

        if self._instrument.number_voices < MIN_PLAYER_VOICES:
            logger.info(
                f"Raising instrument voices {self._instrument.number_voices} -> {MIN_PLAYER_VOICES}",
                component="PLAYER",
            )
            self._instrument.number_voices = MIN_PLAYER_VOICES

        self._ready = True
        logger.info("Flute player ready", component="PLAYER",
                    details=f"{colours} colours, {self.timing}")

    # =========================================================================
    # UPDATE ROUTINE
    # =========================================================================

    def update(self, now: float, edges: Iterable[KeyEdge] = ()):
        """Run one tick: input, command queue, then time-based state."""
        self._check_ready("update()")

        self.update_input(now, edges)
        self.update_command_queue(now)
        self.update_state(now)

    def update_input(self, now: float, edges: Iterable[KeyEdge]):
        for edge in edges:
            if edge.pressed:
                self.add_command(NoteCommand.start(edge.colour, now))
            else:
                self.add_command(NoteCommand.stop(edge.colour, now))

    def update_command_queue(self, now: float):
        self._queue.resort()
        self._queue.tick(now)

    def update_state(self, now: float):
        if (self._state is PlayingState.STOPPED
                and now > self._time_stopped + self.timing.delay_rest):
            self._set_state(PlayingState.RESTING, now)

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def press(self, colour: NoteColour, now: float):
        """Queue a delayed start, as a key press would."""
        self.add_command(NoteCommand.start(colour, now))

    def release(self, colour: NoteColour, now: float):
        """Queue a delayed stop, as a key release would."""
        self.add_command(NoteCommand.stop(colour, now))

    def add_command(self, command: NoteCommand):
        self._check_ready("add_command()")
        self._queue.enqueue(command)

    def _check_ready(self, caller: str):
        if not self._ready:
            raise RuntimeError(f"FlutePlayer.setup() must be called before {caller}")

    def _scheduling_context(self) -> SchedulingContext:
        return SchedulingContext(state=self._state, timing=self.timing)

    def _execute_command(self, command: NoteCommand, now: float):
        if command.is_start:
            self._play_note_now(command.colour, now)
        else:
            self._stop_note_now(command.colour, now)

    # =========================================================================
    # PLAYING ROUTINE
    # =========================================================================

    def _play_note_now(self, colour: NoteColour, now: float) -> int:
        # Only one voice: silence whatever is sounding first
        if self._playing_colour is not None:
            self._stop_note_now(self._playing_colour, now, keep_state=True)

        note = MusicalNote(self.tone_for(colour), self.volume)
        voice = self._instrument.play_note(note)
        if voice == NO_VOICE:
            logger.warning(f"Failed to play {colour.name}", component="VOICE",
                           details=self._instrument.last_error)
            return NO_VOICE

        self._playing_voice = voice
        self._playing_colour = colour
        self._set_state(PlayingState.PLAYING, now)

        self.events.note_started.emit(colour, self._instrument.get_note(voice))
        return voice

    def _stop_note_now(self, colour: NoteColour, now: float, keep_state: bool = False) -> bool:
        if self._playing_voice == NO_VOICE or self._playing_colour != colour:
            # Superseded stop, expected in normal play
            logger.player(f"Ignoring stop of {colour.name}", details="not sounding")
            return False

        # Fetch the note BEFORE releasing the voice
        note = self._instrument.get_note(self._playing_voice)

        if not self._instrument.stop_note(self._playing_voice):
            logger.error(f"Instrument failed to stop voice {self._playing_voice}",
                         component="VOICE", details=self._instrument.last_error)

        self._release_voice()
        if not keep_state:
            self._set_state(PlayingState.STOPPED, now)

        self.events.note_stopped.emit(colour, note)
        return True

    def _release_voice(self):
        self._playing_voice = NO_VOICE
        self._playing_colour = None

    # =========================================================================
    # STATE
    # =========================================================================

    def _set_state(self, state: PlayingState, now: float):
        if state is self._state:
            return
        logger.player(f"{self._state.name} -> {state.name}", details=f"t={now:.3f}")
        self._state = state
        if state is PlayingState.STOPPED:
            self._time_stopped = now
        self.events.state_entered.emit(state, self)

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def add_on_note_start_listener(self, listener: Callable[[NoteColour, MusicalNote], None]):
        self.events.note_started.connect(listener)

    def remove_on_note_start_listener(self, listener: Callable[[NoteColour, MusicalNote], None]):
        self.events.note_started.disconnect(listener)

    def add_on_note_stop_listener(self, listener: Callable[[NoteColour, MusicalNote], None]):
        self.events.note_stopped.connect(listener)

    def remove_on_note_stop_listener(self, listener: Callable[[NoteColour, MusicalNote], None]):
        self.events.note_stopped.disconnect(listener)

    def add_on_command_receive_listener(self, listener: Callable[[NoteCommand], None]):
        self.events.command_received.connect(listener)

    def remove_on_command_receive_listener(self, listener: Callable[[NoteCommand], None]):
        self.events.command_received.disconnect(listener)

    def add_on_command_cancel_listener(self, listener: Callable[[NoteCommand], None]):
        self.events.command_cancelled.connect(listener)

    def remove_on_command_cancel_listener(self, listener: Callable[[NoteCommand], None]):
        self.events.command_cancelled.disconnect(listener)

    def add_on_enter_state_listener(self, listener: Callable[[PlayingState, "FlutePlayer"], None]):
        self.events.state_entered.connect(listener)

    def remove_on_enter_state_listener(self, listener: Callable[[PlayingState, "FlutePlayer"], None]):
        self.events.state_entered.disconnect(listener)

