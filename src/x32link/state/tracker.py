import struct

from x32link.protocol.console import FADER_SUFFIX, MUTE_SUFFIX, parse_channel
from x32link.protocol.osc import Message
from x32link.support.mixins import CommonEqualityMixin, StringerMixin

# float32 machine epsilon. Fader values are float32 on the wire.
FADER_EPSILON = 1.1920929e-07


def as_float32(value) -> float:
    """
    Rounds a level to the nearest float32, the precision fader values have on the wire.
    Thresholds are rounded the same way so a fader set exactly to the threshold is not above it.
    >>> as_float32(0.6)
    0.6000000238418579
    """
    return struct.unpack('<f', struct.pack('<f', value))[0]


def coerce_on(value):
    """
    Interprets a mute argument. Integers are on when non-zero, floats when positive.
    :return: the on state, or None if the value has no numeric interpretation.
    >>> coerce_on(1), coerce_on(0), coerce_on(0.5), coerce_on(-1.0), coerce_on('1')
    (True, False, True, False, None)
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return value > 0.0
    return None


def coerce_fader(value):
    """
    Interprets a fader argument as a float level.
    :return: the level, or None if the value is not numeric.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


class ChannelState(CommonEqualityMixin, StringerMixin):
    """
    The observed state of one channel strip.
    :param on: True when the channel is switched on (not muted)
    :param fader: the normalized fader level
    """
    def __init__(self, on=False, fader=0.0):
        self.on = on
        self.fader = fader

    def live(self, threshold) -> bool:
        """ the channel is live when on and strictly above the threshold """
        return self.on and self.fader > threshold


class ChannelStateTracker:
    """
    Tracks the mute and fader state of each channel seen in console messages.
    Channels that have never been observed have the default state (off, fader at 0.)

    The tracker is owned by the listener thread and is not thread safe.
    """

    def __init__(self):
        self._states = dict()      # channel id -> ChannelState

    def get(self, channel) -> ChannelState:
        state = self._states.get(channel)
        return state if state is not None else ChannelState()

    @property
    def channels(self):
        """ the ids of the channels observed so far, in ascending order """
        return sorted(self._states)

    def __len__(self):
        return len(self._states)

    def apply(self, message: Message) -> bool:
        """
        Applies a console message to the tracked state.
        Messages that are not mute or fader updates for a `/ch/<id>/` address, and arguments that cannot be
        interpreted, are ignored.
        :return: True if the on state or fader level of the channel changed.
        """
        channel = parse_channel(message.address)
        if channel is None:
            return False
        value = message.args[0] if message.args else None
        if message.address.endswith(MUTE_SUFFIX):
            return self._apply_on(channel, coerce_on(value))
        if message.address.endswith(FADER_SUFFIX):
            return self._apply_fader(channel, coerce_fader(value))
        return False

    def _state(self, channel):
        return self._states.setdefault(channel, ChannelState())

    def _apply_on(self, channel, on):
        if on is None:
            return False
        state = self._state(channel)
        if state.on == on:
            return False
        state.on = on
        return True

    def _apply_fader(self, channel, fader):
        if fader is None:
            return False
        state = self._state(channel)
        if abs(state.fader - fader) <= FADER_EPSILON:
            return False
        state.fader = fader
        return True
