import time
from collections import namedtuple

from x32link.state.tracker import ChannelStateTracker


class MicChannel(namedtuple('MicChannel', 'channel on fader live')):
    """ the state of one monitored channel at the time a snapshot was taken. """
    __slots__ = ()

    def to_payload(self):
        return {'channel': self.channel, 'on': self.on, 'fader': self.fader, 'live': self.live}


class Snapshot(namedtuple('Snapshot', 'channels any_live updated_at')):
    """
    The state of the monitored channels, in the order they were configured.
    :param channels: tuple of MicChannel
    :param any_live: True if at least one channel is live
    :param updated_at: when the snapshot was taken, in milliseconds since the epoch
    """
    __slots__ = ()

    @property
    def live_channels(self):
        return tuple(c.channel for c in self.channels if c.live)

    def to_payload(self):
        """ the snapshot as the event payload delivered to the host application """
        return {
            'channels': [c.to_payload() for c in self.channels],
            'any_live': self.any_live,
            'updated_at': self.updated_at,
        }


def epoch_millis(now=time.time):
    return int(now() * 1000)


def build_snapshot(channels, tracker: ChannelStateTracker, threshold, now=time.time) -> Snapshot:
    """
    Builds a snapshot of the given channels. Channels the tracker has not observed are reported
    in the default state, and observed channels that are not listed are left out.
    :param channels: the channel ids to report, in order
    :param threshold: the fader level a channel that is on must exceed to be live
    :param now: the time source, in seconds since the epoch
    """
    entries = []
    for channel in channels:
        state = tracker.get(channel)
        entries.append(MicChannel(channel, state.on, state.fader, state.live(threshold)))
    return Snapshot(tuple(entries), any(entry.live for entry in entries), epoch_millis(now))
