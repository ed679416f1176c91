"""
The X32 parameter addresses used by the listener, and the cadence of the subscription protocol.

A subscription asks the console to stream one parameter for a limited time: `/subscribe ,si <path> <time factor>`.
Channel paths are rendered with a two digit, one based channel index (channel 3 is `/ch/03/mix/on`).
"""

DEFAULT_PORT = 10023
DEFAULT_CHANNELS = (1, 2, 3, 4, 5, 6)

SUBSCRIBE_ADDRESS = '/subscribe'
TIME_FACTOR = 20            # argument sent with each subscription; the console's renewal window
RENEWAL_PERIOD = 8          # seconds between subscription bursts
RECEIVE_TIMEOUT = 0.25      # seconds; also bounds how long the listener takes to stop

MUTE_SUFFIX = '/mix/on'
FADER_SUFFIX = '/mix/fader'

MAX_CHANNEL_ID = 255


def channel_list(channels=None):
    """
    The channels to monitor. An empty or missing list means the default channels.
    >>> channel_list([])
    (1, 2, 3, 4, 5, 6)
    >>> channel_list([9, 3])
    (9, 3)
    """
    return tuple(int(c) for c in channels) if channels else DEFAULT_CHANNELS


def mute_path(channel):
    """
    >>> mute_path(3)
    '/ch/03/mix/on'
    """
    return '/ch/%02d%s' % (channel, MUTE_SUFFIX)


def fader_path(channel):
    """
    >>> fader_path(12)
    '/ch/12/mix/fader'
    """
    return '/ch/%02d%s' % (channel, FADER_SUFFIX)


def subscribe_paths(channels=None):
    """ the mute and fader path for each channel, in channel order. """
    return [path for channel in channel_list(channels)
            for path in (mute_path(channel), fader_path(channel))]


def parse_channel(address):
    """
    Retrieves the channel id from a `/ch/<id>/...` address. The id need not be zero padded.
    :return: the channel id, or None if the address is not a channel address or the id is not a number.
    >>> parse_channel('/ch/03/mix/on')
    3
    >>> parse_channel('/bus/03/mix/on') is None
    True
    """
    parts = address.split('/')
    if len(parts) < 3 or parts[1] != 'ch':
        return None
    text = parts[2]
    if not (text.isascii() and text.isdigit()):
        return None
    channel = int(text)
    return channel if channel <= MAX_CHANNEL_ID else None
