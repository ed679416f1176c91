"""
Subscribes to channel mute and fader parameters on an X32 console and fires a Snapshot whenever
the observed state of a channel changes.
"""
import logging
import threading
import time
from contextlib import contextmanager

from x32link.conduit.udp import DatagramTransport, TransportError
from x32link.protocol.console import RENEWAL_PERIOD, TIME_FACTOR, channel_list, subscribe_paths
from x32link.protocol.osc import DecodeError, decode, flatten
from x32link.state.snapshot import Snapshot, build_snapshot
from x32link.state.tracker import ChannelStateTracker, as_float32
from x32link.support.events import EventSource
from x32link.support.loop import AsyncLoop
from x32link.support.schedule import PeriodicSchedule

logger = logging.getLogger(__name__)


class ListenerError(Exception):
    """ The listener could not be started or stopped. The message is suitable for display. """


class ListenerLoop(AsyncLoop):
    """
    Runs the listener on a background thread. Each iteration renews the subscriptions when they are due,
    waits a bounded time for a datagram and applies the messages it carries to the channel tracker.
    Each message that changes a channel fires one snapshot of the configured channels.

    The loop owns the transport and closes it on exit. Errors never leave the loop: malformed datagrams are
    dropped and a console that never answers simply leaves every channel in its default state.

    :param transport: the bound DatagramTransport
    :param target: the (host, port) of the console
    :param channels: the channel ids to report, in order. Empty means the default channels.
    :param threshold: the fader level an unmuted channel must exceed to be live, compared at float32 precision
    :param events: receives each Snapshot via fire()
    """

    def __init__(self, transport: DatagramTransport, target, channels, threshold, events: EventSource,
                 renewal_period=RENEWAL_PERIOD, time_factor=TIME_FACTOR, clock=time.monotonic, now=time.time):
        super().__init__(log=logger, name='x32-listener')
        self.transport = transport
        self.target = target
        self.channels = channel_list(channels)
        self.paths = subscribe_paths(self.channels)
        self.threshold = as_float32(threshold)
        self.events = events
        self.renewal_period = renewal_period
        self.time_factor = time_factor
        self.clock = clock
        self.now = now
        self.tracker = None
        self.schedule = None

    def startup(self):
        self.tracker = ChannelStateTracker()
        self.schedule = PeriodicSchedule(self.renewal_period, clock=self.clock)
        logger.info("listening to console %s:%s for channels %s" % (self.target[0], self.target[1],
                                                                    list(self.channels)))

    def loop(self):
        if self.schedule.due():
            self.subscribe()
        data = self.transport.receive()
        if data is not None:
            self.process_datagram(data)

    def shutdown(self):
        self.transport.close()
        logger.info("stopped listening to console %s:%s" % self.target)

    def subscribe(self):
        """ sends a subscription request for every tracked path """
        for path in self.paths:
            self.transport.send_subscribe(self.target, path, self.time_factor)

    def process_datagram(self, data) -> int:
        """
        Decodes a datagram and applies the messages it holds, in order.
        :return: the number of snapshots fired
        """
        try:
            packet = decode(data)
        except DecodeError as e:
            logger.debug("dropped datagram: %s" % e)
            return 0
        fired = 0
        for message in flatten(packet):
            if self.tracker.apply(message):
                self.emit()
                fired += 1
        return fired

    def emit(self) -> Snapshot:
        snapshot = build_snapshot(self.channels, self.tracker, self.threshold, self.now)
        self.events.fire(snapshot)
        return snapshot


class ListenerController:
    """
    Owns the listener loop. At most one loop runs at a time: start() stops and joins any running loop
    before it spawns a new one, and stop() waits for the loop to exit.

    Both methods may be called from any thread and any number of times. They are serialized by a lock;
    if the lock cannot be acquired within lock_timeout seconds a ListenerError is raised rather than
    proceeding.

    :param events: the EventSource that receives snapshots. Subscribers register handlers on it.
    :param transport_factory: callable returning a bound DatagramTransport
    """

    def __init__(self, events: EventSource=None, transport_factory=DatagramTransport.bind,
                 loop_factory=ListenerLoop, lock_timeout=5):
        self.events = events if events is not None else EventSource()
        self._transport_factory = transport_factory
        self._loop_factory = loop_factory
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._loop = None

    @contextmanager
    def _locked(self):
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise ListenerError("Listener lock unavailable")
        try:
            yield
        finally:
            self._lock.release()

    @property
    def running(self) -> bool:
        return self._loop is not None

    def start(self, host, port, channels=(), threshold=0.0):
        """
        Starts listening to the console at host:port, replacing any running listener.
        :param channels: the channel ids to report. Empty means channels 1 to 6.
        :param threshold: the fader level an unmuted channel must exceed to be live
        :raises ListenerError: if the arguments are invalid or the transport cannot be bound.
            No listener is running afterwards.
        """
        host = (host or '').strip()
        with self._locked():
            self._stop()
            if not host:
                raise ListenerError("Console host is required")
            if not 0 < port <= 65535:
                raise ListenerError("Invalid console port %s" % port)
            try:
                transport = self._transport_factory()
            except TransportError as e:
                raise ListenerError(str(e)) from e
            try:
                loop = self._loop_factory(transport, (host, port), channels, float(threshold), self.events)
                loop.start()
            except Exception as e:
                transport.close()
                raise ListenerError("Unable to start listener: %s" % e) from e
            self._loop = loop

    def stop(self):
        """
        Stops the running listener and waits for it to exit. Does nothing if no listener is running.
        """
        with self._locked():
            self._stop()

    def _stop(self):
        loop, self._loop = self._loop, None
        if loop is not None:
            loop.stop()
