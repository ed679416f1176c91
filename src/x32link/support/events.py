import logging
from queue import Empty, Queue

logger = logging.getLogger(__name__)


class EventSource(object):
    """
    Delivers events to the registered handlers on the thread that fires them.
    Delivery is fire-and-forget: a handler that raises is logged and the remaining
    handlers still receive the event.
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        self._fire(*args, **kwargs)

    def fire_all(self, events):
        self._fire_all(events)

    def _fire_all(self, events):
        for e in events:
            self._fire(e)

    def _fire(self, *args, **kwargs):
        for handler in self.handlers():
            try:
                handler(*args, **kwargs)
            except Exception as e:
                logger.exception("event handler %s failed: %s" % (handler, e))


class QueuedEventSource(EventSource):
    """
    the public fire() methods post events to the queue. These are delivered to the handlers
    when a thread calls publish(), so a host can receive events from the listener thread on its own thread.
    Can itself be registered as a handler on another EventSource.
    """
    def __init__(self):
        super().__init__()
        self.event_queue = Queue()

    def __call__(self, event):
        self.fire(event)

    def fire(self, event):
        self.event_queue.put(event)

    def fire_all(self, events):
        for e in events:
            self.fire(e)

    def _drain(self):
        events = []
        while True:
            try:
                events.append(self.event_queue.get_nowait())
            except Empty:
                return events

    def publish(self):
        """ publishes any queued events on the calling thread.
        :return: the number of events published
        """
        events = self._drain()
        if events:
            self._fire_all(events)
        return len(events)

    def latest(self):
        """ discards all queued events except the newest, which is returned. None if the queue is empty. """
        events = self._drain()
        return events[-1] if events else None
