"""
The process wide entry points used by the host application.

A single ListenerController is shared by the whole process. Handlers registered with add_listener()
receive each Snapshot on the listener thread; they should hand the snapshot off rather than block.
"""
import logging

from x32link.casparcg.amcp import AmcpClient
from x32link.config.settings import Settings, load_settings
from x32link.listener import ListenerController

logger = logging.getLogger(__name__)

_controller = ListenerController()


def controller() -> ListenerController:
    return _controller


def start_listener(host, port, channels=(), threshold=0.0):
    """
    Starts listening to the console, replacing any listener already running.
    :raises ListenerError: with a message suitable for display
    """
    _controller.start(host, port, channels, threshold)


def stop_listener():
    """ Stops the listener if one is running. """
    _controller.stop()


def add_listener(handler):
    """ :param handler: a callable that receives each Snapshot """
    _controller.events.add(handler)


def remove_listener(handler):
    _controller.events.remove(handler)


def start_from_config(settings: Settings=None) -> bool:
    """
    Starts or stops the listener to match the [listener] settings.
    :param settings: the settings to apply, loaded from the configuration files when not given
    :return: True if the listener was started
    """
    listener = (settings or load_settings()).listener
    if not listener.enabled:
        logger.info("console listener disabled in settings")
        stop_listener()
        return False
    start_listener(listener.host, listener.port, listener.channels, listener.threshold)
    return True


def amcp_client(settings: Settings=None) -> AmcpClient:
    """ a client for the playout server named in the [amcp] settings """
    return AmcpClient.from_settings((settings or load_settings()).amcp)
