import logging
import socket

from pythonosc.osc_message_builder import BuildError

from x32link.protocol.console import RECEIVE_TIMEOUT, SUBSCRIBE_ADDRESS, TIME_FACTOR
from x32link.protocol.osc import encode_message

logger = logging.getLogger(__name__)

RECEIVE_BUFFER_SIZE = 2048
ANY_ADDRESS = ('0.0.0.0', 0)


class TransportError(IOError):
    """ Indicates the datagram transport could not be set up. """


class DatagramTransport:
    """
    A bound UDP endpoint used to subscribe to console parameters and to receive the updates
    the console streams back. The protocol is connectionless: the console address is given with each send.

    Sends are best effort and receive errors are not raised; the next subscription renewal retries.
    :param sock The bound datagram socket
    """
    def __init__(self, sock: socket.socket):
        self.sock = sock

    @classmethod
    def bind(cls, local=ANY_ADDRESS, timeout=RECEIVE_TIMEOUT):
        """
        Creates a transport bound to a local endpoint, by default an ephemeral port on all interfaces.
        :param timeout: the longest time receive() blocks, in seconds
        :raises TransportError: if the socket cannot be created or bound
        """
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportError("unable to create socket: %s" % e) from e
        try:
            sock.settimeout(timeout)
            sock.bind(local)
        except OSError as e:
            sock.close()
            raise TransportError("unable to bind %s:%s: %s" % (local[0], local[1], e)) from e
        transport = cls(sock)
        logger.info("bound console transport to %s:%s" % transport.local_address)
        return transport

    @property
    def open(self) -> bool:
        return self.sock.fileno() >= 0

    @property
    def local_address(self):
        return self.sock.getsockname()

    def send_subscribe(self, target, address_pattern, renewal=TIME_FACTOR):
        """
        Asks the console at target to stream the parameter at address_pattern.
        :param target: the (host, port) of the console
        :param renewal: the time factor sent with the request
        :return: True if the request was handed to the network
        """
        try:
            dgram = encode_message(SUBSCRIBE_ADDRESS, address_pattern, renewal)
            self.sock.sendto(dgram, target)
            return True
        except (BuildError, OSError, OverflowError) as e:
            logger.debug("subscribe %s to %s failed: %s" % (address_pattern, target, e))
            return False

    def receive(self):
        """
        Waits up to the receive timeout for a datagram.
        :return: the datagram payload, or None if nothing arrived or the socket reported an error.
        """
        try:
            data, _ = self.sock.recvfrom(RECEIVE_BUFFER_SIZE)
            return data
        except (socket.timeout, BlockingIOError):
            return None
        except OSError as e:
            logger.debug("receive on %s failed: %s" % (self.sock, e))
            return None

    def close(self):
        self.sock.close()
