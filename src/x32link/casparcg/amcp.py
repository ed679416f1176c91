"""
A minimal client for AMCP, the line based text protocol spoken by the CasparCG playout server.

Each command uses its own TCP connection: the command line is written, the write side is shut down
and the reply is read until the server closes the connection.
"""
import logging
import socket

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5250
DEFAULT_TIMEOUT = 1.2
LINE_ENDING = '\r\n'
NO_RESPONSE = 'No response'
READ_SIZE = 4096


class AmcpError(Exception):
    """ A command could not be formed, or the server could not be reached. """


def sanitize_value(value) -> str:
    """
    >>> sanitize_value('  PLAY 1-10 AMB  ')
    'PLAY 1-10 AMB'
    """
    value = str(value)
    if '\n' in value or '\r' in value:
        raise AmcpError("AMCP values cannot contain line breaks")
    return value.strip()


def escape_quoted(value) -> str:
    """
    Escapes a value for use inside a double quoted AMCP parameter.
    >>> escape_quoted('say "hi"')
    'say \\\\"hi\\\\"'
    """
    return value.replace('\\', '\\\\').replace('"', '\\"')


def send_command(host, port, command, timeout=DEFAULT_TIMEOUT) -> str:
    """
    Sends one command line and returns the server's reply.
    :param timeout: seconds allowed for the connection and for each read or write
    :return: the reply with surrounding whitespace removed, or 'No response' when the server sent nothing
    :raises AmcpError: if the server cannot be reached or the exchange fails
    """
    endpoint = (host.strip(), port)
    payload = (command.strip() + LINE_ENDING).encode('utf-8')
    try:
        with socket.create_connection(endpoint, timeout=timeout) as sock:
            sock.sendall(payload)
            try:
                sock.shutdown(socket.SHUT_WR)
            except OSError as e:
                logger.debug("half close to %s:%s failed: %s" % (endpoint[0], endpoint[1], e))
            chunks = []
            while True:
                chunk = sock.recv(READ_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
    except OSError as e:
        logger.warning("AMCP command to %s:%s failed: %s" % (endpoint[0], endpoint[1], e))
        raise AmcpError(str(e)) from e
    response = b''.join(chunks).decode('utf-8', errors='replace').strip()
    logger.debug("AMCP %s -> %s" % (command.strip(), response))
    return response or NO_RESPONSE


class AmcpClient:
    """
    Sends commands to one CasparCG server. Template commands address a channel and layer
    and always use flash layer 1.
    """

    def __init__(self, host, port=DEFAULT_PORT, timeout=DEFAULT_TIMEOUT):
        self.host = host
        self.port = port
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings):
        """ :param settings: an AmcpSettings """
        return cls(settings.host, settings.port, settings.timeout)

    def _send(self, command):
        return send_command(self.host, self.port, command, self.timeout)

    def ping(self):
        """ asks the server for its INFO listing, which shows it is reachable """
        return self._send('INFO')

    def send(self, command):
        """ sends a raw command line """
        clean = sanitize_value(command)
        if not clean:
            raise AmcpError("Command is required")
        return self._send(clean)

    def play_template(self, channel, layer, template, data=''):
        clean_template = sanitize_value(template)
        if not clean_template:
            raise AmcpError("Template name is required")
        clean_data = sanitize_value(data)
        command = 'CG %d-%d ADD 1 "%s" 1' % (channel, layer, escape_quoted(clean_template))
        if clean_data:
            command += ' "%s"' % escape_quoted(clean_data)
        return self._send(command)

    def update_template(self, channel, layer, data):
        clean_data = sanitize_value(data)
        return self._send('CG %d-%d UPDATE 1 "%s"' % (channel, layer, escape_quoted(clean_data)))

    def stop_template(self, channel, layer):
        return self._send('CG %d-%d STOP 1' % (channel, layer))
