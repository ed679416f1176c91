"""
Decodes OSC datagrams into packets and flattens bundles into the messages they carry.

A packet is either a Message (an address and its arguments) or a Bundle holding further packets.
Parsing of the wire format is done by python-osc; this module converts the result into plain value
objects so the rest of the bridge does not depend on the parser's types.
"""
import struct

from pythonosc import osc_bundle, osc_message
from pythonosc.osc_bundle_builder import IMMEDIATELY, OscBundleBuilder
from pythonosc.osc_message_builder import OscMessageBuilder
from pythonosc.parsing import osc_types

from x32link.support.mixins import CommonEqualityMixin, StringerMixin


class DecodeError(ValueError):
    """
    Raised when a datagram is not a well-formed OSC message or bundle.
    """


# errors the parser may raise on truncated or garbage input
_parse_errors = (osc_message.ParseError, osc_bundle.ParseError, osc_types.ParseError,
                 IndexError, UnicodeDecodeError, struct.error)


class Packet:
    """ The base of the two packet kinds. """


class Message(Packet, CommonEqualityMixin, StringerMixin):
    """
    A single OSC message.
    :param address: the address pattern, e.g. /ch/03/mix/on
    :param args: the argument values in wire order. int32/int64 arrive as int, float32/float64 as float,
        strings as str, blobs as bytes, T/F as bool and nil as None.
    """
    def __init__(self, address, args=()):
        self.address = address
        self.args = tuple(args)


class Bundle(Packet, CommonEqualityMixin, StringerMixin):
    """
    A bundle of packets, which may themselves be bundles.
    """
    def __init__(self, timetag=IMMEDIATELY, content=()):
        self.timetag = timetag
        self.content = tuple(content)


def decode(dgram) -> Packet:
    """
    Decodes a datagram.
    :param dgram: the datagram payload
    :return: the Message or Bundle encoded in the datagram
    :raises DecodeError: when the datagram is truncated, garbage or neither a message nor a bundle.
    """
    dgram = bytes(dgram)
    try:
        if osc_bundle.OscBundle.dgram_is_bundle(dgram):
            return _from_parsed(osc_bundle.OscBundle(dgram))
        if osc_message.OscMessage.dgram_is_message(dgram):
            return _from_parsed(osc_message.OscMessage(dgram))
    except _parse_errors as e:
        raise DecodeError("malformed OSC datagram: %s" % e) from e
    raise DecodeError("datagram is neither an OSC message nor a bundle (%d bytes)" % len(dgram))


def _from_parsed(parsed):
    if isinstance(parsed, osc_bundle.OscBundle):
        return Bundle(parsed.timestamp, [_from_parsed(content) for content in parsed])
    return Message(parsed.address, parsed.params)


def flatten(packet: Packet):
    """
    Expands bundles depth-first into the messages they contain, preserving order.
    >>> flatten(Bundle(content=[Message('/a'), Bundle(content=[Message('/b')]), Message('/c')]))
    [Message(address='/a', args=()), Message(address='/b', args=()), Message(address='/c', args=())]
    """
    if isinstance(packet, Bundle):
        return [message for content in packet.content for message in flatten(content)]
    return [packet]


def _build(packet: Packet):
    if isinstance(packet, Bundle):
        builder = OscBundleBuilder(packet.timetag)
        for content in packet.content:
            builder.add_content(_build(content))
        return builder.build()
    builder = OscMessageBuilder(address=packet.address)
    for arg in packet.args:
        builder.add_arg(arg)
    return builder.build()


def encode(packet: Packet) -> bytes:
    """
    Encodes a message or bundle as a datagram. Argument types are inferred from the python values.
    :raises pythonosc.osc_message_builder.BuildError: if a value cannot be encoded
    """
    return _build(packet).dgram


def encode_message(address, *args) -> bytes:
    """
    Encodes a single message.
    >>> encode_message('/info')
    b'/info\\x00\\x00\\x00,\\x00\\x00\\x00'
    """
    return encode(Message(address, args))
