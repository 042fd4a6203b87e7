"""This module implements a low-level and stateless API for the frames of the STOMP protocol versions 1.0, 1.1, and 1.2. All STOMP frames are represented as :class:`~.frame.StompFrame` objects. It forms the basis for :class:`~.dialect.StompProtocol`, which adds the broker dialect on top of it, and (via :class:`~.dialect.StompProtocol`) for :class:`~.session.StompSession`.

.. note :: Whenever you have to pass a **version** parameter to a command, this is because the behavior of that command depends on the STOMP protocol version of your current session. The default version is the value of :attr:`StompSpec.DEFAULT_VERSION`. Any command which does not conform to the STOMP protocol version in question will result in a :class:`~stompcore.error.StompProtocolError`.

Examples:

>>> from stompcore.protocol import commands
>>> from stompcore.protocol.frame import StompFrame
>>> frame = commands.subscribe('/queue/test', '0', ack='client-individual', version='1.1')
>>> frame.headers
{'destination': '/queue/test', 'ack': 'client-individual', 'id': '0'}
>>> message = StompFrame('MESSAGE', {'destination': '/queue/test', 'message-id': '007', 'subscription': '0'})
>>> commands.ack(message, version='1.2').headers
{'id': '007'}
>>> commands.nack(message, version='1.0')
Traceback (most recent call last):
  ...
stompcore.error.StompProtocolError: NACK not supported (version 1.0)
"""
"""
Copyright 2012 Mozes, Inc.

   Licensed under the Apache License, Version 2.0 (the "License");
   you may not use this file except in compliance with the License.
   You may obtain a copy of the License at

       http://www.apache.org/licenses/LICENSE-2.0

   Unless required by applicable law or agreed to in writing, software
   distributed under the License is distributed on an "AS IS" BASIS,
   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either expressed or implied.
   See the License for the specific language governing permissions and
   limitations under the License.
"""
from stompcore.error import StompProtocolError, StompUnexpectedResponse

from .frame import StompFrame
from .spec import StompSpec

# outgoing frames

def connect(login='', passcode='', versions=None, host=None, heartbeat=(0, 0), clientId=None):
    """Create a **CONNECT** frame. It is always rendered STOMP 1.0 style, because the version is not negotiated yet.

    :param login: The **login** header. Credentials are only sent if at least one of **login** and **passcode** is non-empty.
    :param passcode: The **passcode** header.
    :param versions: A list of the STOMP versions we wish to support (the **accept-version** header), or :obj:`None` (all supported versions).
    :param host: The **host** header. If :obj:`None`, no such header is sent.
    :param heartbeat: A pair (send, receive) of heart-beat intervals in ms.
    :param clientId: The **client-id** header.
    """
    frame = StompFrame(StompSpec.CONNECT, legacyMode=True)
    if login or passcode:
        frame.headers[StompSpec.LOGIN_HEADER] = login or ''
        frame.headers[StompSpec.PASSCODE_HEADER] = passcode or ''
    frame.set(StompSpec.CLIENT_ID_HEADER, clientId)
    versions = StompSpec.VERSIONS if (versions is None) else [version(v) for v in versions]
    frame.set(StompSpec.ACCEPT_VERSION_HEADER, ','.join(versions))
    frame.set(StompSpec.HOST_HEADER, host)
    frame.set(StompSpec.HEART_BEAT_HEADER, StompSpec.HEART_BEAT_SEPARATOR.join(str(int(beat)) for beat in heartbeat))
    return frame

def disconnect(clientId=None, version=None):
    """Create a **DISCONNECT** frame.

    :param clientId: The **client-id** header (if any).
    """
    frame = _frame(StompSpec.DISCONNECT, version)
    frame.set(StompSpec.CLIENT_ID_HEADER, clientId)
    return frame

def send(destination, body=b'', headers=None, transaction=None, version=None):
    """Create a **SEND** frame.

    :param destination: Destination for the frame.
    :param body: Message body. Binary content is allowed; a body containing NUL bytes is rendered with a **content-length** header.
    :param headers: Additional STOMP headers.
    :param transaction: The **transaction** header (if any).
    """
    frame = _frame(StompSpec.SEND, version, headers, body)
    frame.set(StompSpec.DESTINATION_HEADER, destination)
    frame.set(StompSpec.TRANSACTION_HEADER, transaction)
    return frame

def subscribe(destination, subscriptionId=None, ack=StompSpec.ACK_AUTO, selector=None, version=None):
    """Create a **SUBSCRIBE** frame.

    :param destination: Destination for the subscription.
    :param subscriptionId: The **id** header.
    :param ack: The **ack** mode. ``client-individual`` is only valid as of STOMP 1.1.
    :param selector: The **selector** header (if any).
    """
    version = _version(version)
    if ack not in StompSpec.CLIENT_ACK_MODES[version]:
        raise StompProtocolError('"%s" is not a valid ack value for STOMP %s [valid=%s]' % (ack, version, ', '.join(sorted(StompSpec.CLIENT_ACK_MODES[version]))))
    frame = _frame(StompSpec.SUBSCRIBE, version)
    frame.set(StompSpec.DESTINATION_HEADER, destination)
    frame.set(StompSpec.ACK_HEADER, ack)
    frame.set(StompSpec.ID_HEADER, subscriptionId)
    frame.set(StompSpec.SELECTOR_HEADER, selector)
    return frame

def unsubscribe(destination, subscriptionId=None, version=None):
    """Create an **UNSUBSCRIBE** frame.
    """
    frame = _frame(StompSpec.UNSUBSCRIBE, version)
    frame.set(StompSpec.DESTINATION_HEADER, destination)
    frame.set(StompSpec.ID_HEADER, subscriptionId)
    return frame

def ack(frame, transaction=None, version=None):
    """Create an **ACK** frame for a received **MESSAGE** frame.

    :param frame: The :class:`~.frame.StompFrame` object representing the **MESSAGE** frame we wish to ack. As of STOMP 1.2, its **ack** header identifies the message; otherwise (and as a fallback) its **message-id** header is used.
    :param transaction: The **transaction** header (if any).
    """
    return _ack(StompSpec.ACK, frame, transaction, _version(version))

def nack(frame, transaction=None, version=None):
    """Create a **NACK** frame for a received **MESSAGE** frame. Not supported in STOMP 1.0.

    .. seealso :: :func:`ack`
    """
    version = _version(version)
    if version == StompSpec.VERSION_1_0:
        raise StompProtocolError('%s not supported (version %s)' % (StompSpec.NACK, version))
    return _ack(StompSpec.NACK, frame, transaction, version)

def begin(transaction, version=None):
    """Create a **BEGIN** frame.

    :param transaction: The id of the transaction.
    """
    return _transaction(StompSpec.BEGIN, transaction, version)

def commit(transaction, version=None):
    """Create a **COMMIT** frame."""
    return _transaction(StompSpec.COMMIT, transaction, version)

def abort(transaction, version=None):
    """Create an **ABORT** frame."""
    return _transaction(StompSpec.ABORT, transaction, version)

# incoming frames

def connected(frame, versions=None):
    """Handle a **CONNECTED** frame. Returns the negotiated version, the **server** banner, and the **session** id.

    :param versions: The same **versions** parameter you used to create the **CONNECT** frame.
    """
    _checkCommand(frame, [StompSpec.CONNECTED])
    versions = StompSpec.VERSIONS if (versions is None) else [_version(v) for v in versions]
    negotiated = frame.get(StompSpec.VERSION_HEADER) or StompSpec.VERSION_1_0
    if negotiated not in versions:
        raise StompProtocolError('Server version incompatible with accepted versions %s [headers=%s]' % (versions, frame.headers))
    return negotiated, frame.get(StompSpec.SERVER_HEADER), frame.get(StompSpec.SESSION_HEADER)

def receipt(frame):
    """Handle a **RECEIPT** frame. Returns the receipt id which you can use to match this receipt to the command that requested it.
    """
    _checkCommand(frame, [StompSpec.RECEIPT])
    return _checkHeader(frame, StompSpec.RECEIPT_ID_HEADER)

# STOMP protocol version

def version(version=None):
    """Check whether **version** is a valid STOMP protocol version.

    :param version: A candidate version, or :obj:`None` (which is equivalent to the value of :attr:`StompSpec.DEFAULT_VERSION`).
    """
    if version is None:
        version = StompSpec.DEFAULT_VERSION
    if version not in StompSpec.VERSIONS:
        raise StompProtocolError('Version is not supported [%s]' % version)
    return version
_version = version

def hasVersion(version, minimum):
    """Whether **version** is equal to or newer than **minimum**."""
    return StompSpec.VERSIONS.index(_version(version)) >= StompSpec.VERSIONS.index(minimum)

# private helper methods

def _frame(command, version, headers=None, body=b''):
    return StompFrame(command, headers, body, legacyMode=(_version(version) == StompSpec.VERSION_1_0))

def _transaction(command, transaction, version):
    frame = _frame(command, version)
    frame.set(StompSpec.TRANSACTION_HEADER, transaction)
    return frame

def _ack(command, frame, transaction, version):
    messageId = frame.get(StompSpec.ACK_HEADER) or frame.ensureMessageId()
    result = _frame(command, version)
    result.set(StompSpec.TRANSACTION_HEADER, transaction)
    if hasVersion(version, StompSpec.VERSION_1_2):
        result.set(StompSpec.ID_HEADER, messageId)
    else:
        result.set(StompSpec.MESSAGE_ID_HEADER, messageId)
        if hasVersion(version, StompSpec.VERSION_1_1):
            result.set(StompSpec.SUBSCRIPTION_HEADER, frame.get(StompSpec.SUBSCRIPTION_HEADER))
    return result

def _checkCommand(frame, commands):
    if frame.command not in commands:
        raise StompUnexpectedResponse(frame, 'Expected %s.' % ' or '.join(commands))

def _checkHeader(frame, header):
    value = frame.get(header)
    if value is None:
        raise StompProtocolError('Invalid %s frame (%s header mandatory) [headers=%s]' % (frame.command, header, frame.headers))
    return value
