"""The synchronous client is dead simple. It does not assume anything about your concurrency model (thread vs process) or force you to use it any particular way. It gets out of your way and lets you do what you want.

It does not open sockets itself: you hand it a connected duplex byte channel (see :class:`~.transport.StompFrameTransport`), and it speaks STOMP over that channel. All waits are bounded by the deadlines in your :class:`~stompcore.config.StompConfig`.

Example:

>>> client = Stomp(StompConfig(login='guest', passcode='guest', heartbeat=(1000, 0)), channel)
>>> client.transport.observers.add(StompHeartbeatEmitter(client.transport))
>>> client.connect()
>>> session = StompSession(client)
>>> session.subscribe('/queue/test', ack='client-individual')
'0'
>>> frame = session.read()
>>> session.ack(frame)
>>> session.unsubscribe()
>>> client.disconnect()
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
import collections
import logging
import time

from stompcore.error import StompConnectionError, StompConnectTimeout, StompError, StompMissingReceipt, StompUnexpectedResponse
from stompcore.protocol import StompFrame, StompProtocol, StompSpec, StompVersion
from stompcore.util import checkattr, uniqueId

from .transport import StompFrameTransport

LOG_CATEGORY = __name__

connected = checkattr('protocol')

class Stomp:
    """A synchronous STOMP client.

    :param config: A :class:`~stompcore.config.StompConfig` object.
    :param channel: A connected duplex byte channel (see :class:`~.transport.StompFrameTransport`).
    :param clock: A callable returning the current time in seconds which is used for the connect and receipt deadlines. Defaults to :func:`time.monotonic`.

    .. seealso :: :class:`~stompcore.config.StompConfig` for how to set session configuration options, :class:`~stompcore.protocol.session.StompSession` for a stateful API on top of this client.
    """
    transportFactory = StompFrameTransport

    def __init__(self, config, channel, clock=None):
        self.log = logging.getLogger(LOG_CATEGORY)
        self._config = config
        self.clock = clock or time.monotonic
        self.transport = self.transportFactory(channel)
        self._reset()

    @property
    def protocol(self):
        """The :class:`~stompcore.protocol.dialect.StompProtocol` of the established STOMP session."""
        if self._protocol is None:
            raise StompConnectionError('Not connected')
        return self._protocol

    @property
    def session(self):
        """The session id the broker assigned to the current STOMP session (if any)."""
        return self._session

    def connect(self):
        """Establish a STOMP session: send a **CONNECT** frame and wait for the broker's **CONNECTED** frame until the **connectTimeout** of the configuration has expired. The negotiated :attr:`protocol` is selected according to the version and the **server** banner of the broker.
        """
        if self._protocol is not None:
            raise StompConnectionError('Already connected to %s' % self.transport)
        config = self._config
        self.transport.parser.legacyMode = True
        frame = StompProtocol(config.clientId).getConnectFrame(config.login, config.passcode, config.versions, config.host, config.heartbeat)
        self.transport.writeFrame(frame)
        version = StompVersion(self._connectedFrame(), config.versions)
        if version.hasVersion(StompSpec.VERSION_1_1):
            self.transport.parser.legacyMode = False
        self._session = version.session
        self._protocol = version.protocol(config.clientId)
        self.log.info('STOMP session established with broker %s [version=%s, session=%s]' % (self.transport, version.version, version.session))

    @connected
    def disconnect(self, sync=False):
        """Send a **DISCONNECT** frame (best effort) and close the channel."""
        try:
            self.sendFrame(self.protocol.getDisconnectFrame(), sync)
        except StompError as e:
            self.log.warning('Could not disconnect cleanly [%s]' % e)
        try:
            self.transport.close()
        finally:
            self.log.info('Disconnected from %s' % self.transport)
            self._reset()

    @connected
    def send(self, destination, bodyOrFrame=b'', headers=None, sync=None):
        """Send a message to a destination.

        :param bodyOrFrame: Either a message body, or a prepared :class:`~stompcore.protocol.frame.StompFrame`. Headers which are already present in the frame are kept.
        :param headers: Additional headers.
        :param sync: See :meth:`sendFrame`.
        """
        if isinstance(bodyOrFrame, StompFrame):
            frame = bodyOrFrame
            frame.addHeaders(headers or {})
            frame.set(StompSpec.DESTINATION_HEADER, destination)
        else:
            frame = self.protocol.getSendFrame(destination, bodyOrFrame, headers)
        return self.sendFrame(frame, sync)

    @connected
    def sendFrame(self, frame, sync=None):
        """Send a raw STOMP frame.

        :param sync: If :obj:`True`, add a **receipt** header and wait for the matching **RECEIPT** frame until the **receiptTimeout** of the configuration has expired. Frames which arrive meanwhile are queued for :meth:`readFrame`. If :obj:`None`, the **sync** setting of the configuration applies.
        """
        if sync is None:
            sync = self._config.sync
        if not sync:
            self.transport.writeFrame(frame)
            return True
        receipt = uniqueId()
        frame.set(StompSpec.RECEIPT_HEADER, receipt)
        self.transport.writeFrame(frame)
        return self._waitForReceipt(receipt)

    def readFrame(self):
        """Return the next frame (queued frames first), or :obj:`None` if there is none right now.
        """
        if self._unprocessed:
            return self._unprocessed.popleft()
        return self.transport.readFrame()

    def canRead(self, timeout=None):
        """Tell whether there is a frame (or at least incoming data) to read.

        :param timeout: This is the time (in seconds) to wait for data to become available. If :obj:`None`, we will wait indefinitely.
        """
        if self._unprocessed:
            return True
        frame = self.transport.readFrame()
        if frame is not None:
            self._unprocessed.append(frame)
            return True
        return self.transport.canRead(timeout)

    def isBufferEmpty(self):
        """Whether there are neither queued frames nor buffered wire data which may still yield a frame."""
        return (not self._unprocessed) and self.transport.isBufferEmpty()

    def _connectedFrame(self):
        deadline = self.clock() + self._config.connectTimeout
        while True:
            frame = self.transport.readFrame()
            if frame is not None:
                if frame.command != StompSpec.CONNECTED:
                    raise StompUnexpectedResponse(frame, 'Expected a %s frame.' % StompSpec.CONNECTED)
                return frame
            remaining = deadline - self.clock()
            if remaining <= 0:
                raise StompConnectTimeout('STOMP session connect failed [timeout=%s]' % self._config.connectTimeout)
            self.transport.canRead(remaining)

    def _waitForReceipt(self, receipt):
        deadline = self.clock() + self._config.receiptTimeout
        while True:
            frame = self.transport.readFrame()
            if frame is not None:
                if frame.command != StompSpec.RECEIPT:
                    self._unprocessed.append(frame)
                elif frame.get(StompSpec.RECEIPT_ID_HEADER) == receipt:
                    return True
                else:
                    raise StompUnexpectedResponse(frame, 'Expected receipt id %s.' % receipt)
            remaining = deadline - self.clock()
            if remaining <= 0:
                raise StompMissingReceipt(receipt)
            self.transport.canRead(remaining)

    def _reset(self):
        self._protocol = None
        self._session = None
        self._unprocessed = collections.deque()
