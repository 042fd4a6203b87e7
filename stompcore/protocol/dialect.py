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
import logging

from stompcore.error import StompProtocolError

from . import commands
from .spec import StompSpec

LOG_CATEGORY = __name__

class StompDialect:
    """The broker dialects which are known to :class:`StompProtocol`. A dialect only changes the headers of outgoing frames."""
    GENERIC = 'generic'
    ACTIVEMQ = 'activemq'
    APOLLO = 'apollo'
    OPENMQ = 'openmq'
    RABBITMQ = 'rabbitmq'

    # order matters: the first matching banner wins
    BANNERS = [
        (StompSpec.SERVER_RABBITMQ, RABBITMQ),
        (StompSpec.SERVER_APOLLO, APOLLO),
        (StompSpec.SERVER_ACTIVEMQ, ACTIVEMQ),
        (StompSpec.SERVER_OPENMQ, OPENMQ)
    ]

    @classmethod
    def detect(cls, server):
        """Select the dialect for a **server** banner (case-insensitive substring match). An absent or unknown banner yields :attr:`GENERIC`."""
        server = (server or '').strip().lower()
        for (banner, dialect) in cls.BANNERS:
            if banner in server:
                return dialect
        return cls.GENERIC

class StompProtocol:
    """Builds the outgoing frames of a negotiated STOMP session. The frames depend on the STOMP protocol :attr:`version` and on the broker :attr:`dialect`, which is selected once from the **server** banner.

    :param clientId: The client id of the connection. It is sent with **CONNECT** and **DISCONNECT**, and names durable subscriptions.
    :param version: The negotiated STOMP protocol version.
    :param server: The **server** banner of the **CONNECTED** frame (if any).

    .. note :: The prefetch headers default to 1: ActiveMQ's **activemq.prefetchSize** (:attr:`prefetchSize`) and RabbitMQ's **prefetch-count** (:attr:`prefetchCount`).
    """
    def __init__(self, clientId=None, version=None, server=None):
        self.clientId = clientId
        self.version = commands.version(version)
        self.server = server
        self.dialect = StompDialect.detect(server)
        self.prefetchSize = 1
        self.prefetchCount = 1

    def hasVersion(self, version):
        return commands.hasVersion(self.version, version)

    def getConnectFrame(self, login='', passcode='', versions=None, host=None, heartbeat=(0, 0)):
        return commands.connect(login, passcode, versions, host, heartbeat, self.clientId)

    def getSubscribeFrame(self, destination, subscriptionId=None, ack=StompSpec.ACK_AUTO, selector=None, durable=False):
        frame = commands.subscribe(destination, subscriptionId, ack, selector, self.version)
        if self.dialect == StompDialect.ACTIVEMQ:
            frame.set('activemq.prefetchSize', self.prefetchSize)
            if durable:
                self._durableName(frame)
        elif self.dialect == StompDialect.RABBITMQ:
            frame.set('prefetch-count', self.prefetchCount)
            if durable:
                frame.set('persistent', 'true')
        elif self.dialect == StompDialect.APOLLO:
            if durable and self.clientId:
                frame.set('persistent', 'true')
        return frame

    def getUnsubscribeFrame(self, destination, subscriptionId=None, durable=False):
        frame = commands.unsubscribe(destination, subscriptionId, self.version)
        if not durable:
            return frame
        if self.dialect == StompDialect.ACTIVEMQ:
            self._durableName(frame)
        elif self.dialect in (StompDialect.RABBITMQ, StompDialect.APOLLO):
            frame.set('persistent', 'true')
        return frame

    def getSendFrame(self, destination, body=b'', headers=None, transaction=None):
        return commands.send(destination, body, headers, transaction, self.version)

    def getAckFrame(self, frame, transaction=None):
        ack = commands.ack(frame, transaction, self.version)
        if self.dialect == StompDialect.OPENMQ:
            ack.set(StompSpec.SUBSCRIPTION_HEADER, frame.get(StompSpec.SUBSCRIPTION_HEADER))
        return ack

    def getNackFrame(self, frame, transaction=None, requeue=None):
        """Create a **NACK** frame.

        :param requeue: Only supported by RabbitMQ: :obj:`True` or :obj:`False` renders a **requeue** header. Any other dialect raises a :class:`ValueError` unless **requeue** is :obj:`None`.
        """
        if (requeue is not None) and (self.dialect != StompDialect.RABBITMQ):
            raise ValueError('requeue header not supported by %s broker [server=%s]' % (self.dialect, self.server))
        nack = commands.nack(frame, transaction, self.version)
        if requeue is not None:
            nack.set('requeue', 'true' if requeue else 'false')
        return nack

    def getBeginFrame(self, transaction=None):
        return commands.begin(transaction, self.version)

    def getCommitFrame(self, transaction=None):
        return commands.commit(transaction, self.version)

    def getAbortFrame(self, transaction=None):
        return commands.abort(transaction, self.version)

    def getDisconnectFrame(self):
        return commands.disconnect(self.clientId, self.version)

    def _durableName(self, frame):
        if not self.clientId:
            raise StompProtocolError('Durable subscriptions need a client id [server=%s]' % self.server)
        frame.set('activemq.subscriptionName', self.clientId)
        frame.set('durable-subscriber-name', self.clientId)

    def __repr__(self):
        return '%s(clientId=%r, version=%r, server=%r)' % (self.__class__.__name__, self.clientId, self.version, self.server)

class StompVersion:
    """The outcome of a STOMP handshake, derived from the broker's **CONNECTED** frame.

    :param frame: The **CONNECTED** frame.
    :param versions: The versions we offered in the **CONNECT** frame, or :obj:`None` (all supported versions).
    """
    def __init__(self, frame, versions=None):
        self.log = logging.getLogger(LOG_CATEGORY)
        self.version, self.server, self.session = commands.connected(frame, versions)

    def hasVersion(self, version):
        return commands.hasVersion(self.version, version)

    def protocol(self, clientId=None):
        """Create the :class:`StompProtocol` for this session."""
        protocol = StompProtocol(clientId, self.version, self.server)
        self.log.info('Using %s dialect [version=%s, server=%s]' % (protocol.dialect, self.version, self.server))
        return protocol
