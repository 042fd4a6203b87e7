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
import unittest

from mock import Mock
import simplejson
from twisted.internet import task

from stompcore.config import StompConfig
from stompcore.error import StompBrokerError, StompConnectionError, StompConnectTimeout, StompMissingReceipt, StompProtocolError, StompUnexpectedResponse
from stompcore.protocol import StompDialect, StompFrame, StompHeartbeatEmitter, StompMap, StompParser, StompSession, StompSpec
from stompcore.sync import Stomp

logging.basicConfig(level=logging.DEBUG)

CONNECTED = b'CONNECTED\nversion:1.2\nserver:ActiveMQ/5.8.0\nsession:ID:4711\n\n\x00'

class FakeChannel:
    """A channel which answers from a script of incoming byte chunks and records everything written. Each read advances the clock, and so does waiting for data which never comes."""
    def __init__(self, clock, incoming=None, step=0.1):
        self.clock = clock
        self.step = step
        self.incoming = list(incoming or [])
        self.written = []
        self.reads = 0
        self.waits = []
        self.connected = True
        self.sendAlive = Mock(return_value=True)
        self.close = Mock()

    def read(self, maxBytes):
        self.reads += 1
        self.clock.advance(self.step)
        return self.incoming.pop(0) if self.incoming else b''

    def canRead(self, timeout):
        self.waits.append(timeout)
        if self.incoming:
            return True
        self.clock.advance(timeout)
        return False

    def write(self, data):
        self.written.append(data)

    def isConnected(self):
        return self.connected

    def readTimeout(self):
        return (0, 10000)

    def frames(self):
        parser = StompParser()
        for data in self.written:
            parser.feed(data)
        frames = []
        while True:
            frame = parser.nextFrame()
            if frame is None:
                return frames
            frames.append(frame)

class StompTest(unittest.TestCase):
    def setUp(self):
        self.clock = task.Clock()

    def _client(self, incoming=None, **kwargs):
        self.channel = FakeChannel(self.clock, incoming)
        return Stomp(StompConfig(**kwargs), self.channel, clock=self.clock.seconds)

    def _connected_client(self, incoming=None, **kwargs):
        client = self._client([CONNECTED] + list(incoming or []), **kwargs)
        client.connect()
        return client

    def test_connect(self):
        client = self._client([CONNECTED], login='curious', passcode='george', host='vhost', clientId='client-7', heartbeat=(1000, 0))
        client.connect()
        self.assertEqual(self.channel.written, [b'CONNECT\nlogin:curious\npasscode:george\nclient-id:client-7\naccept-version:1.0,1.1,1.2\nhost:vhost\nheart-beat:1000,0\n\n\x00'])
        self.assertEqual(client.session, 'ID:4711')
        self.assertEqual(client.protocol.version, '1.2')
        self.assertEqual(client.protocol.dialect, StompDialect.ACTIVEMQ)
        self.assertEqual(client.protocol.clientId, 'client-7')
        self.assertFalse(client.transport.parser.legacyMode)

    def test_connect_version_1_0_keeps_legacy_parser(self):
        client = self._client([b'CONNECTED\nsession:1\n\n\x00'])
        client.connect()
        self.assertEqual(client.protocol.version, '1.0')
        self.assertTrue(client.transport.parser.legacyMode)

    def test_connect_twice(self):
        client = self._connected_client()
        self.assertRaises(StompConnectionError, client.connect)

    def test_connect_timeout(self):
        client = self._client(connectTimeout=0.5)
        self.assertRaises(StompConnectTimeout, client.connect)
        self.assertEqual(self.channel.reads, 2)
        self.assertEqual(len(self.channel.waits), 1)
        self.assertAlmostEqual(self.channel.waits[0], 0.4)
        self.assertRaises(StompConnectionError, lambda: client.protocol)

    def test_connect_error_frame(self):
        client = self._client([b'ERROR\nmessage:bad credentials\n\n\x00'])
        self.assertRaises(StompBrokerError, client.connect)

    def test_connect_unexpected_frame(self):
        client = self._client([b'RECEIPT\nreceipt-id:1\n\n\x00'])
        self.assertRaises(StompUnexpectedResponse, client.connect)

    def test_connect_version_not_offered(self):
        client = self._client([CONNECTED], versions=['1.0', '1.1'])
        self.assertRaises(StompProtocolError, client.connect)

    def test_commands_before_connect(self):
        client = self._client()
        self.assertRaises(StompConnectionError, client.send, '/queue/a', b'hi')
        self.assertRaises(StompConnectionError, client.sendFrame, StompFrame(StompSpec.SEND))
        self.assertRaises(StompConnectionError, client.disconnect)

    def test_send_without_receipt(self):
        client = self._connected_client(sync=False)
        self.assertTrue(client.send('/queue/a', b'hi', {'foo': 'bar'}))
        self.assertEqual(self.channel.frames()[-1], StompFrame(StompSpec.SEND, {'foo': 'bar', 'destination': '/queue/a'}, b'hi'))

    def test_send_with_receipt(self):
        client = self._connected_client()
        receipt = {}
        def write(data):
            self.channel.written.append(data)
            frame = self.channel.frames()[-1]
            receipt['id'] = frame.get(StompSpec.RECEIPT_HEADER)
            self.channel.incoming = [b'MESSAGE\nmessage-id:1\n\nearly\x00', ('RECEIPT\nreceipt-id:%s\n\n\x00' % receipt['id']).encode('utf-8')]
        self.channel.write = write
        self.assertTrue(client.send('/queue/a', b'hi'))
        self.assertTrue(receipt['id'])
        self.assertFalse(client.isBufferEmpty())
        self.assertEqual(client.readFrame().body, b'early')
        self.assertTrue(client.isBufferEmpty())

    def test_send_missing_receipt(self):
        client = self._connected_client(receiptTimeout=0.5)
        self.assertRaises(StompMissingReceipt, client.send, '/queue/a', b'hi')
        self.assertEqual(len(self.channel.waits), 1)

    def test_send_wrong_receipt(self):
        client = self._connected_client(incoming=[b'RECEIPT\nreceipt-id:other\n\n\x00'])
        self.assertRaises(StompUnexpectedResponse, client.send, '/queue/a', b'hi')

    def test_send_frame(self):
        client = self._connected_client(sync=False)
        frame = StompMap({'foo': 'bar'})
        client.send('/queue/map', frame, {'priority': '4'})
        sent = self.channel.frames()[-1]
        self.assertEqual(sent.headers, {'transformation': 'jms-map-json', 'priority': '4', 'destination': '/queue/map'})
        self.assertEqual(simplejson.loads(sent.body.decode('utf-8')), {'foo': 'bar'})

    def test_read_frame(self):
        client = self._connected_client(incoming=[b'MESSAGE\nmessage-id:1\n\nbody\x00'])
        self.assertEqual(client.readFrame().body, b'body')
        self.assertEqual(client.readFrame(), None)

    def test_can_read(self):
        client = self._connected_client(incoming=[b'MESSAGE\nmessage-id:1\n\nfirst\x00MESSAGE\nmessage-id:2\n\nsecond\x00'])
        self.assertTrue(client.canRead(1.0))
        self.assertEqual(client.readFrame().body, b'first')
        self.assertTrue(client.canRead(1.0))
        self.assertEqual(client.readFrame().body, b'second')
        self.assertFalse(client.canRead(1.0))
        self.assertEqual(self.channel.waits, [1.0])

    def test_disconnect(self):
        client = self._connected_client(sync=False, clientId='client-7')
        client.disconnect()
        self.assertEqual(self.channel.frames()[-1], StompFrame(StompSpec.DISCONNECT, {'client-id': 'client-7'}))
        self.channel.close.assert_called_once_with()
        self.assertEqual(client.session, None)
        self.assertRaises(StompConnectionError, lambda: client.protocol)

    def test_disconnect_when_channel_is_gone(self):
        client = self._connected_client(sync=False)
        self.channel.connected = False
        client.disconnect()
        self.channel.close.assert_called_once_with()

    def test_heartbeats(self):
        client = self._client([CONNECTED.replace(b'\n\n', b'\nheart-beat:0,1000\n\n', 1)], heartbeat=(1000, 0))
        emitter = StompHeartbeatEmitter(client.transport, clock=self.clock.seconds)
        client.transport.observers.add(emitter)
        client.connect()
        self.assertTrue(emitter.isEnabled())
        for _ in range(7):
            client.readFrame()
        self.channel.sendAlive.assert_called_once_with(1.0)

    def test_session(self):
        message = b'MESSAGE\nmessage-id:m-1\nack:a-1\nsubscription:0\ndestination:/queue/a\n\npayload\x00'
        client = self._connected_client(incoming=[message], sync=False)
        session = StompSession(client)
        subscriptionId = session.subscribe('/queue/a', ack=StompSpec.ACK_CLIENT_INDIVIDUAL)
        frame = session.read()
        self.assertTrue(session.currentSubscriptions()[0].belongsTo(frame))
        session.ack(frame)
        session.unsubscribe(subscriptionId)
        self.assertEqual([frame.command for frame in self.channel.frames()], ['CONNECT', 'SUBSCRIBE', 'ACK', 'UNSUBSCRIBE'])
        self.assertEqual(self.channel.frames()[2].headers, {'id': 'a-1'})
        self.assertEqual(self.channel.frames()[1].get('activemq.prefetchSize'), '1')

if __name__ == '__main__':
    unittest.main()
