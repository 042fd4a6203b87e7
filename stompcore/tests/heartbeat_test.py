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
from twisted.internet import task

from stompcore.error import StompConfigurationError, StompConnectionError, StompHeartbeatError
from stompcore.protocol import commands
from stompcore.protocol.frame import StompFrame
from stompcore.protocol.heartbeat import StompHeartbeatEmitter, StompLivenessDetector
from stompcore.protocol.spec import StompSpec

logging.basicConfig(level=logging.DEBUG)

def connected(heartbeat):
    return StompFrame(StompSpec.CONNECTED, {StompSpec.HEART_BEAT_HEADER: heartbeat, StompSpec.VERSION_HEADER: '1.2'})

class StompHeartbeatEmitterTest(unittest.TestCase):
    def setUp(self):
        self.clock = task.Clock()
        self.transport = Mock()
        self.transport.readTimeout.return_value = (0, 50000)
        self.transport.sendAlive.return_value = True

    def _emitter(self, **kwargs):
        return StompHeartbeatEmitter(self.transport, clock=self.clock.seconds, **kwargs)

    def _negotiate(self, emitter, client='100,0', server='0,100'):
        emitter.sentFrame(commands.connect(heartbeat=tuple(int(b) for b in client.split(','))))
        emitter.receivedFrame(connected(server))

    def test_interval_usage_is_clamped(self):
        self.assertEqual(self._emitter().intervalUsage, 0.65)
        self.assertEqual(self._emitter(intervalUsage=2).intervalUsage, 0.95)
        self.assertEqual(self._emitter(intervalUsage=0).intervalUsage, 0.05)

    def test_enabled_after_negotiation(self):
        emitter = self._emitter()
        self.assertFalse(emitter.isEnabled())
        self._negotiate(emitter)
        self.assertTrue(emitter.isEnabled())
        self.assertAlmostEqual(emitter.interval, 0.065)

    def test_not_enabled_if_server_refuses(self):
        emitter = self._emitter()
        self._negotiate(emitter, server='0,0')
        self.assertFalse(emitter.isEnabled())
        emitter = self._emitter()
        emitter.receivedFrame(connected('0,100'))
        self.assertTrue(emitter.isEnabled())
        self.assertEqual(emitter.intervalClient, 100)

    def test_not_enabled_without_heartbeat_header(self):
        emitter = self._emitter()
        emitter.sentFrame(StompFrame(StompSpec.CONNECT))
        emitter.receivedFrame(StompFrame(StompSpec.CONNECTED))
        self.assertFalse(emitter.isEnabled())

    def test_invalid_heartbeat_header(self):
        for heartbeat in ('100', '100,100,100', 'x,100', True):
            emitter = self._emitter()
            emitter.sentFrame(commands.connect(heartbeat=(100, 0)))
            emitter.receivedFrame(connected(heartbeat))
            self.assertFalse(emitter.isEnabled())
            self.assertEqual(emitter.intervalServer, 0)

    def test_sends_heartbeat_when_idle(self):
        emitter = self._emitter()
        self._negotiate(emitter)
        self.clock.advance(0.05)
        emitter.emptyRead()
        self.assertFalse(self.transport.sendAlive.called)
        self.clock.advance(0.02)
        self.assertTrue(emitter.isDelayed())
        emitter.emptyRead()
        self.transport.sendAlive.assert_called_once_with(0.1)
        self.assertFalse(emitter.isDelayed())
        emitter.emptyRead()
        self.assertEqual(self.transport.sendAlive.call_count, 1)

    def test_client_activity_postpones_heartbeat(self):
        emitter = self._emitter()
        self._negotiate(emitter)
        self.clock.advance(0.05)
        emitter.sentFrame(StompFrame(StompSpec.SEND))
        self.clock.advance(0.05)
        emitter.emptyLineReceived()
        self.assertFalse(self.transport.sendAlive.called)
        self.clock.advance(0.02)
        emitter.receivedFrame(StompFrame(StompSpec.MESSAGE))
        self.assertEqual(self.transport.sendAlive.call_count, 1)

    def test_pessimistic_mode(self):
        emitter = self._emitter()
        emitter.pessimistic = True
        emitter.emptyRead()
        self.assertFalse(self.transport.sendAlive.called)
        self._negotiate(emitter)
        emitter.emptyRead()
        self.assertEqual(self.transport.sendAlive.call_count, 1)

    def test_read_timeout_guard(self):
        self.transport.readTimeout.return_value = (1, 0)
        emitter = self._emitter()
        self.assertRaises(StompConfigurationError, self._negotiate, emitter)
        self.assertFalse(emitter.isEnabled())

    def test_failed_heartbeat_write(self):
        self.transport.sendAlive.side_effect = StompConnectionError('Could not send heart-beat')
        emitter = self._emitter()
        self._negotiate(emitter)
        self.clock.advance(0.1)
        self.assertRaises(StompHeartbeatError, emitter.emptyRead)

class StompLivenessDetectorTest(unittest.TestCase):
    def setUp(self):
        self.clock = task.Clock()

    def _detector(self, **kwargs):
        detector = StompLivenessDetector(clock=self.clock.seconds, **kwargs)
        detector.sentFrame(commands.connect(heartbeat=(0, 100)))
        detector.receivedFrame(connected('100,0'))
        return detector

    def test_interval(self):
        detector = self._detector()
        self.assertTrue(detector.isEnabled())
        self.assertAlmostEqual(detector.interval, 0.15)
        self.assertEqual(StompLivenessDetector(intervalUsage=0.5).intervalUsage, 1)

    def test_missing_heartbeat(self):
        detector = self._detector()
        self.clock.advance(0.14)
        detector.emptyRead()
        self.clock.advance(0.02)
        self.assertRaises(StompHeartbeatError, detector.emptyRead)

    def test_server_activity_keeps_connection_alive(self):
        detector = self._detector()
        for _ in range(10):
            self.clock.advance(0.1)
            detector.emptyLineReceived()
            detector.emptyRead()
        self.clock.advance(0.1)
        detector.receivedFrame(StompFrame(StompSpec.MESSAGE))
        self.clock.advance(0.1)
        detector.emptyRead()
        self.clock.advance(0.1)
        detector.emptyBuffer()
        self.clock.advance(0.1)
        detector.emptyRead()

    def test_client_activity_is_ignored(self):
        detector = self._detector()
        self.clock.advance(0.1)
        detector.sentFrame(StompFrame(StompSpec.SEND))
        self.clock.advance(0.1)
        self.assertTrue(detector.isDelayed())
        self.assertRaises(StompHeartbeatError, detector.emptyRead)

    def test_not_enabled_if_client_does_not_expect_heartbeats(self):
        detector = StompLivenessDetector(clock=self.clock.seconds)
        detector.sentFrame(commands.connect(heartbeat=(100, 0)))
        detector.receivedFrame(connected('100,0'))
        self.assertFalse(detector.isEnabled())
        self.clock.advance(10)
        detector.emptyRead()

    def test_invalid_heartbeat_header(self):
        detector = StompLivenessDetector(clock=self.clock.seconds)
        detector.sentFrame(StompFrame(StompSpec.CONNECT, {StompSpec.HEART_BEAT_HEADER: '0'}))
        detector.receivedFrame(connected('100'))
        self.assertEqual((detector.intervalClient, detector.intervalServer), (0, 0))
        self.assertFalse(detector.isEnabled())

class StompHeartbeatScenarioTest(unittest.TestCase):
    def test_emitter_and_detector(self):
        clock = task.Clock()
        transport = Mock()
        transport.readTimeout.return_value = (0, 10000)
        transport.sendAlive.return_value = True
        emitter = StompHeartbeatEmitter(transport, clock=clock.seconds)
        detector = StompLivenessDetector(clock=clock.seconds)
        emitter.sentFrame(commands.connect(heartbeat=(100, 0)))
        emitter.receivedFrame(connected('0,100'))
        detector.sentFrame(commands.connect(heartbeat=(0, 100)))
        detector.receivedFrame(connected('100,0'))

        clock.advance(0.066)
        emitter.emptyRead()
        detector.emptyRead()
        self.assertEqual(transport.sendAlive.call_count, 1)
        self.assertFalse(emitter.isDelayed())

        clock.advance(0.083)
        detector.emptyRead()
        clock.advance(0.002)
        self.assertRaises(StompHeartbeatError, detector.emptyRead)

if __name__ == '__main__':
    unittest.main()
