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
import time

from stompcore.error import StompConfigurationError, StompConnectionError, StompHeartbeatError

from .observer import StompConnectionObserver
from .spec import StompSpec

LOG_CATEGORY = __name__

class StompHeartbeat(StompConnectionObserver):
    """Common behavior of the heart-beat observers: both learn the negotiated intervals from the **heart-beat** headers of the outgoing **CONNECT** and the incoming **CONNECTED** frame, and become enabled once both relevant intervals are non-zero.

    :param clock: A callable returning the current time in seconds. Defaults to :func:`time.monotonic`.
    """
    def __init__(self, clock=None):
        self.log = logging.getLogger(LOG_CATEGORY)
        self.clock = clock or time.monotonic
        self.intervalClient = None
        self.intervalServer = None
        self.interval = None
        self._enabled = False
        self._lastBeat = None

    def isEnabled(self):
        return self._enabled

    def isDelayed(self):
        """Whether more time than the agreed interval has passed since the last remembered activity."""
        if self._enabled and (self._lastBeat is not None):
            return (self.clock() - self._lastBeat) > self.interval
        return False

    def receivedFrame(self, frame):
        if self._enabled:
            self.onServerActivity()
        elif frame.command == StompSpec.CONNECTED:
            self._enable(frame)

    def sentFrame(self, frame):
        if self._enabled:
            self.onClientActivity()
        elif frame.command == StompSpec.CONNECT:
            self._enable(frame)

    def emptyLineReceived(self):
        self.onServerActivity()

    def emptyBuffer(self):
        self.onServerActivity()

    def emptyRead(self):
        self.onPotentialConnectionStateActivity()

    def onHeartbeatFrame(self, frame, beats):
        raise NotImplementedError

    def calculateInterval(self, maximum):
        raise NotImplementedError

    def onServerActivity(self):
        pass

    def onClientActivity(self):
        pass

    def onPotentialConnectionStateActivity(self):
        pass

    def onDelay(self):
        raise NotImplementedError

    def checkDelayed(self):
        if self.isDelayed():
            self.onDelay()

    def rememberActivity(self):
        self._lastBeat = self.clock()

    def _heartbeats(self, frame):
        beats = frame.get(StompSpec.HEART_BEAT_HEADER)
        if not beats:
            return (0, 0)
        try:
            send, receive = (int(beat) for beat in beats.split(StompSpec.HEART_BEAT_SEPARATOR))
        except (AttributeError, ValueError):
            self.log.warning('Ignoring invalid heart-beat header [%s]' % beats)
            return (0, 0)
        return (send, receive)

    def _enable(self, frame):
        self.onHeartbeatFrame(frame, self._heartbeats(frame))
        if not (self.intervalClient and self.intervalServer):
            return
        interval = self.calculateInterval(max(self.intervalClient, self.intervalServer))
        self.interval = interval / 1000.0
        if interval:
            self._enabled = True
            self.log.debug('%s enabled [interval=%.3fs]' % (self.__class__.__name__, self.interval))
            self.rememberActivity()

class StompHeartbeatEmitter(StompHeartbeat):
    """Sends heart-beats to the broker whenever the client has been idle for a fraction (:attr:`intervalUsage`) of the agreed interval.

    :param transport: The channel to write the heart-beat on. It must implement :meth:`sendAlive` and :meth:`readTimeout`.
    :param intervalUsage: The fraction of the agreed interval after which a beat is sent. Clamped to [0.05, 0.95].
    :param clock: See :class:`StompHeartbeat`.
    """
    def __init__(self, transport, intervalUsage=0.65, clock=None):
        super().__init__(clock)
        self.transport = transport
        self.intervalUsage = max(0.05, min(intervalUsage, 0.95))
        self.pessimistic = False

    def onHeartbeatFrame(self, frame, beats):
        if frame.command == StompSpec.CONNECTED:
            self.intervalServer = beats[1]
            if self.intervalClient is None:
                self.intervalClient = self.intervalServer
        else:
            self.intervalClient = beats[0]
            self.rememberActivity()

    def calculateInterval(self, maximum):
        interval = maximum * self.intervalUsage
        self._checkReadTimeout(interval)
        return interval

    def _checkReadTimeout(self, interval):
        seconds, microseconds = self.transport.readTimeout()
        timeout = (seconds * 1000) + (microseconds / 1000.0)
        if interval < timeout:
            raise StompConfigurationError('Client heart-beat interval is lower than the read timeout of the connection [%sms < %sms]' % (interval, timeout))

    def onServerActivity(self):
        self.checkDelayed()

    def onClientActivity(self):
        self.rememberActivity()

    def onPotentialConnectionStateActivity(self):
        if self.pessimistic and self.isEnabled():
            self.onDelay()
        else:
            self.checkDelayed()

    def onDelay(self):
        self.log.debug('Sending heart-beat')
        try:
            self.transport.sendAlive(self.intervalClient / 1000.0)
        except StompConnectionError as e:
            self.log.error('Could not send heart-beat [%s]' % e)
            raise StompHeartbeatError('Could not send heart-beat to server [%s]' % e) from e
        self.rememberActivity()

class StompLivenessDetector(StompHeartbeat):
    """Watches the heart-beats of the broker, and raises a :class:`~stompcore.error.StompHeartbeatError` once the broker has been silent for longer than :attr:`intervalUsage` times the agreed interval.

    :param intervalUsage: The tolerated multiple of the agreed interval. At least 1.
    :param clock: See :class:`StompHeartbeat`.
    """
    def __init__(self, intervalUsage=1.5, clock=None):
        super().__init__(clock)
        self.intervalUsage = max(1, intervalUsage)

    def onHeartbeatFrame(self, frame, beats):
        if frame.command == StompSpec.CONNECT:
            self.intervalClient = beats[1]
        else:
            self.intervalServer = beats[0]
            self.rememberActivity()

    def calculateInterval(self, maximum):
        return maximum * self.intervalUsage

    def onServerActivity(self):
        self.rememberActivity()

    def onPotentialConnectionStateActivity(self):
        self.checkDelayed()

    def onDelay(self):
        self.log.warning('Broker heart-beat missing for more than %.3fs' % self.interval)
        raise StompHeartbeatError('The server failed to send expected heart-beats [interval=%.3fs]' % self.interval)
